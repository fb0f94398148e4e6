"""Services hôte : dates, session, catalogue, liens, cache, formulaires, i18n."""
from .dates import DateFormatter, format_pattern
from .entity import EntityTypeManager, DateFormatStorage
from .session import Account, AccountProxy, ANONYMOUS
from .links import Url, Link
from .cache import RenderCache, merge_contexts, render_cache
from .forms import FormField, FormSpec, FormState, StateCondition, process_block_form
from .i18n import t
from .services import Services

__all__ = [
    "DateFormatter", "format_pattern",
    "EntityTypeManager", "DateFormatStorage",
    "Account", "AccountProxy", "ANONYMOUS",
    "Url", "Link",
    "RenderCache", "merge_contexts", "render_cache",
    "FormField", "FormSpec", "FormState", "StateCondition", "process_block_form",
    "t",
    "Services",
]
