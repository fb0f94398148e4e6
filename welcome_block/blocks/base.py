"""
Plugin de bloc : classe parente de tous les blocs.

Cycle de vie appelé par l'hôte :
    access → build_form → validate_form → on_submit → build (à chaque affichage)
"""
from typing import Any, Dict, List, Optional

from ..core.cache import merge_contexts
from ..core.forms import FormSpec, FormState
from ..core.i18n import t


class BlockPlugin:
    """Bloc de base. Les sous-classes surchargent les hooks `block_*` et `build`."""

    def __init__(self, configuration: Dict[str, Any], plugin_id: str, plugin_definition: Dict[str, Any]):
        self.plugin_id = plugin_id
        self.plugin_definition = plugin_definition
        self.configuration: Dict[str, Any] = {}
        self.set_configuration(configuration)

    @classmethod
    def create(cls, services, configuration: Dict[str, Any], plugin_id: str, plugin_definition: Dict[str, Any]):
        return cls(configuration, plugin_id, plugin_definition)

    def t(self, text: str, args: Optional[dict] = None) -> str:
        return t(text, args)

    # ── Configuration ──────────────────────────────────────────────────────

    def default_configuration(self) -> Dict[str, Any]:
        return {}

    def set_configuration(self, configuration: Dict[str, Any]):
        self.configuration = {**self.default_configuration(), **(configuration or {})}

    def get_configuration(self) -> Dict[str, Any]:
        return dict(self.configuration)

    # ── Accès ──────────────────────────────────────────────────────────────

    def block_access(self, account) -> bool:
        return True

    def access(self, account) -> bool:
        return bool(self.block_access(account))

    # ── Formulaire ─────────────────────────────────────────────────────────

    def build_form(self) -> FormSpec:
        return FormSpec()

    def validate_form(self, form_state: FormState):
        pass

    def on_submit(self, form_state: FormState):
        pass

    # ── Rendu ──────────────────────────────────────────────────────────────

    def build(self):
        raise NotImplementedError

    def get_cache_contexts(self) -> List[str]:
        return merge_contexts(self.plugin_definition.get("cache_contexts", []))

    def get_cache_tags(self) -> List[str]:
        return []

    def get_cache_max_age(self) -> int:
        return -1
