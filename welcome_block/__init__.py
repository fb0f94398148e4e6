"""
Welcome Block : bloc de bienvenue pour utilisateurs authentifiés.

Usage :
    >>> from welcome_block import WelcomeBlock, Services, create_block, WELCOME_PLUGIN_ID
    >>> block = create_block(WELCOME_PLUGIN_ID, {"welcome_message": "Hi!"}, services)
    >>> if block.can_view(account):
    ...     vm = block.render()
"""
from .blocks import BLOCK_REGISTRY, WELCOME_PLUGIN_ID, BlockPlugin, WelcomeBlock, create_block, register_block
from .core import (
    Account, AccountProxy, DateFormatter, EntityTypeManager, FormSpec, FormState, Link, Services, Url,
)
from .models import BlockConfiguration, DateFormatOption, RenderViewModel

__version__ = "1.0.0"

__all__ = [
    "BlockPlugin", "WelcomeBlock", "BLOCK_REGISTRY", "WELCOME_PLUGIN_ID", "create_block", "register_block",
    "Account", "AccountProxy", "DateFormatter", "EntityTypeManager", "FormSpec", "FormState",
    "Link", "Services", "Url",
    "BlockConfiguration", "DateFormatOption", "RenderViewModel",
]
