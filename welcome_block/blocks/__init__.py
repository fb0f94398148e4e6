"""
Blocs : registry explicite des plugins + fabrique d'instances.

    >>> block = create_block(WELCOME_PLUGIN_ID, settings, services)
"""
from typing import Any, Dict, Type

from ..database import WELCOME_PLUGIN_ID
from .base import BlockPlugin
from .welcome import WelcomeBlock

BLOCK_REGISTRY: Dict[str, Type[BlockPlugin]] = {}
BLOCK_DEFINITIONS: Dict[str, Dict[str, Any]] = {}


def register_block(plugin_id: str, cls: Type[BlockPlugin], admin_label: str, category: str = "Custom", **extra):
    BLOCK_REGISTRY[plugin_id] = cls
    BLOCK_DEFINITIONS[plugin_id] = {"id": plugin_id, "admin_label": admin_label, "category": category, **extra}


def create_block(plugin_id: str, configuration: Dict[str, Any], services) -> BlockPlugin:
    block_cls = BLOCK_REGISTRY.get(plugin_id)
    if block_cls is None:
        raise ValueError(f"Bloc inconnu : {plugin_id!r}. Registry : {list(BLOCK_REGISTRY)}")
    return block_cls.create(services, configuration, plugin_id, BLOCK_DEFINITIONS[plugin_id])


register_block(WELCOME_PLUGIN_ID, WelcomeBlock, admin_label="Authenticated User Welcome Message")

__all__ = [
    "BlockPlugin", "WelcomeBlock",
    "WELCOME_PLUGIN_ID", "BLOCK_REGISTRY", "BLOCK_DEFINITIONS",
    "register_block", "create_block",
]
