"""
Cache de rendu : contextes, tags, clés.

Un bloc déclare les dimensions dont dépend sa sortie (contexte "user" →
une entrée par compte). La clé de cache est l'id du bloc + la valeur
résolue de chaque contexte pour la requête courante.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

log = logging.getLogger(__name__)

# Contextes ajoutés par le renderer à tout élément mis en cache
REQUIRED_CACHE_CONTEXTS = ["languages:language_interface", "theme"]


def merge_contexts(*groups: Iterable[str]) -> List[str]:
    merged = set()
    for group in groups:
        merged.update(group)
    return sorted(merged)


def merge_tags(*groups: Iterable[str]) -> List[str]:
    return merge_contexts(*groups)


def block_config_tag(block_id: str) -> str:
    return f"config:block.block.{block_id}"


def user_tag(uid: int) -> str:
    return f"user:{uid}"


def resolve_context(context: str, account, lang: str, theme: str) -> str:
    if context == "user":
        return f"user:{account.id()}"
    if context == "user.roles":
        return "user.roles:authenticated" if account.is_authenticated() else "user.roles:anonymous"
    if context.startswith("languages"):
        return f"{context}:{lang}"
    if context == "theme":
        return f"theme:{theme}"
    raise ValueError(f"Contexte de cache inconnu : {context!r}")


def cache_key(block_id: str, contexts: Iterable[str], account, lang: str, theme: str) -> Tuple[str, ...]:
    return (block_id,) + tuple(resolve_context(c, account, lang, theme) for c in sorted(contexts))


class RenderCache:
    """Cache mémoire : clé → (html, tags). Invalidation par tag."""

    def __init__(self):
        self._entries: Dict[Tuple[str, ...], Tuple[str, List[str]]] = {}

    def get(self, key: Tuple[str, ...]) -> Optional[str]:
        entry = self._entries.get(key)
        return entry[0] if entry else None

    def set(self, key: Tuple[str, ...], value: str, tags: Iterable[str] = ()):
        self._entries[key] = (value, list(tags))

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        tags = set(tags)
        stale = [k for k, (_, entry_tags) in self._entries.items() if tags & set(entry_tags)]
        for k in stale:
            del self._entries[k]
        if stale:
            log.info("Cache : %d entrée(s) invalidée(s) pour %s", len(stale), sorted(tags))
        return len(stale)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


render_cache = RenderCache()
