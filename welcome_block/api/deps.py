"""
Dépendances FastAPI : compte courant, services injectés, chargement des blocs.
"""
import logging
import os
import time
from typing import Tuple

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..blocks import BlockPlugin, create_block
from ..core.cache import (
    REQUIRED_CACHE_CONTEXTS, block_config_tag, cache_key, merge_contexts, merge_tags, render_cache, user_tag,
)
from ..core.dates import DateFormatter
from ..core.entity import EntityTypeManager
from ..core.i18n import current_language
from ..core.services import Services
from ..core.session import ANONYMOUS, Account, AccountProxy
from ..database import db_get_block, db_get_user_by_token, db_update_user, get_db, jdict
from ..models import BlockInstanceDB
from ..renderer.html import render_build

log = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"
# Écriture de users.access au plus une fois par intervalle
ACCESS_WRITE_INTERVAL = 180


def site_theme() -> str:
    return os.getenv("SITE_THEME", "default")


def check_admin(request: Request) -> str:
    token = (request.headers.get("X-Admin-Token")
             or request.query_params.get("token")
             or request.cookies.get("admin_token", ""))
    if token != os.getenv("ADMIN_TOKEN", "changeme"):
        raise HTTPException(403, "Accès refusé")
    return token


def get_account(request: Request, db: Session = Depends(get_db)) -> Account:
    user = db_get_user_by_token(db, request.cookies.get(SESSION_COOKIE, ""))
    if user is None:
        return ANONYMOUS
    # Snapshot avant mise à jour : le bloc affiche l'accès précédent
    account = Account.from_db(user)
    now = int(time.time())
    if now - (user.access or 0) > ACCESS_WRITE_INTERVAL:
        db_update_user(db, user, access=now)
    return account


def get_services(account: Account = Depends(get_account), db: Session = Depends(get_db)) -> Services:
    entity_type_manager = EntityTypeManager(db)
    return Services(
        current_user=AccountProxy(account),
        date_formatter=DateFormatter(entity_type_manager.get_storage("date_format")),
        entity_type_manager=entity_type_manager,
    )


def load_block(db: Session, block_id: str, services: Services) -> Tuple[BlockInstanceDB, BlockPlugin]:
    instance = db_get_block(db, block_id)
    if instance is None:
        raise HTTPException(404, f"Bloc {block_id} introuvable")
    return instance, create_block(instance.plugin_id, jdict(instance.settings), services)


def render_block_cached(instance: BlockInstanceDB, block: BlockPlugin, account: Account) -> str:
    """HTML du bloc, servi depuis le cache de rendu selon ses contextes."""
    contexts = merge_contexts(block.get_cache_contexts(), REQUIRED_CACHE_CONTEXTS)
    key = cache_key(instance.id, contexts, account, current_language(), site_theme())
    cached = render_cache.get(key)
    if cached is not None:
        return cached
    build = block.build()
    html = render_build(build, block_id=instance.id)
    if build.cache.max_age != 0:
        tags = merge_tags(build.cache.tags, [block_config_tag(instance.id)])
        if "user" in contexts:
            # Purgé à la connexion / déconnexion du compte
            tags = merge_tags(tags, [user_tag(account.id())])
        render_cache.set(key, html, tags)
    return html
