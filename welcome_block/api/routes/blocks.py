"""
Affichage des blocs placés.

GET /                     → page avec tous les blocs visibles par le visiteur
GET /block/{block_id}     → HTML d'un bloc (204 si accès refusé)
GET /api/blocks/{block_id} → view-model JSON + métadonnées de cache (403 si accès refusé)
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from ...blocks import create_block
from ...core.i18n import current_language
from ...core.links import Url
from ...core.services import Services
from ...core.session import Account
from ...database import db_list_blocks, get_db, jdict
from ...renderer.html import render_page
from ..deps import get_account, get_services, load_block, render_block_cached

log = logging.getLogger(__name__)
router = APIRouter(tags=["Blocks"])


@router.get("/", response_class=HTMLResponse)
def front_page(
    account: Account = Depends(get_account),
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    parts = []
    for instance in db_list_blocks(db, region="content"):
        block = create_block(instance.plugin_id, jdict(instance.settings), services)
        if block.access(account):
            parts.append(render_block_cached(instance, block, account))
    if account.is_anonymous():
        parts.append(f'<p><a href="{Url.from_route("user.login").to_string()}">Log in</a></p>')
    return HTMLResponse(render_page("Home", "\n".join(parts), lang=current_language()))


@router.get("/block/{block_id}", response_class=HTMLResponse)
def block_html(
    block_id: str,
    account: Account = Depends(get_account),
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    instance, block = load_block(db, block_id, services)
    if not block.access(account):
        return Response(status_code=204)
    return HTMLResponse(render_block_cached(instance, block, account))


@router.get("/api/blocks/{block_id}")
def block_json(
    block_id: str,
    account: Account = Depends(get_account),
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    _, block = load_block(db, block_id, services)
    if not block.access(account):
        raise HTTPException(403, "Accès refusé")
    return block.build().model_dump()
