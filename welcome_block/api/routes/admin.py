"""
Admin blocs : GET/POST /admin/structure/block/manage/{block_id}  (protégé par ADMIN_TOKEN)

GET  /admin/structure/block/manage/{id}  → formulaire HTML
POST /admin/structure/block/manage/{id}  → validation + enregistrement
GET  /api/admin/blocks/{id}/form         → FormSpec JSON
POST /api/admin/blocks/{id}              → {values} → configuration enregistrée (422 si erreurs)
"""
import html
import logging
from typing import Dict
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...core.cache import block_config_tag, render_cache
from ...core.forms import process_block_form
from ...core.i18n import current_language, t
from ...core.links import Url
from ...core.services import Services
from ...database import db_save_block_settings, get_db
from ...renderer.html import render_form, render_page
from ..deps import check_admin, get_services, load_block

log = logging.getLogger(__name__)
router = APIRouter(tags=["Admin"], dependencies=[Depends(check_admin)])


class BlockFormSubmit(BaseModel):
    values: Dict[str, str]


def _save(db: Session, instance, block):
    db_save_block_settings(db, instance, block.get_configuration())
    render_cache.invalidate_tags([block_config_tag(instance.id)])
    log.info("Bloc %s enregistré : %s", instance.id, block.get_configuration())


def _form_page(block, block_id: str, request: Request, values=None, errors=None,
               status_code: int = 200) -> HTMLResponse:
    action = Url.from_route("block.admin_form", {"block": block_id}).to_string()
    if request.query_params.get("token"):
        action += f"?token={quote(request.query_params['token'])}"
    body = f"<h1>{html.escape(block.plugin_definition.get('admin_label', block_id))}</h1>\n"
    body += render_form(block.build_form(), action, values, errors, submit_label=t("Save block"))
    return HTMLResponse(render_page(f"Configure block {block_id}", body, lang=current_language()),
                        status_code=status_code)


# ── HTML ───────────────────────────────────────────────────────────────────

@router.get("/admin/structure/block/manage/{block_id}", response_class=HTMLResponse)
def block_form_page(
    block_id: str,
    request: Request,
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    _, block = load_block(db, block_id, services)
    return _form_page(block, block_id, request)


@router.post("/admin/structure/block/manage/{block_id}")
async def block_form_submit(
    block_id: str,
    request: Request,
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    instance, block = load_block(db, block_id, services)
    form = await request.form()
    state = process_block_form(block, {k: str(v) for k, v in form.items()})
    if state.has_errors():
        return _form_page(block, block_id, request, state.values, state.errors, status_code=422)
    _save(db, instance, block)
    return RedirectResponse(str(request.url), status_code=303)


# ── API JSON ───────────────────────────────────────────────────────────────

@router.get("/api/admin/blocks/{block_id}/form")
def block_form_spec(block_id: str, services: Services = Depends(get_services), db: Session = Depends(get_db)):
    _, block = load_block(db, block_id, services)
    return block.build_form().model_dump()


@router.post("/api/admin/blocks/{block_id}")
def block_form_api(
    block_id: str,
    req: BlockFormSubmit,
    services: Services = Depends(get_services),
    db: Session = Depends(get_db),
):
    instance, block = load_block(db, block_id, services)
    state = process_block_form(block, req.values)
    if state.has_errors():
        raise HTTPException(422, state.errors)
    _save(db, instance, block)
    return {"ok": True, "block_id": block_id, "configuration": block.get_configuration()}
