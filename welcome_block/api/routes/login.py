"""
Login / logout : comptes utilisateurs + accès admin.

GET  /user/login   → page formulaire
POST /user/login   → vérifie name + mot de passe, pose le cookie session_token, redirige vers /
GET  /user/logout  → efface le cookie, redirige vers /
GET  /user/{uid}   → page profil (cible du lien "Visit your profile")
POST /admin/login  → valide ADMIN_PASSWORD, pose le cookie admin_token
POST /api/admin/users → crée un compte (protégé par ADMIN_TOKEN)
"""
import html
import logging
import os
import time

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ...core.cache import render_cache, user_tag
from ...core.i18n import current_language
from ...core.session import hash_password, new_session_token, verify_password
from ...database import (
    db_create_user, db_get_user, db_get_user_by_name, db_get_user_by_token, db_update_user, get_db,
)
from ...models import UserDB
from ...renderer.html import render_page
from ..deps import SESSION_COOKIE, check_admin

log = logging.getLogger(__name__)
router = APIRouter(tags=["Auth"])


def _admin_token() -> str:
    return os.getenv("ADMIN_TOKEN", "changeme")


def _admin_password() -> str:
    return os.getenv("ADMIN_PASSWORD", "changeme")


def _login_form(action: str, with_name: bool, error: str) -> str:
    err_html = '<p class="error">Identifiants incorrects.</p>' if error else ""
    name_input = '<label>Username</label><input type="text" name="name" autofocus>' if with_name else ""
    return f"""<form method="POST" action="{action}" class="block">
  {name_input}
  <label>Password</label>
  <input type="password" name="password">
  <button class="btn" type="submit">Log in</button>
</form>
{err_html}"""


class UserCreate(BaseModel):
    name: str
    password: str


# ── Utilisateurs ───────────────────────────────────────────────────────────

@router.get("/user/login", response_class=HTMLResponse)
def login_page(error: str = ""):
    return HTMLResponse(render_page("Log in", _login_form("/user/login", True, error), lang=current_language()))


@router.post("/user/login")
async def login_submit(request: Request, db: Session = Depends(get_db)):
    form = await request.form()
    name = str(form.get("name", ""))
    user = db_get_user_by_name(db, name)

    if user is None or not user.status or not verify_password(str(form.get("password", "")), user.pass_hash):
        log.warning("Échec de connexion pour %r", name)
        return RedirectResponse("/user/login?error=1", status_code=303)

    now = int(time.time())
    token = new_session_token()
    db_update_user(db, user, login=now, access=now, session_token=token)
    render_cache.invalidate_tags([user_tag(user.uid)])
    log.info("Connexion de %s (uid=%d)", user.name, user.uid)

    resp = RedirectResponse("/", status_code=303)
    resp.set_cookie(key=SESSION_COOKIE, value=token, httponly=True, samesite="lax",
                    max_age=60 * 60 * 24 * 7)
    return resp


@router.get("/user/logout")
def logout(request: Request, db: Session = Depends(get_db)):
    user = db_get_user_by_token(db, request.cookies.get(SESSION_COOKIE, ""))
    if user is not None:
        db_update_user(db, user, session_token=None)
        render_cache.invalidate_tags([user_tag(user.uid)])
    resp = RedirectResponse("/", status_code=303)
    resp.delete_cookie(SESSION_COOKIE)
    return resp


@router.get("/user/{uid}", response_class=HTMLResponse)
def user_profile(uid: int, db: Session = Depends(get_db)):
    user = db_get_user(db, uid)
    if user is None or not user.status:
        raise HTTPException(404, "Utilisateur introuvable")
    body = f"<h1>{html.escape(user.name)}</h1>\n<p>Member since {time.strftime('%Y-%m-%d', time.gmtime(user.created))}</p>"
    return HTMLResponse(render_page(user.name, body, lang=current_language()))


# ── Admin ──────────────────────────────────────────────────────────────────

@router.get("/admin/login", response_class=HTMLResponse)
def admin_login_page(error: str = ""):
    return HTMLResponse(render_page("Admin", _login_form("/admin/login", False, error), lang=current_language()))


@router.post("/admin/login")
async def admin_login_submit(request: Request):
    form = await request.form()
    if form.get("password", "") != _admin_password():
        return RedirectResponse("/admin/login?error=1", status_code=303)
    resp = RedirectResponse("/", status_code=303)
    resp.set_cookie(key="admin_token", value=_admin_token(), httponly=True, samesite="lax",
                    max_age=60 * 60 * 24 * 7)
    return resp


@router.post("/api/admin/users", dependencies=[Depends(check_admin)])
def create_user(req: UserCreate, db: Session = Depends(get_db)):
    if db_get_user_by_name(db, req.name):
        raise HTTPException(409, f"Utilisateur {req.name} existe déjà")
    user = db_create_user(db, UserDB(name=req.name, pass_hash=hash_password(req.password)))
    log.info("Compte créé : %s (uid=%d)", user.name, user.uid)
    return {"uid": user.uid, "name": user.name}
