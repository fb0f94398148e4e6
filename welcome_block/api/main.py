"""
WELCOME_BLOCK : FastAPI app (hôte du bloc de bienvenue)
Démarrer : uvicorn welcome_block.api.main:app --reload --port 8001
"""
import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from .routes import admin, blocks, date_formats, login

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="WELCOME_BLOCK : Bloc de bienvenue", version="1.0.0", docs_url="/docs")

_STATIC_DIR = Path(__file__).parent.parent / "static"
app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")


@app.middleware("http")
async def redirect_403_to_login(request: Request, call_next):
    """Redirige les 403 sur /admin/* vers /admin/login pour les navigateurs."""
    response = await call_next(request)
    path = request.url.path
    is_browser = "text/html" in request.headers.get("accept", "")
    if response.status_code == 403 and path.startswith("/admin") and is_browser:
        return RedirectResponse("/admin/login", status_code=303)
    return response


@app.on_event("startup")
def startup():
    from ..database import init_db
    init_db()
    log.info("DB initialisée (SQLite)")


@app.get("/health")
def health():
    return {"status": "ok", "service": "welcome_block", "version": "1.0.0"}


app.include_router(login.router)
app.include_router(admin.router)
app.include_router(date_formats.router)
app.include_router(blocks.router)
