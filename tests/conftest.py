"""Fixtures communes : DB SQLite temporaire, horloge figée, blocs, client HTTP."""
import os
import tempfile

os.environ.setdefault("DB_PATH", os.path.join(tempfile.mkdtemp(), "welcome_block_test.db"))
os.environ["ADMIN_TOKEN"] = "test-token"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from welcome_block.blocks import WELCOME_PLUGIN_ID, create_block
from welcome_block.core.cache import render_cache
from welcome_block.core.dates import DateFormatter
from welcome_block.core.entity import EntityTypeManager
from welcome_block.core.i18n import reload_cache
from welcome_block.core.services import Services
from welcome_block.core.session import Account, AccountProxy, hash_password
from welcome_block.database import db_create_user, get_db, init_db
from welcome_block.models import UserDB

NOW = 1700000000  # 2023-11-14 22:13:20 UTC, un mardi


@pytest.fixture(autouse=True)
def _site_env(monkeypatch):
    monkeypatch.setenv("SITE_TIMEZONE", "UTC")
    monkeypatch.setenv("SITE_LANGUAGE", "en")
    reload_cache()
    render_cache.clear()
    yield
    render_cache.clear()


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def alice():
    return Account(uid=1, name="alice", access=NOW, login=NOW)


@pytest.fixture
def make_block(db):
    """Fabrique un WelcomeBlock avec les vrais services et une horloge figée."""
    def _make(configuration=None, account=None):
        etm = EntityTypeManager(db)
        services = Services(
            current_user=AccountProxy(account),
            date_formatter=DateFormatter(etm.get_storage("date_format"), clock=lambda: NOW),
            entity_type_manager=etm,
            clock=lambda: NOW,
        )
        return create_block(WELCOME_PLUGIN_ID, configuration or {}, services)
    return _make


@pytest.fixture
def client(session_factory):
    from welcome_block.api.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db):
    """Crée un compte avec un token de session, retourne (UserDB, token)."""
    def _create(name: str, access: int = NOW, password: str = "secret"):
        token = f"tok-{name}"
        user = db_create_user(db, UserDB(
            name=name, pass_hash=hash_password(password), access=access, login=access, session_token=token,
        ))
        return user, token
    return _create
