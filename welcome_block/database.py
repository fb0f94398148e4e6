"""SQLite : init + session + CRUD helpers"""
import json, os
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, BlockInstanceDB, DateFormatDB, UserDB

DATA_DIR = Path(__file__).parent.parent / "data"

DB_PATH      = os.getenv("DB_PATH", str(DATA_DIR / "welcome_block.db"))
ENGINE       = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=ENGINE)

WELCOME_PLUGIN_ID = "welcome_user_block_authenticated_user_welcome_message"


# Formats livrés avec la plateforme (id, label, pattern, locked)
_DATE_FORMAT_DEFAULTS = [
    ("fallback",           "Fallback date format",  "D, m/d/Y - H:i",   True),
    ("html_date",          "HTML Date",             "Y-m-d",            True),
    ("html_datetime",      "HTML Datetime",         "Y-m-d\\TH:i:sO",   True),
    ("html_month",         "HTML Month",            "Y-m",              True),
    ("html_time",          "HTML Time",             "H:i:s",            True),
    ("html_week",          "HTML Week",             "Y-\\WW",           True),
    ("html_year",          "HTML Year",             "Y",                True),
    ("html_yearless_date", "HTML Yearless date",    "m-d",              True),
    ("long",               "Default long date",     "l, F j, Y - H:i",  False),
    ("medium",             "Default medium date",   "D, m/d/Y - H:i",   False),
    ("short",              "Default short date",    "m/d/Y - H:i",      False),
]


def init_db(engine: Optional[Engine] = None):
    engine = engine or ENGINE
    if engine is ENGINE:
        Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=engine)
    # Seed formats + bloc welcome (only if tables are empty)
    with Session(bind=engine) as db:
        if db.query(DateFormatDB).count() == 0:
            for fid, label, pattern, locked in _DATE_FORMAT_DEFAULTS:
                db.add(DateFormatDB(id=fid, label=label, pattern=pattern, locked=locked))
        if db.query(BlockInstanceDB).count() == 0:
            db.add(BlockInstanceDB(id="welcome", plugin_id=WELCOME_PLUGIN_ID, region="content"))
        db.commit()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jdict(s: str) -> dict:
    try: return json.loads(s or "{}")
    except ValueError: return {}

def jd(o) -> str:
    return json.dumps(o, ensure_ascii=False)


# ── Users ──
def db_create_user(db: Session, obj: UserDB) -> UserDB:
    db.add(obj); db.commit(); db.refresh(obj); return obj

def db_get_user(db: Session, uid: int) -> Optional[UserDB]:
    return db.query(UserDB).filter_by(uid=uid).first()

def db_get_user_by_name(db: Session, name: str) -> Optional[UserDB]:
    return db.query(UserDB).filter_by(name=name).first()

def db_get_user_by_token(db: Session, token: str) -> Optional[UserDB]:
    if not token:
        return None
    return db.query(UserDB).filter_by(session_token=token, status=True).first()

def db_update_user(db: Session, user: UserDB, **kwargs) -> UserDB:
    for k, v in kwargs.items():
        setattr(user, k, v)
    db.commit(); db.refresh(user); return user


# ── Date formats ──
def db_list_date_format_ids(db: Session) -> List[str]:
    return [row.id for row in db.query(DateFormatDB.id).order_by(DateFormatDB.id).all()]

def db_get_date_formats(db: Session, ids: List[str]) -> List[DateFormatDB]:
    if not ids:
        return []
    return db.query(DateFormatDB).filter(DateFormatDB.id.in_(ids)).order_by(DateFormatDB.id).all()

def db_get_date_format(db: Session, fid: str) -> Optional[DateFormatDB]:
    return db.query(DateFormatDB).filter_by(id=fid).first()


# ── Block instances ──
def db_list_blocks(db: Session, region: Optional[str] = None) -> List[BlockInstanceDB]:
    q = db.query(BlockInstanceDB)
    if region: q = q.filter_by(region=region)
    return q.order_by(BlockInstanceDB.weight, BlockInstanceDB.id).all()

def db_get_block(db: Session, block_id: str) -> Optional[BlockInstanceDB]:
    return db.query(BlockInstanceDB).filter_by(id=block_id).first()

def db_save_block_settings(db: Session, block: BlockInstanceDB, settings: dict) -> BlockInstanceDB:
    block.settings = jd(settings)
    db.commit(); db.refresh(block); return block
