"""
Data models : comptes, formats de date, instances de blocs
SQLAlchemy (SQLite) + Pydantic v2
"""
import time
from typing import List, Optional

import sqlalchemy as sa
from pydantic import BaseModel
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


CUSTOM_FORMAT = "custom"


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class UserDB(Base):
    __tablename__ = "users"
    uid:        Mapped[int]           = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name:       Mapped[str]           = mapped_column(sa.String, unique=True, nullable=False)
    pass_hash:  Mapped[str]           = mapped_column(sa.String, nullable=False)
    status:     Mapped[bool]          = mapped_column(sa.Boolean, default=True)
    created:    Mapped[int]           = mapped_column(sa.Integer, default=lambda: int(time.time()))
    access:     Mapped[int]           = mapped_column(sa.Integer, default=0)
    login:      Mapped[int]           = mapped_column(sa.Integer, default=0)
    session_token: Mapped[Optional[str]] = mapped_column(sa.String, nullable=True, index=True)


class DateFormatDB(Base):
    __tablename__ = "date_formats"
    id:      Mapped[str]  = mapped_column(sa.String, primary_key=True)
    label:   Mapped[str]  = mapped_column(sa.String, nullable=False)
    pattern: Mapped[str]  = mapped_column(sa.String, nullable=False)
    locked:  Mapped[bool] = mapped_column(sa.Boolean, default=False)


class BlockInstanceDB(Base):
    __tablename__ = "block_instances"
    id:        Mapped[str] = mapped_column(sa.String, primary_key=True)
    plugin_id: Mapped[str] = mapped_column(sa.String, nullable=False)
    region:    Mapped[str] = mapped_column(sa.String, default="content")
    weight:    Mapped[int] = mapped_column(sa.Integer, default=0)
    settings:  Mapped[str] = mapped_column(sa.Text, default="{}")


# ── PYDANTIC SCHEMAS ────────────────────────────────────────────────────

class BlockConfiguration(BaseModel):
    welcome_message:    str = "Hello everyone!"
    date_format:        str = CUSTOM_FORMAT
    date_format_custom: str = "F jS, Y g:i a"


class DateFormatOption(BaseModel):
    id:      str
    label:   str
    example: str

    @property
    def option_label(self) -> str:
        return f"{self.label} - {self.example}"


class DateFormatOut(BaseModel):
    id:      str
    label:   str
    pattern: str
    locked:  bool = False


class LinkOut(BaseModel):
    text: str
    url:  str


class RenderViewModel(BaseModel):
    welcome_message: str
    username:        str
    last_login_date: str
    link:            LinkOut


class CacheMetadata(BaseModel):
    contexts: List[str] = []
    tags:     List[str] = []
    max_age:  int = -1


class BlockBuild(BaseModel):
    """Sortie de build() : thème + variables + métadonnées de cache."""
    theme:     str
    variables: RenderViewModel
    cache:     CacheMetadata = CacheMetadata()
