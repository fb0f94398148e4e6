"""
Entity storage : accès au catalogue des formats de date.

    >>> storage = EntityTypeManager(db).get_storage("date_format")
    >>> formats = storage.load_multiple(storage.get_query().execute())
"""
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..database import db_get_date_format, db_get_date_formats, db_list_date_format_ids
from ..models import DateFormatDB


class DateFormatQuery:
    def __init__(self, db: Session):
        self._db = db

    def execute(self) -> Dict[str, str]:
        """Retourne {id: id} pour chaque format du catalogue."""
        return {fid: fid for fid in db_list_date_format_ids(self._db)}


class DateFormatStorage:
    def __init__(self, db: Session):
        self._db = db

    def get_query(self) -> DateFormatQuery:
        return DateFormatQuery(self._db)

    def load(self, fid: str) -> Optional[DateFormatDB]:
        return db_get_date_format(self._db, fid)

    def load_multiple(self, ids: Optional[List[str]] = None) -> Dict[str, DateFormatDB]:
        if ids is None:
            ids = db_list_date_format_ids(self._db)
        return {f.id: f for f in db_get_date_formats(self._db, list(ids))}


class EntityTypeManager:
    _STORAGE = {
        "date_format": DateFormatStorage,
    }

    def __init__(self, db: Session):
        self._db = db
        self._handlers: dict = {}

    def get_storage(self, entity_type: str):
        if entity_type not in self._STORAGE:
            raise ValueError(f"Type d'entité inconnu : {entity_type!r}. Registry : {list(self._STORAGE)}")
        if entity_type not in self._handlers:
            self._handlers[entity_type] = self._STORAGE[entity_type](self._db)
        return self._handlers[entity_type]
