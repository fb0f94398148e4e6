"""Collaborateurs injectés dans les blocs (construits par requête par l'hôte)."""
import time
from typing import Callable

from .dates import DateFormatter
from .entity import EntityTypeManager
from .session import AccountProxy


class Services:
    def __init__(self, current_user: AccountProxy, date_formatter: DateFormatter,
                 entity_type_manager: EntityTypeManager, clock: Callable[[], float] = time.time):
        self.current_user = current_user
        self.date_formatter = date_formatter
        self.entity_type_manager = entity_type_manager
        self.clock = clock
