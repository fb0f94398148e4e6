"""
Session : compte courant (AccountProxy) + hachage des mots de passe.

Le compte anonyme a l'uid 0 ; tout autre uid est un compte authentifié.
"""
import secrets
from typing import Optional

import bcrypt
from pydantic import BaseModel

from ..models import UserDB


class Account(BaseModel):
    uid:    int = 0
    name:   str = ""
    access: int = 0
    login:  int = 0

    def id(self) -> int:
        return self.uid

    def is_authenticated(self) -> bool:
        return self.uid > 0

    def is_anonymous(self) -> bool:
        return self.uid == 0

    def get_account_name(self) -> str:
        return self.name

    def get_last_accessed_time(self) -> int:
        return self.access

    @classmethod
    def from_db(cls, user: UserDB) -> "Account":
        return cls(uid=user.uid, name=user.name, access=user.access or 0, login=user.login or 0)


ANONYMOUS = Account()


class AccountProxy:
    """Compte de la requête courante ; délègue au compte résolu (anonyme par défaut)."""

    def __init__(self, account: Optional[Account] = None):
        self._account = account or ANONYMOUS

    def set_account(self, account: Account):
        self._account = account

    def get_account(self) -> Account:
        return self._account

    def id(self) -> int:
        return self._account.id()

    def is_authenticated(self) -> bool:
        return self._account.is_authenticated()

    def is_anonymous(self) -> bool:
        return self._account.is_anonymous()

    def get_account_name(self) -> str:
        return self._account.get_account_name()

    def get_last_accessed_time(self) -> int:
        return self._account.get_last_accessed_time()


# ── Mots de passe / tokens ─────────────────────────────────────────────────

def hash_password(password: str) -> str:
    """Hash bcrypt, sel inclus dans la valeur stockée."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # Hash illisible (colonne corrompue)
        return False


def new_session_token() -> str:
    return secrets.token_hex(24)
