from __future__ import annotations

from typing import Any, Mapping, Optional

from ..database import tables
from ..database.store import DataStore
from .model import Account
from .repository import AccountRepository


def row_to_account(row: Mapping[str, Any]) -> Account:
    return Account(account_id=str(row["id"]), email=row["email"], password_hash=row["password_hash"])


class StoreAccountRepository(AccountRepository):
    def __init__(self, store: DataStore):
        self._store = store

    def get_by_id(self, account_id: str) -> Optional[Account]:
        row = self._store.select_one(tables.ACCOUNTS, {"id": account_id})
        return row_to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        row = self._store.select_one(tables.ACCOUNTS, {"email": email})
        return row_to_account(row) if row else None

    def create(self, *, email: str, password_hash: str) -> Account:
        row = self._store.insert(tables.ACCOUNTS, {"email": email, "password_hash": password_hash})
        return row_to_account(row)

    def delete(self, account_id: str) -> bool:
        return self._store.delete(tables.ACCOUNTS, {"id": account_id}) > 0
