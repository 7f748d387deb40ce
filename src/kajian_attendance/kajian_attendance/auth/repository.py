from __future__ import annotations

from typing import Optional, Protocol

from .model import Account


class AccountRepository(Protocol):
    def get_by_id(self, account_id: str) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create(self, *, email: str, password_hash: str) -> Account:
        raise NotImplementedError

    def delete(self, account_id: str) -> bool:
        raise NotImplementedError
