from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_datetime
from ..database import tables
from ..database.store import DataStore, OrderBy
from .model import Invitation
from .repository import InvitationRepository


def row_to_invitation(row: Mapping[str, Any]) -> Invitation:
    return Invitation(
        invitation_id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        phone=row.get("phone"),
        token=row["token"],
        created_by=str(row["created_by"]),
        expires_at=coerce_datetime(row["expires_at"]),
        used=bool(row.get("used", False)),
    )


class StoreInvitationRepository(InvitationRepository):
    def __init__(self, store: DataStore):
        self._store = store

    def create(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str],
        token: str,
        created_by: str,
        expires_at: datetime,
    ) -> Invitation:
        row = self._store.insert(
            tables.INVITATIONS,
            {
                "name": name,
                "email": email,
                "phone": phone,
                "token": token,
                "created_by": created_by,
                "expires_at": expires_at,
                "used": False,
            },
        )
        return row_to_invitation(row)

    def find_unused(self, *, token: str, email: str) -> Optional[Invitation]:
        row = self._store.select_one(tables.INVITATIONS, {"token": token, "email": email, "used": False})
        return row_to_invitation(row) if row else None

    def set_used(self, invitation_id: str, used: bool = True) -> bool:
        return self._store.update(tables.INVITATIONS, {"id": invitation_id}, {"used": bool(used)}) is not None

    def list_pending(self) -> Sequence[Invitation]:
        rows = self._store.select_many(
            tables.INVITATIONS,
            {"used": False},
            order_by=(OrderBy("created_at", descending=True),),
        )
        return [row_to_invitation(r) for r in rows]
