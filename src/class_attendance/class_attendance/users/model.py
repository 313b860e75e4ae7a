from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class User:
    """Domain entity: a staff account.

    Note: plain data object (no DB access). role is kept as a string because
    the set of role names differs between deployments.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: str
    staff_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "staffId": self.staff_id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling, as decoded from the bearer token. Never persisted."""

    user_id: int
    role: str
    name: str = ""
