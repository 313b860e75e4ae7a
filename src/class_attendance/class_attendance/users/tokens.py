from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import AuthenticationError
from .model import CallerIdentity


class TokenService:
    """Issue and verify the bearer tokens (HS256 JWT) that carry the caller identity."""

    algorithm = "HS256"

    def __init__(self, secret: str, *, expiry_hours: int = DEFAULT_TOKEN_HOURS):
        self._secret = secret
        self._expiry = timedelta(hours=int(expiry_hours))

    @property
    def expiry_seconds(self) -> int:
        return int(self._expiry.total_seconds())

    def issue(self, *, user_id: int, role: str, name: str = "", now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {
            "id": int(user_id),
            "role": role,
            "name": name,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expiry).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: Optional[str]) -> CallerIdentity:
        if not token:
            raise AuthenticationError("No token provided")
        try:
            data = jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        if "id" not in data or "role" not in data:
            raise AuthenticationError("Invalid token")
        return CallerIdentity(user_id=int(data["id"]), role=str(data["role"]), name=str(data.get("name") or ""))
