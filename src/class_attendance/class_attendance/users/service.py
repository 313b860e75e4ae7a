from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .access import AccessPolicy
from .model import CallerIdentity, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class SessionUser:
    """What login hands back to the client (and encodes into the token)."""

    user_id: int
    name: str
    email: str
    role: str

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "email": self.email, "role": self.role}


class AuthService:
    """Use case: authenticate (login) and self-registration."""

    def __init__(self, users: UserRepository):
        self._users = users

    @staticmethod
    def _session_user(user: User) -> SessionUser:
        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)

    def authenticate(self, email: str, password: str) -> SessionUser:
        if not (email or "").strip() or not password:
            raise ValidationError("Email and password required")

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        logger.info("Authentication successful for %s", user.email)
        return self._session_user(user)

    def register(self, *, staff_id: str, name: str, email: str, password: str) -> SessionUser:
        """New registrations always get the teacher role."""

        staff_id = require_non_empty(staff_id, "Staff ID")
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("Email already registered")
        if self._users.get_by_staff_id(staff_id):
            raise ValidationError("Staff ID already registered")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.TEACHER.value,
            staff_id=staff_id,
        )
        return SessionUser(user_id=user_id, name=name, email=email, role=Role.TEACHER.value)


class UserService:
    """Use case: manage staff accounts (admin)."""

    def __init__(self, users: UserRepository, policy: AccessPolicy):
        self._users = users
        self._policy = policy

    def _require_admin(self, caller: CallerIdentity) -> None:
        self._policy.require(caller, self._policy.admins, "Only admins can access this resource")

    def _validate_role(self, role: Optional[str]) -> str:
        role = require_non_empty(role, "Role").lower()
        if role not in self._policy.known_roles:
            allowed = ", ".join(sorted(self._policy.known_roles))
            raise ValidationError(f"Invalid role. Must be one of: {allowed}")
        return role

    def list_users(self, caller: CallerIdentity) -> list[User]:
        self._require_admin(caller)
        return list(self._users.list_all())

    def get_user(self, caller: CallerIdentity, user_id: int) -> User:
        self._require_admin(caller)
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(
        self,
        caller: CallerIdentity,
        *,
        name: str,
        email: str,
        password: str,
        role: str,
        staff_id: Optional[str] = None,
    ) -> User:
        self._require_admin(caller)

        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = self._validate_role(role)
        staff_id = optional_text(staff_id)

        if self._users.get_by_email(email):
            raise ValidationError("Email already exists")
        if staff_id and self._users.get_by_staff_id(staff_id):
            raise ValidationError("Staff ID already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            staff_id=staff_id,
        )
        logger.info("User %s created by %s", email, caller.user_id)
        return User(user_id=user_id, name=name, email=email, password_hash="", role=role, staff_id=staff_id)

    def update_user(
        self,
        caller: CallerIdentity,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role: Optional[str] = None,
        staff_id: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        self._require_admin(caller)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")

        new_role = self._validate_role(role) if role else user.role
        new_name = optional_text(name) or user.name
        new_email = require_email(email) if optional_text(email) else user.email
        new_staff_id = user.staff_id if staff_id is None else optional_text(staff_id)

        if new_email != user.email and self._users.get_by_email(new_email):
            raise ValidationError("Email already exists")
        if new_staff_id and new_staff_id != user.staff_id and self._users.get_by_staff_id(new_staff_id):
            raise ValidationError("Staff ID already exists")

        password_hash = None
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        if not self._users.update_user(
            user_id=user.user_id,
            name=new_name,
            email=new_email,
            role=new_role,
            staff_id=new_staff_id,
            password_hash=password_hash,
        ):
            raise NotFoundError("User not found")

        return User(
            user_id=user.user_id,
            name=new_name,
            email=new_email,
            password_hash="",
            role=new_role,
            staff_id=new_staff_id,
        )

    def delete_user(self, caller: CallerIdentity, user_id: int) -> None:
        self._require_admin(caller)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if user.user_id == caller.user_id:
            raise ValidationError("You cannot delete your own account")

        if not self._users.delete_by_id(user.user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted by %s", user.email, caller.user_id)

    def stats(self, caller: CallerIdentity) -> dict:
        self._require_admin(caller)
        by_role = self._users.count_by_role()
        return {
            "total": sum(by_role.values()),
            "admins": by_role.get(Role.ADMIN.value, 0),
            "teachers": by_role.get(Role.TEACHER.value, 0),
            "byRole": by_role,
        }
