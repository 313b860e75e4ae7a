from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, staff_id, name, email, password_hash, role"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        staff_id=row.get("staff_id"),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=row["role"],
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_staff_id(self, staff_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE staff_id=%s", (staff_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at DESC, user_id DESC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        staff_id: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(staff_id, name, email, password_hash, role)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (staff_id, name, email, password_hash, role),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        email: str,
        role: str,
        staff_id: Optional[str],
        password_hash: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if password_hash:
                cur.execute(
                    """
                    UPDATE users SET staff_id=%s, name=%s, email=%s, role=%s, password_hash=%s
                    WHERE user_id=%s
                    """,
                    (staff_id, name, email, role, password_hash, int(user_id)),
                )
            else:
                cur.execute(
                    "UPDATE users SET staff_id=%s, name=%s, email=%s, role=%s WHERE user_id=%s",
                    (staff_id, name, email, role, int(user_id)),
                )
            cur.execute("SELECT 1 FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def count_by_role(self) -> Dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role, COUNT(*) AS n FROM users GROUP BY role")
            return {r["role"]: int(r["n"]) for r in fetchall(cur)}
