from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import StaffUser
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_uid(self, uid: str) -> Optional[StaffUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT uid, email, display_name, photo_url, role, created_at FROM users WHERE uid=%s",
                (uid,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return StaffUser(
                uid=str(r["uid"]),
                email=r["email"],
                display_name=r["display_name"],
                photo_url=r.get("photo_url"),
                role=Role(r["role"]) if r.get("role") else None,
                created_at=r.get("created_at"),
            )

    def create_user(self, user: StaffUser) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(uid, email, display_name, photo_url, role, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.uid,
                    user.email,
                    user.display_name,
                    user.photo_url,
                    user.role.value if user.role else None,
                    user.created_at,
                ),
            )

    def set_role(self, uid: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET role=%s WHERE uid=%s", (role.value, uid))
            return cur.rowcount > 0
