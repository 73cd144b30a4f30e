from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import StaffUser


class UserRepository(Protocol):
    """Repository interface for StaffUser.

    The service layer depends on this interface, not on a concrete DB.
    """

    def get_by_uid(self, uid: str) -> Optional[StaffUser]:
        raise NotImplementedError

    def create_user(self, user: StaffUser) -> None:
        raise NotImplementedError

    def set_role(self, uid: str, role: Role) -> bool:
        raise NotImplementedError
