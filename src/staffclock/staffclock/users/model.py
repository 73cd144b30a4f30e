from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Identity asserted by the external identity provider."""

    uid: str
    email: str
    display_name: str
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class StaffUser:
    """Domain entity: a signed-in staff member.

    ``uid`` is the partition key for every attendance record.
    """

    uid: str
    email: str
    display_name: str
    photo_url: Optional[str]
    role: Optional[Role]
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_document(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "role": self.role.value if self.role else None,
        }
