from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Identity, StaffUser
from .repository import UserRepository

logger = logging.getLogger(__name__)


def identity_from_payload(payload: Optional[Mapping]) -> Identity:
    """Build an Identity from the provider's ``{uid, email, displayName, photoURL}`` payload."""
    if not payload:
        raise AuthenticationError("Missing identity")
    try:
        uid = require_non_empty(str(payload.get("uid") or ""), "uid")
        email = require_non_empty(str(payload.get("email") or ""), "email")
    except ValidationError as exc:
        raise AuthenticationError(str(exc)) from None
    return Identity(
        uid=uid,
        email=email,
        display_name=str(payload.get("displayName") or email),
        photo_url=payload.get("photoURL"),
    )


class AuthService:
    """Use case: sign a user in and resolve their role."""

    def __init__(self, users: UserRepository, *, admin_emails: Iterable[str] = ()):
        self._users = users
        self._admin_emails = {e.strip().lower() for e in admin_emails if e and e.strip()}

    def role_for_email(self, email: str) -> Role:
        return Role.ADMIN if (email or "").strip().lower() in self._admin_emails else Role.STAFF

    def sign_in(self, identity: Identity) -> StaffUser:
        """Return the stored user, creating it on first sign-in.

        The role is derived from the admin allow-list only when the user is
        created or has no stored role.
        """
        user = self._users.get_by_uid(identity.uid)
        if user is None:
            user = StaffUser(
                uid=identity.uid,
                email=identity.email,
                display_name=identity.display_name,
                photo_url=identity.photo_url,
                role=self.role_for_email(identity.email),
                created_at=now_local(),
            )
            self._users.create_user(user)
            logger.info("user created", extra={"uid": user.uid, "role": user.role.value})
            return user

        if user.role is None:
            role = self.role_for_email(user.email)
            self._users.set_role(user.uid, role)
            user = replace(user, role=role)
        return user

