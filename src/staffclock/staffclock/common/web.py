from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..users.model import StaffUser


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue."}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return jsonify({"success": False, "message": "Please sign in to continue."}), 401
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Admins only.")
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AuthorizationError)
    def forbidden(e: AuthorizationError):
        return jsonify({"success": False, "message": str(e)}), 403


def remember_user(user: StaffUser) -> None:
    session.clear()
    session["uid"] = user.uid
    session["email"] = user.email
    session["name"] = user.display_name
    session["role"] = user.role.value if user.role else Role.STAFF.value


def current_user() -> StaffUser:
    """Identity snapshot kept in the Flask session at sign-in."""
    return StaffUser(
        uid=session["uid"],
        email=session.get("email", ""),
        display_name=session.get("name", ""),
        photo_url=None,
        role=Role(session.get("role", Role.STAFF.value)),
    )
