from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.web import current_user, login_required, remember_user
from ..container import Container
from ..core.exceptions import AuthenticationError, RepositoryError
from .service import identity_from_payload

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/session", methods=["POST"], endpoint="sign_in")
    def sign_in():
        try:
            identity = identity_from_payload(request.get_json(silent=True))
            user = container.auth_service.sign_in(identity)
        except AuthenticationError as e:
            return jsonify({"success": False, "message": str(e)}), 401
        except RepositoryError:
            logger.exception("sign-in failed")
            return jsonify({"success": False, "message": "Sign-in failed. Please try again."}), 503

        remember_user(user)
        return jsonify({"success": True, "user": user.to_document()}), 200

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"success": True, "user": current_user().to_document()}), 200
