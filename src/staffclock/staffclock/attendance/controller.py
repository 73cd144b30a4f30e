from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.validators import require_coordinate
from ..common.web import current_user, login_required
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT, GENERIC_RECORD_FAILURE
from ..core.enums import ClockAction
from ..core.exceptions import RepositoryError, ValidationError

logger = logging.getLogger(__name__)


def _parse_action(value) -> ClockAction:
    try:
        return ClockAction(value)
    except ValueError:
        raise ValidationError("action must be clockIn or clockOut") from None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clock", methods=["POST"], endpoint="clock")
    @login_required
    def clock():
        data = request.get_json(silent=True) or {}
        try:
            action = _parse_action(data.get("action"))
            lat = require_coordinate(data.get("lat"), "lat", limit=90)
            lng = require_coordinate(data.get("lng"), "lng", limit=180)
            result = container.attendance_service.clock(action, current_user(), lat=lat, lng=lng)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RepositoryError:
            logger.exception("clock request failed")
            return jsonify({"success": False, "message": GENERIC_RECORD_FAILURE}), 503

        return jsonify(result.to_document()), 200 if result.ok else 409

    @app.route("/api/me/status", methods=["GET"], endpoint="my_status")
    @login_required
    def my_status():
        try:
            state = container.attendance_service.get_session_state(current_user().uid)
        except RepositoryError:
            logger.exception("status lookup failed")
            return jsonify({"success": False, "message": "Failed to load status."}), 503
        return jsonify({"success": True, "state": state.to_document()}), 200

    @app.route("/api/me/history", methods=["GET"], endpoint="my_history")
    @login_required
    def my_history():
        limit = request.args.get("limit", DEFAULT_HISTORY_LIMIT, type=int)
        try:
            records = container.attendance_service.get_history(current_user().uid, limit=limit)
        except RepositoryError:
            logger.exception("history lookup failed")
            return jsonify({"success": False, "message": "Failed to load history."}), 503
        return jsonify({"success": True, "records": [r.to_document() for r in records]}), 200
