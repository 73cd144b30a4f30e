from __future__ import annotations

import io
import logging
from datetime import timedelta

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import now_local
from ..common.validators import require_date_range
from ..common.web import admin_required
from ..container import Container
from ..core.constants import DEFAULT_REPORT_DAYS, RECORDS_UNAVAILABLE
from ..core.exceptions import RepositoryError, ValidationError
from .excel_export import XLSX_MIMETYPE, build_timesheet_xlsx, timesheet_filename

logger = logging.getLogger(__name__)


def _requested_range():
    """``start``/``end`` query params; defaults to the last 30 days."""
    today = now_local().date()
    start = request.args.get("start") or (today - timedelta(days=DEFAULT_REPORT_DAYS)).strftime("%Y-%m-%d")
    end = request.args.get("end") or today.strftime("%Y-%m-%d")
    return require_date_range(start, end)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/records", methods=["GET"], endpoint="admin_records")
    @admin_required
    def admin_records():
        try:
            start, end = _requested_range()
            records = container.report_service.list_records(start=start, end=end)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RepositoryError:
            logger.exception("record listing failed")
            return jsonify({"success": False, "message": RECORDS_UNAVAILABLE}), 503

        return jsonify(
            {
                "success": True,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "count": len(records),
                "records": [r.to_document() for r in records],
            }
        ), 200

    @app.route("/api/admin/export", methods=["GET"], endpoint="admin_export")
    @admin_required
    def admin_export():
        try:
            start, end = _requested_range()
            report = container.report_service.build_timesheet(start=start, end=end)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except RepositoryError:
            logger.exception("timesheet export failed")
            return jsonify({"success": False, "message": RECORDS_UNAVAILABLE}), 503

        return send_file(
            io.BytesIO(build_timesheet_xlsx(report)),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=timesheet_filename(start, end),
        )
