from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_jsonable
from ..common.validators import optional_int, require_int
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _month_args() -> tuple[int, int]:
        return require_int(request.args.get("month"), "month"), require_int(request.args.get("year"), "year")

    @app.route("/api/attendance/report", methods=["GET"], endpoint="api_attendance_report")
    def api_attendance_report():
        month, year = _month_args()
        report = container.report_service.monthly_report(
            require_int(request.args.get("student_id"), "student_id"),
            month,
            year,
            optional_int(request.args.get("class_id"), "class_id"),
        )
        return jsonify({"success": True, "report": to_jsonable(report)}), 200

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_attendance_stats")
    def api_attendance_stats():
        stats = container.report_service.overall_stats(require_int(request.args.get("student_id"), "student_id"))
        return jsonify({"success": True, "stats": to_jsonable(stats)}), 200

    @app.route("/api/attendance/class-summary", methods=["GET"], endpoint="api_class_summary")
    def api_class_summary():
        month, year = _month_args()
        data = container.report_service.class_monthly_summary(
            require_int(request.args.get("class_id"), "class_id"), month, year
        )
        return jsonify({"success": True, **to_jsonable(data)}), 200

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_class_history")
    def api_class_history():
        month, year = _month_args()
        rows = container.report_service.class_session_history(
            require_int(request.args.get("class_id"), "class_id"), month, year
        )
        return jsonify({"success": True, "sessions": to_jsonable(rows)}), 200

    @app.route("/api/attendance/ongoing", methods=["GET"], endpoint="api_ongoing_attendance")
    def api_ongoing_attendance():
        rows = container.report_service.ongoing_attendance(require_int(request.args.get("session_id"), "session_id"))
        return jsonify({"success": True, "students": to_jsonable(rows)}), 200

    @app.route("/api/sessions/<int:session_id>/attendance/daily", methods=["GET"], endpoint="api_daily_attendance")
    def api_daily_attendance(session_id: int):
        raw_date = (request.args.get("date") or "").strip()
        if not raw_date:
            raise ValidationError("date is required")
        try:
            on_date = parse_iso_date(raw_date)
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")

        data = container.report_service.daily_summary(session_id, on_date)
        return jsonify({"success": True, **to_jsonable(data)}), 200
