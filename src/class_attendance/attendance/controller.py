from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.serialization import to_jsonable
from ..common.validators import optional_int, require_int
from ..core.exceptions import ValidationError
from ..container import Container
from .model import RecordFilter


def register(app: Flask, container: Container) -> None:
    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    def api_check_in():
        data = _json_body()
        result = container.attendance_service.check_in(
            require_int(data.get("student_id"), "student_id"),
            require_int(data.get("session_id"), "session_id"),
            data.get("latitude"),
            data.get("longitude"),
        )
        return jsonify({
            "success": True,
            "message": "Already checked in" if result.already_checked_in else "Check-in successful",
            "record": to_jsonable(result.record),
            "already_checked_in": result.already_checked_in,
        }), 200

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    def api_check_out():
        data = _json_body()
        record = container.attendance_service.check_out(require_int(data.get("attendance_id"), "attendance_id"))
        return jsonify({
            "success": True,
            "message": "Check-out successful",
            "record": to_jsonable(record),
        }), 200

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_records")
    def api_attendance_records():
        raw_date = (request.args.get("date") or "").strip()
        try:
            on_date = parse_iso_date(raw_date) if raw_date else None
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")

        record_filter = RecordFilter(
            student_id=optional_int(request.args.get("student_id"), "student_id"),
            session_id=optional_int(request.args.get("session_id"), "session_id"),
            class_id=optional_int(request.args.get("class_id"), "class_id"),
            attendance_date=on_date,
        )
        records = container.attendance_service.list_records(record_filter)
        return jsonify({"success": True, "records": to_jsonable(list(records))}), 200

    @app.route("/api/attendance/active", methods=["GET"], endpoint="api_attendance_active")
    def api_attendance_active():
        record = container.attendance_service.get_active_record(
            require_int(request.args.get("student_id"), "student_id"),
            require_int(request.args.get("session_id"), "session_id"),
        )
        return jsonify({"success": True, "record": to_jsonable(record)}), 200
