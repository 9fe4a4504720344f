from __future__ import annotations

from flask import Flask, request, session

from ..common.validators import require_float
from ..container import Container
from ..core.enums import ClockAction
from ..web import image_field, json_body, login_required, ok
from .model import AttendanceRecord, Location


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "employee_id": r.employee_id,
        "date": r.work_date.isoformat(),
        "status": r.status.value,
        "check_in_time": r.check_in_time,
        "check_out_time": r.check_out_time,
    }


def _location(data: dict):
    lat, lon = data.get("latitude"), data.get("longitude")
    if lat is None or lon is None:
        return None
    return Location(require_float(lat, "Latitude"), require_float(lon, "Longitude"))


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/me", methods=["GET"], endpoint="my_attendance")
    @login_required
    def my_attendance():
        employee_id = int(session["employee_id"])
        limit = request.args.get("limit", default=30, type=int)
        records = container.attendance_service.history(employee_id, limit=max(1, min(limit, 365)))
        today = container.attendance_service.today_record(employee_id)
        return ok(
            today=record_to_dict(today) if today else None,
            records=[record_to_dict(r) for r in records],
        )

    @app.route("/attendance/clock-button", methods=["GET"], endpoint="clock_button")
    @login_required
    def clock_button():
        button = container.attendance_service.clock_button(int(session["employee_id"]))
        return ok(label=button.label, disabled=button.disabled, loading=button.loading)

    @app.route("/attendance/clock", methods=["POST"], endpoint="clock")
    @login_required
    def clock():
        data = json_body()
        result = container.attendance_service.clock(
            int(session["employee_id"]),
            location=_location(data),
            frame_source=container.frame_sources(image_field(data, "frame")),
        )
        if result.action == ClockAction.CLOCK_IN:
            message = f"Clocked in at {result.record.check_in_time}."
        else:
            message = f"Clocked out at {result.record.check_out_time}."
        return ok(
            action=result.action.value,
            celebrate=result.celebrate,
            message=message,
            record=record_to_dict(result.record),
        )
