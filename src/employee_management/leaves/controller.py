from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..web import json_body, login_required, ok
from .model import LeaveRequest


def leave_to_dict(r: LeaveRequest) -> dict:
    return {
        "id": r.request_id,
        "employee_id": r.employee_id,
        "leave_type": r.leave_type.value,
        "start_date": r.start_date.isoformat(),
        "end_date": r.end_date.isoformat(),
        "days": r.days,
        "reason": r.reason,
        "status": r.status.value,
        "approver_id": r.approver_id,
    }


def register(app: Flask, container: Container) -> None:
    def current_user():
        return container.auth_service.session_for(int(session["employee_id"]))

    @app.route("/leaves/me", methods=["GET"], endpoint="my_leaves")
    @login_required
    def my_leaves():
        leaves = container.leave_service.list_mine(actor=current_user())
        return ok(leaves=[leave_to_dict(r) for r in leaves])

    @app.route("/leaves", methods=["POST"], endpoint="submit_leave")
    @login_required
    def submit_leave():
        data = json_body()
        leave = container.leave_service.submit(
            actor=current_user(),
            leave_type=data.get("leave_type", ""),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            reason=data.get("reason", ""),
        )
        return ok(leave=leave_to_dict(leave)), 201

    @app.route("/leaves/approvals", methods=["GET"], endpoint="leave_approvals")
    @login_required
    def leave_approvals():
        leaves = container.leave_service.list_approvals(actor=current_user())
        return ok(leaves=[leave_to_dict(r) for r in leaves])

    @app.route("/leaves/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @login_required
    def approve_leave(request_id: int):
        leave = container.leave_service.approve(actor=current_user(), request_id=request_id)
        return ok(leave=leave_to_dict(leave))

    @app.route("/leaves/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @login_required
    def reject_leave(request_id: int):
        leave = container.leave_service.reject(actor=current_user(), request_id=request_id)
        return ok(leave=leave_to_dict(leave))
