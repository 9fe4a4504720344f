from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..core.enums import Role
from ..web import json_body, login_required, ok, role_required
from .model import Payroll


def payroll_to_dict(p: Payroll) -> dict:
    return {
        "id": p.payroll_id,
        "employee_id": p.employee_id,
        "month": p.month,
        "year": p.year,
        "basic_salary": float(p.basic_salary),
        "deductions": float(p.deductions),
        "net_salary": float(p.net_salary),
        "generated_date": p.generated_date.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    def current_user():
        return container.auth_service.session_for(int(session["employee_id"]))

    @app.route("/payroll/me", methods=["GET"], endpoint="my_payroll")
    @login_required
    def my_payroll():
        payslips = container.payroll_service.list_mine(actor=current_user())
        return ok(payrolls=[payroll_to_dict(p) for p in payslips])

    @app.route("/payroll/process", methods=["POST"], endpoint="process_payroll")
    @role_required(Role.ADMIN, Role.HR_MANAGER)
    def process_payroll():
        data = json_body()
        created = container.payroll_service.process(
            actor=current_user(),
            month=data.get("month", ""),
            year=data.get("year"),
        )
        return ok(
            message=f"Payroll processed for {len(created)} employee(s).",
            payrolls=[payroll_to_dict(p) for p in created],
        )
