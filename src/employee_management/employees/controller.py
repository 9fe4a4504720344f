from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..core.enums import Role
from ..web import image_field, json_body, login_required, ok, remember, require_image, role_required
from .model import Employee
from .service import SessionUser


def employee_to_dict(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "company_id": e.company_id,
        "name": e.name,
        "email": e.email,
        "role": e.role.value,
        "avatar_url": e.avatar_url,
        "onboarding_completed": e.onboarding_completed,
        "manager_id": e.manager_id,
        "department": e.department,
        "job_title": e.job_title,
        "date_of_joining": e.date_of_joining.isoformat() if e.date_of_joining else None,
        "phone": e.phone,
        "scheduled_deletion_date": e.scheduled_deletion_date.isoformat() if e.scheduled_deletion_date else None,
        "termination_reason": e.termination_reason,
    }


def user_to_dict(u: SessionUser) -> dict:
    return {
        "id": u.employee_id,
        "name": u.name,
        "email": u.email,
        "role": u.role.value,
        "company_id": u.company_id,
        "onboarding_completed": u.onboarding_completed,
    }


def register(app: Flask, container: Container) -> None:
    def current_user() -> SessionUser:
        return container.auth_service.session_for(int(session["employee_id"]))

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        remember(user)
        return ok(user=user_to_dict(user))

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/auth/signup/admin", methods=["POST"], endpoint="signup_admin")
    def signup_admin():
        data = json_body()
        user = container.auth_service.sign_up_admin(
            company_name=data.get("company_name", ""),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            photo=require_image(data),
        )
        remember(user)
        return ok(user=user_to_dict(user)), 201

    @app.route("/auth/signup/employee", methods=["POST"], endpoint="signup_employee")
    def signup_employee():
        data = json_body()
        user = container.auth_service.sign_up_employee(
            invitation_code=data.get("invitation_code", ""),
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            photo=require_image(data),
            phone=data.get("phone", ""),
        )
        remember(user)
        return ok(user=user_to_dict(user)), 201

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        actor = current_user()
        employee = container.employee_service.get_employee(actor=actor, employee_id=actor.employee_id)
        return ok(employee=employee_to_dict(employee))

    @app.route("/me/avatar", methods=["POST"], endpoint="update_avatar")
    @login_required
    def update_avatar():
        actor = current_user()
        data = json_body()
        photo = image_field(data)
        if photo is None:
            return ok(message="No photo given, nothing changed")
        employee = container.employee_service.update_avatar(
            actor=actor,
            employee_id=int(data.get("employee_id") or actor.employee_id),
            photo=photo,
        )
        return ok(employee=employee_to_dict(employee))

    @app.route("/onboarding/complete", methods=["POST"], endpoint="complete_onboarding")
    @login_required
    def complete_onboarding():
        employee = container.employee_service.complete_onboarding(actor=current_user())
        return ok(employee=employee_to_dict(employee))

    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    @login_required
    def list_employees():
        employees = container.employee_service.list_employees(actor=current_user())
        return ok(employees=[employee_to_dict(e) for e in employees])

    @app.route("/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @login_required
    def update_employee(employee_id: int):
        employee = container.employee_service.update_profile(
            actor=current_user(),
            employee_id=employee_id,
            changes=json_body(),
        )
        return ok(employee=employee_to_dict(employee))

    @app.route("/employees/<int:employee_id>/remove", methods=["POST"], endpoint="remove_employee")
    @role_required(Role.ADMIN, Role.HR_MANAGER)
    def remove_employee(employee_id: int):
        employee = container.employee_service.remove_employee(
            actor=current_user(),
            employee_id=employee_id,
            reason=json_body().get("reason", ""),
        )
        return ok(employee=employee_to_dict(employee))

    @app.route("/wellness/tip", methods=["GET"], endpoint="wellness_tip")
    @login_required
    def wellness_tip():
        return ok(tip=container.assist_service.wellness_tip())
