from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..core.enums import Role
from ..employees.service import SessionUser
from ..web import json_body, login_required, ok, role_required
from .model import Company


def company_to_dict(c: Company, *, include_code: bool) -> dict:
    geofence = c.geofence
    return {
        "id": c.company_id,
        "name": c.name,
        "invitation_code": c.invitation_code if include_code and c.has_invitation_code else None,
        "geofence": (
            {"latitude": geofence.latitude, "longitude": geofence.longitude, "radius_m": geofence.radius_m}
            if geofence
            else None
        ),
    }


def register(app: Flask, container: Container) -> None:
    def current_user() -> SessionUser:
        return container.auth_service.session_for(int(session["employee_id"]))

    @app.route("/company", methods=["GET"], endpoint="get_company")
    @login_required
    def get_company():
        user = current_user()
        company = container.company_service.get_company(user.company_id)
        return ok(company=company_to_dict(company, include_code=user.role == Role.ADMIN))

    @app.route("/company/geofence", methods=["PUT"], endpoint="configure_geofence")
    @role_required(Role.ADMIN)
    def configure_geofence():
        user = current_user()
        data = json_body()
        company = container.company_service.configure_geofence(
            current_role=user.role,
            company_id=user.company_id,
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius_m=data.get("radius_m"),
        )
        return ok(company=company_to_dict(company, include_code=True))

    @app.route("/company/invitation-code", methods=["POST"], endpoint="issue_invitation_code")
    @role_required(Role.ADMIN)
    def issue_invitation_code():
        user = current_user()
        code = container.company_service.issue_invitation_code(current_role=user.role, company_id=user.company_id)
        return ok(invitation_code=code), 201
