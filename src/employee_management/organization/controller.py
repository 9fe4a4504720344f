from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..web import login_required, ok


def register(app: Flask, container: Container) -> None:
    @app.route("/organization/chart", methods=["GET"], endpoint="org_chart")
    @login_required
    def org_chart():
        actor = container.auth_service.session_for(int(session["employee_id"]))
        roots = container.organization_service.org_chart(actor=actor)
        return ok(chart=[node.to_dict() for node in roots])
