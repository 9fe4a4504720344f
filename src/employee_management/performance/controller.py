from __future__ import annotations

from flask import Flask, session

from ..container import Container
from ..core.enums import Role
from ..web import json_body, login_required, ok, role_required
from .model import PerformanceReview


def review_to_dict(r: PerformanceReview) -> dict:
    return {
        "id": r.review_id,
        "employee_id": r.employee_id,
        "reviewer_id": r.reviewer_id,
        "review_date": r.review_date.isoformat(),
        "rating": r.rating,
        "comments": r.comments,
        "goals": r.goals,
    }


def register(app: Flask, container: Container) -> None:
    def current_user():
        return container.auth_service.session_for(int(session["employee_id"]))

    @app.route("/performance/me", methods=["GET"], endpoint="my_reviews")
    @login_required
    def my_reviews():
        reviews = container.performance_service.list_mine(actor=current_user())
        return ok(reviews=[review_to_dict(r) for r in reviews])

    @app.route("/performance", methods=["GET"], endpoint="all_reviews")
    @role_required(Role.ADMIN, Role.HR_MANAGER)
    def all_reviews():
        reviews = container.performance_service.list_all(actor=current_user())
        return ok(reviews=[review_to_dict(r) for r in reviews])

    @app.route("/performance", methods=["POST"], endpoint="submit_review")
    @login_required
    def submit_review():
        data = json_body()
        review = container.performance_service.submit_review(
            actor=current_user(),
            employee_id=data.get("employee_id"),
            rating=data.get("rating"),
            comments=data.get("comments", ""),
            goals=data.get("goals", ""),
        )
        return ok(review=review_to_dict(review)), 201

    @app.route("/performance/feedback-draft", methods=["POST"], endpoint="draft_feedback")
    @login_required
    def draft_feedback():
        data = json_body()
        text = container.performance_service.draft_feedback(
            actor=current_user(),
            employee_id=data.get("employee_id"),
            rating=data.get("rating"),
        )
        return ok(comments=text)

    @app.route("/reports/turnover-risk", methods=["GET"], endpoint="turnover_risk")
    @role_required(Role.ADMIN, Role.HR_MANAGER)
    def turnover_risk():
        return ok(report=container.performance_service.turnover_risk_report(actor=current_user()))
