from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..ai.assist import AssistService, TurnoverProfile
from ..common.datetime_utils import now_local
from ..common.validators import require_float, require_non_empty, require_text
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from .model import PerformanceReview
from .repository import PerformanceRepository

logger = logging.getLogger(__name__)

MIN_RATING = 1.0
MAX_RATING = 5.0


def check_rating(value) -> float:
    """Ratings run from 1 to 5 in half steps."""
    rating = require_float(value, "Rating")
    if not MIN_RATING <= rating <= MAX_RATING or (rating * 2) != int(rating * 2):
        raise ValidationError("Rating must be between 1 and 5 in steps of 0.5")
    return rating


class PerformanceService:
    def __init__(
        self,
        reviews: PerformanceRepository,
        employees: EmployeeRepository,
        assist: AssistService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._reviews = reviews
        self._employees = employees
        self._assist = assist
        self._clock = clock

    def list_mine(self, *, actor: SessionUser) -> Sequence[PerformanceReview]:
        return self._reviews.list_for_employee(actor.employee_id)

    def list_all(self, *, actor: SessionUser) -> Sequence[PerformanceReview]:
        if not actor.is_management:
            raise AuthorizationError("You do not have permission to view all reviews")
        return self._reviews.list_for_company(actor.company_id)

    def _reviewable(self, actor: SessionUser, employee_id) -> Employee:
        try:
            employee_id = int(employee_id)
        except (TypeError, ValueError):
            raise ValidationError("Employee is not valid")
        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.company_id != actor.company_id:
            raise NotFoundError("Employee not found")
        if employee.employee_id == actor.employee_id:
            raise AuthorizationError("You cannot review yourself")
        if not actor.is_management and employee.manager_id != actor.employee_id:
            raise AuthorizationError("Only the employee's manager, HR or an administrator can review them")
        return employee

    def submit_review(
        self,
        *,
        actor: SessionUser,
        employee_id,
        rating,
        comments: str,
        goals: str = "",
    ) -> PerformanceReview:
        employee = self._reviewable(actor, employee_id)
        rating = check_rating(rating)
        comments = require_non_empty(comments, "Comments")

        review = self._reviews.create(
            employee_id=employee.employee_id,
            reviewer_id=actor.employee_id,
            review_date=self._clock().date(),
            rating=rating,
            comments=comments,
            goals=require_text(goals, "Goals").strip(),
        )
        logger.info("review %s submitted for employee %s", review.review_id, employee.employee_id)
        return review

    def draft_feedback(self, *, actor: SessionUser, employee_id, rating) -> str:
        """Ask the text model for a review comment, using the previous review as context."""
        employee = self._reviewable(actor, employee_id)
        rating = check_rating(rating)
        previous: Optional[PerformanceReview] = self._reviews.latest_for_employee(employee.employee_id)
        return self._assist.performance_feedback(
            employee.name,
            rating,
            previous.comments if previous else None,
        )

    def turnover_risk_report(self, *, actor: SessionUser) -> str:
        """Narrative turnover assessment for the company's active employees."""
        if not actor.is_management:
            raise AuthorizationError("You do not have permission to view this report")

        today = self._clock().date()
        profiles = []
        for e in self._employees.list_for_company(actor.company_id):
            if e.is_scheduled_for_deletion:
                continue
            last = self._reviews.latest_for_employee(e.employee_id)
            tenure = (today - e.date_of_joining).days / 365.25 if e.date_of_joining else 0.0
            profiles.append(
                TurnoverProfile(
                    name=e.name,
                    job_title=e.job_title,
                    tenure_years=max(tenure, 0.0),
                    rating=last.rating if last else None,
                )
            )
        if not profiles:
            raise ValidationError("There are no employees to assess")
        return self._assist.turnover_risk_report(profiles)
