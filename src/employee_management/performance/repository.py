from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import PerformanceReview


class PerformanceRepository(Protocol):
    def list_for_employee(self, employee_id: int) -> Sequence[PerformanceReview]:
        """Newest first."""
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[PerformanceReview]:
        raise NotImplementedError

    def latest_for_employee(self, employee_id: int) -> Optional[PerformanceReview]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        reviewer_id: int,
        review_date: date,
        rating: float,
        comments: str,
        goals: str,
    ) -> PerformanceReview:
        raise NotImplementedError
