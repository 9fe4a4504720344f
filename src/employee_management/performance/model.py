from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class PerformanceReview:
    review_id: int
    employee_id: int
    reviewer_id: int
    review_date: date
    rating: float
    comments: str
    goals: str
