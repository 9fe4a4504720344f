from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PerformanceReview
from .repository import PerformanceRepository

_COLUMNS = "r.review_id, r.employee_id, r.reviewer_id, r.review_date, r.rating, r.comments, r.goals"


def _to_review(r: Dict[str, Any]) -> PerformanceReview:
    return PerformanceReview(
        review_id=int(r["review_id"]),
        employee_id=int(r["employee_id"]),
        reviewer_id=int(r["reviewer_id"]),
        review_date=r["review_date"],
        rating=float(r["rating"]),
        comments=r["comments"],
        goals=r["goals"],
    )


class MySQLPerformanceRepository(PerformanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_id: int) -> Sequence[PerformanceReview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM performance_reviews r
                WHERE r.employee_id=%s
                ORDER BY r.review_date DESC, r.review_id DESC
                """,
                (int(employee_id),),
            )
            return [_to_review(r) for r in fetchall(cur)]

    def list_for_company(self, company_id: int) -> Sequence[PerformanceReview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM performance_reviews r
                JOIN employees e ON e.employee_id = r.employee_id
                WHERE e.company_id=%s
                ORDER BY r.review_date DESC, r.review_id DESC
                """,
                (int(company_id),),
            )
            return [_to_review(r) for r in fetchall(cur)]

    def latest_for_employee(self, employee_id: int) -> Optional[PerformanceReview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM performance_reviews r
                WHERE r.employee_id=%s
                ORDER BY r.review_date DESC, r.review_id DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_review(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO performance_reviews(employee_id, reviewer_id, review_date, rating, comments, goals)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), int(reviewer_id), review_date, rating, comments, goals),
            )
            review_id = int(cur.lastrowid)
        return PerformanceReview(
            review_id=review_id,
            employee_id=int(employee_id),
            reviewer_id=int(reviewer_id),
            review_date=review_date,
            rating=float(rating),
            comments=comments,
            goals=goals,
        )
