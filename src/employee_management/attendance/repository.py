from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, limit: int) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: str,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Insert today's record; ConflictError if one already exists."""

        raise NotImplementedError

    def set_clock_out(self, *, attendance_id: int, check_out_time: str) -> AttendanceRecord:
        """Set the checkout time once; ConflictError if it is already set."""

        raise NotImplementedError
