from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_for_approver(self, approver_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        approver_id: int,
    ) -> LeaveRequest:
        raise NotImplementedError

    def decide(self, request_id: int, *, status: LeaveStatus) -> Optional[LeaveRequest]:
        """Move a Pending request to ``status``; None if it was no longer Pending."""

        raise NotImplementedError
