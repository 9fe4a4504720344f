from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_text
from ..core.enums import LeaveStatus, LeaveType, MANAGEMENT_ROLES
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from .model import LeaveRequest
from .repository import LeaveRepository


class LeaveService:
    """Leave requests go to the requester's manager, who approves or rejects them."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    @staticmethod
    def _parse_date(value, field_name: str) -> date:
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(require_text(value, field_name).strip())
        except ValueError:
            raise ValidationError(f"{field_name} is not a valid date (YYYY-MM-DD)")

    def submit(
        self,
        *,
        actor: SessionUser,
        leave_type: str,
        start_date,
        end_date,
        reason: str,
    ) -> LeaveRequest:
        employee = self._employees.get_by_id(actor.employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if employee.manager_id is None:
            raise ValidationError("You must have a manager assigned to request leave.")

        try:
            kind = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Leave type is not valid")

        start = self._parse_date(start_date, "Start date")
        end = self._parse_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must not be before start date")

        return self._leaves.create(
            employee_id=employee.employee_id,
            leave_type=kind,
            start_date=start,
            end_date=end,
            reason=require_non_empty(reason, "Reason"),
            approver_id=employee.manager_id,
        )

    def list_mine(self, *, actor: SessionUser) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_employee(actor.employee_id)

    def list_approvals(self, *, actor: SessionUser) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_approver(actor.employee_id)

    def approve(self, *, actor: SessionUser, request_id: int) -> LeaveRequest:
        return self._decide(actor=actor, request_id=request_id, status=LeaveStatus.APPROVED)

    def reject(self, *, actor: SessionUser, request_id: int) -> LeaveRequest:
        return self._decide(actor=actor, request_id=request_id, status=LeaveStatus.REJECTED)

    def _decide(self, *, actor: SessionUser, request_id: int, status: LeaveStatus) -> LeaveRequest:
        req = self._leaves.get_by_id(request_id)
        if not req:
            raise NotFoundError("Leave request not found")

        requester = self._employees.get_by_id(req.employee_id)
        if not requester or requester.company_id != actor.company_id:
            raise NotFoundError("Leave request not found")
        if req.employee_id == actor.employee_id:
            raise AuthorizationError("You cannot decide on your own leave request")
        if req.approver_id != actor.employee_id and actor.role not in MANAGEMENT_ROLES:
            raise AuthorizationError("You are not the approver for this request")
        if req.status != LeaveStatus.PENDING:
            raise ConflictError(f"This request was already {req.status.value.lower()}")

        decided = self._leaves.decide(request_id, status=status)
        if decided is None:
            raise ConflictError("This request was already decided")
        return decided
