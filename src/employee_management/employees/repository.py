from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Employee, NewEmployee

# Columns a profile edit may touch.
EDITABLE_FIELDS = ("name", "phone", "department", "job_title", "manager_id", "avatar_url")


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, new: NewEmployee) -> int:
        raise NotImplementedError

    def update_profile(self, employee_id: int, changes: dict) -> Employee:
        raise NotImplementedError

    def schedule_deletion(self, employee_id: int, *, deletion_date: datetime, reason: str) -> Employee:
        raise NotImplementedError

    def set_onboarding_completed(self, employee_id: int) -> Employee:
        raise NotImplementedError
