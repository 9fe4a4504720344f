from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee profile.

    Note: plain data object, no DB access. Removal is a soft delete: the
    record stays until ``scheduled_deletion_date`` passes.
    """

    employee_id: int
    company_id: int
    name: str
    email: str
    role: Role
    password_hash: str = ""
    avatar_url: Optional[str] = None
    onboarding_completed: bool = False
    manager_id: Optional[int] = None
    department: str = "Unassigned"
    job_title: str = "Employee"
    date_of_joining: Optional[date] = None
    phone: str = ""
    scheduled_deletion_date: Optional[datetime] = None
    termination_reason: Optional[str] = None

    @property
    def is_scheduled_for_deletion(self) -> bool:
        return self.scheduled_deletion_date is not None


@dataclass(frozen=True)
class NewEmployee:
    """Values for an employee row that does not exist yet."""

    name: str
    email: str
    password_hash: str
    role: Role
    date_of_joining: date
    company_id: Optional[int] = None
    avatar_url: Optional[str] = None
    department: str = "Unassigned"
    job_title: str = "Employee"
    phone: str = ""
