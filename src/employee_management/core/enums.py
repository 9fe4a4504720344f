from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization."""

    EMPLOYEE = "Employee"
    DEPARTMENT_HEAD = "Department Head"
    HR_MANAGER = "HR Manager"
    ADMIN = "Admin"


MANAGEMENT_ROLES = frozenset({Role.ADMIN, Role.HR_MANAGER})


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    ON_LEAVE = "On Leave"


class ClockAction(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"


class LeaveType(str, Enum):
    SICK = "Sick"
    CASUAL = "Casual"
    ANNUAL = "Annual"


class LeaveStatus(str, Enum):
    """Approval lifecycle of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
