from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, NewEmployee
from .repository import EDITABLE_FIELDS, EmployeeRepository

_COLUMNS = """
    employee_id, company_id, name, email, password_hash, role, avatar_url,
    onboarding_completed, manager_id, department, job_title, date_of_joining,
    phone, scheduled_deletion_date, termination_reason
"""


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        email=r["email"],
        role=Role(r["role"]),
        password_hash=r["password_hash"],
        avatar_url=r.get("avatar_url"),
        onboarding_completed=bool(r.get("onboarding_completed")),
        manager_id=r.get("manager_id"),
        department=r.get("department") or "Unassigned",
        job_title=r.get("job_title") or "Employee",
        date_of_joining=r.get("date_of_joining"),
        phone=r.get("phone") or "",
        scheduled_deletion_date=r.get("scheduled_deletion_date"),
        termination_reason=r.get("termination_reason"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, cur, employee_id: int) -> Employee:
        cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
        r = fetchone(cur)
        if not r:
            raise NotFoundError("Employee not found")
        return _to_employee(r)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_for_company(self, company_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE company_id=%s ORDER BY name ASC",
                (int(company_id),),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, new: NewEmployee) -> int:
        if new.company_id is None:
            raise ValidationError("An employee must belong to a company")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    company_id, name, email, password_hash, role, avatar_url,
                    onboarding_completed, department, job_title, date_of_joining, phone
                )
                VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s,%s,%s)
                """,
                (
                    int(new.company_id),
                    new.name,
                    new.email,
                    new.password_hash,
                    new.role.value,
                    new.avatar_url,
                    new.department,
                    new.job_title,
                    new.date_of_joining,
                    new.phone,
                ),
            )
            return int(cur.lastrowid)

    def update_profile(self, employee_id: int, changes: dict) -> Employee:
        fields = [k for k in EDITABLE_FIELDS if k in changes]
        with db_cursor(self._conn_factory) as (_, cur):
            if fields:
                assignments = ", ".join(f"{k}=%s" for k in fields)
                cur.execute(
                    f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                    tuple(changes[k] for k in fields) + (int(employee_id),),
                )
            return self._select_one(cur, employee_id)

    def schedule_deletion(self, employee_id: int, *, deletion_date: datetime, reason: str) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET scheduled_deletion_date=%s, termination_reason=%s
                WHERE employee_id=%s
                """,
                (deletion_date, reason, int(employee_id)),
            )
            return self._select_one(cur, employee_id)

    def set_onboarding_completed(self, employee_id: int) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET onboarding_completed=1 WHERE employee_id=%s",
                (int(employee_id),),
            )
            return self._select_one(cur, employee_id)
