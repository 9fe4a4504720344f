from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ..core.constants import PENDING_INVITATION_CODE
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, execute_unique, fetchone
from ..employees.model import NewEmployee
from .model import Company
from .repository import CompanyRepository

_COLUMNS = "company_id, name, invitation_code, latitude, longitude, radius_m"


def _to_company(r: Dict[str, Any]) -> Company:
    return Company(
        company_id=int(r["company_id"]),
        name=r["name"],
        invitation_code=r["invitation_code"],
        latitude=r.get("latitude"),
        longitude=r.get("longitude"),
        radius_m=int(r["radius_m"]) if r.get("radius_m") is not None else None,
    )


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, cur, company_id: int) -> Company:
        cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE company_id=%s", (int(company_id),))
        r = fetchone(cur)
        if not r:
            raise NotFoundError("Company not found")
        return _to_company(r)

    def get_by_id(self, company_id: int) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
            return _to_company(r) if r else None

    def get_by_invitation_code(self, code: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM companies WHERE invitation_code=%s", (code,))
            r = fetchone(cur)
            return _to_company(r) if r else None

    def update_geofence(self, company_id: int, *, latitude: float, longitude: float, radius_m: int) -> Company:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE companies SET latitude=%s, longitude=%s, radius_m=%s WHERE company_id=%s",
                (latitude, longitude, int(radius_m), int(company_id)),
            )
            return self._select_one(cur, company_id)

    def update_invitation_code(self, company_id: int, code: str) -> Company:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE companies SET invitation_code=%s WHERE company_id=%s",
                (code, int(company_id)),
            )
            return self._select_one(cur, company_id)

    def create_company_with_admin(
        self,
        *,
        company_name: str,
        admin: NewEmployee,
        issue_code: Callable[[Callable[[str], object]], str],
    ) -> tuple[Company, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT company_id FROM companies WHERE invitation_code=%s FOR UPDATE",
                (PENDING_INVITATION_CODE,),
            )
            if fetchone(cur):
                raise ConflictError("Another company is being set up. Please try again shortly.")

            cur.execute(
                "INSERT INTO companies(name, invitation_code) VALUES(%s,%s)",
                (company_name, PENDING_INVITATION_CODE),
            )
            company_id = int(cur.lastrowid)

            cur.execute(
                """
                INSERT INTO employees(
                    company_id, name, email, password_hash, role, avatar_url,
                    onboarding_completed, department, job_title, date_of_joining, phone
                )
                VALUES(%s,%s,%s,%s,%s,%s,0,%s,%s,%s,%s)
                """,
                (
                    company_id,
                    admin.name,
                    admin.email,
                    admin.password_hash,
                    admin.role.value,
                    admin.avatar_url,
                    admin.department,
                    admin.job_title,
                    admin.date_of_joining,
                    admin.phone,
                ),
            )
            employee_id = int(cur.lastrowid)

            def write_code(code: str) -> None:
                execute_unique(
                    cur,
                    "UPDATE companies SET invitation_code=%s WHERE company_id=%s",
                    (code, company_id),
                )

            issue_code(write_code)
            return self._select_one(cur, company_id), employee_id
