from __future__ import annotations

from typing import Any, Dict, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import NewPayroll, Payroll
from .repository import PayrollRepository

_COLUMNS = "payroll_id, employee_id, month, year, basic_salary, deductions, net_salary, generated_date"


def _to_payroll(r: Dict[str, Any]) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=r["month"],
        year=int(r["year"]),
        basic_salary=r["basic_salary"],
        deductions=r["deductions"],
        net_salary=r["net_salary"],
        generated_date=r["generated_date"],
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(self, employee_id: int) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s ORDER BY generated_date DESC",
                (int(employee_id),),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def employee_ids_paid(self, *, company_id: int, month: str, year: int) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.employee_id
                FROM payrolls p
                JOIN employees e ON e.employee_id = p.employee_id
                WHERE e.company_id=%s AND p.month=%s AND p.year=%s
                """,
                (int(company_id), month, int(year)),
            )
            return {int(r["employee_id"]) for r in fetchall(cur)}

    def create_many(self, rows: Sequence[NewPayroll]) -> Sequence[Payroll]:
        if not rows:
            return []
        created: list[Payroll] = []
        # One transaction for the whole run.
        with db_cursor(self._conn_factory) as (_, cur):
            for row in rows:
                cur.execute(
                    """
                    INSERT INTO payrolls(employee_id, month, year, basic_salary, deductions, net_salary, generated_date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        row.employee_id,
                        row.month,
                        row.year,
                        row.amounts.basic_salary,
                        row.amounts.deductions,
                        row.amounts.net_salary,
                        row.generated_date,
                    ),
                )
                created.append(
                    Payroll(
                        payroll_id=int(cur.lastrowid),
                        employee_id=row.employee_id,
                        month=row.month,
                        year=row.year,
                        basic_salary=row.amounts.basic_salary,
                        deductions=row.amounts.deductions,
                        net_salary=row.amounts.net_salary,
                        generated_date=row.generated_date,
                    )
                )
        return created
