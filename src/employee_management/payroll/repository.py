from __future__ import annotations

from typing import Protocol, Sequence

from .model import NewPayroll, Payroll


class PayrollRepository(Protocol):
    def list_for_employee(self, employee_id: int) -> Sequence[Payroll]:
        raise NotImplementedError

    def employee_ids_paid(self, *, company_id: int, month: str, year: int) -> set[int]:
        raise NotImplementedError

    def create_many(self, rows: Sequence[NewPayroll]) -> Sequence[Payroll]:
        raise NotImplementedError
