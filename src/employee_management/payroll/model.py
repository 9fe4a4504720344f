from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class PayAmounts:
    basic_salary: Decimal
    deductions: Decimal

    @property
    def net_salary(self) -> Decimal:
        return self.basic_salary - self.deductions


@dataclass(frozen=True)
class Payroll:
    payroll_id: int
    employee_id: int
    month: str
    year: int
    basic_salary: Decimal
    deductions: Decimal
    net_salary: Decimal
    generated_date: datetime


@dataclass(frozen=True)
class NewPayroll:
    employee_id: int
    month: str
    year: int
    amounts: PayAmounts
    generated_date: datetime
