from __future__ import annotations

from decimal import Decimal

from ...core.constants import STANDARD_BASIC_SALARY, STANDARD_DEDUCTIONS
from ...employees.model import Employee
from ..model import PayAmounts
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Flat rule: the same basic salary and deductions for everyone."""

    def __init__(self, basic_salary=STANDARD_BASIC_SALARY, deductions=STANDARD_DEDUCTIONS):
        self._basic = Decimal(str(basic_salary))
        self._deductions = Decimal(str(deductions))

    def amounts_for(self, employee: Employee, *, month: str, year: int) -> PayAmounts:
        return PayAmounts(basic_salary=self._basic, deductions=min(self._deductions, self._basic))
