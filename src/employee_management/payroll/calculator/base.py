from __future__ import annotations

from abc import ABC, abstractmethod

from ...employees.model import Employee
from ..model import PayAmounts


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def amounts_for(self, employee: Employee, *, month: str, year: int) -> PayAmounts:
        raise NotImplementedError
