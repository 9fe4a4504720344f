from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_text
from ..core.enums import MANAGEMENT_ROLES
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import MONTHS, NewPayroll, Payroll
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def list_mine(self, *, actor: SessionUser) -> Sequence[Payroll]:
        return self._payrolls.list_for_employee(actor.employee_id)

    def process(self, *, actor: SessionUser, month: str, year) -> Sequence[Payroll]:
        """Generate payslips for every employee of the company for one period.

        Employees already paid for that period, or scheduled for deletion,
        are skipped, so running the same period twice adds nothing.
        """
        if actor.role not in MANAGEMENT_ROLES:
            raise AuthorizationError("You do not have permission to run payroll")

        month = require_text(month, "Month").strip().capitalize()
        if month not in MONTHS:
            raise ValidationError("Month is not valid")
        try:
            year = int(year)
        except (TypeError, ValueError):
            raise ValidationError("Year is not valid")
        if not 2000 <= year <= 2100:
            raise ValidationError("Year is not valid")

        paid = self._payrolls.employee_ids_paid(company_id=actor.company_id, month=month, year=year)
        generated = self._clock()
        rows = [
            NewPayroll(
                employee_id=e.employee_id,
                month=month,
                year=year,
                amounts=self._calculator.amounts_for(e, month=month, year=year),
                generated_date=generated,
            )
            for e in self._employees.list_for_company(actor.company_id)
            if e.employee_id not in paid and not e.is_scheduled_for_deletion
        ]

        created = self._payrolls.create_many(rows)
        logger.info("payroll %s %s: %d payslips generated", month, year, len(created))
        return created
