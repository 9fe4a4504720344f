from __future__ import annotations

from typing import List

from ..employees.repository import EmployeeRepository
from ..employees.service import SessionUser
from .chart import OrgNode, build_org_chart


class OrganizationService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def org_chart(self, *, actor: SessionUser) -> List[OrgNode]:
        employees = [e for e in self._employees.list_for_company(actor.company_id) if not e.is_scheduled_for_deletion]
        return build_org_chart(employees)
