from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from ..employees.model import Employee

logger = logging.getLogger(__name__)


@dataclass
class OrgNode:
    employee: Employee
    reports: List["OrgNode"] = field(default_factory=list)

    def to_dict(self) -> dict:
        e = self.employee
        return {
            "id": e.employee_id,
            "name": e.name,
            "job_title": e.job_title,
            "role": e.role.value,
            "avatar_url": e.avatar_url,
            "reports": [child.to_dict() for child in self.reports],
        }


def build_org_chart(employees: Sequence[Employee]) -> List[OrgNode]:
    """Build the reporting tree from each employee's manager_id.

    Roots are employees with no manager or a manager outside the list.
    Employees on a reporting cycle never reach a root; each cycle is broken
    at its lowest id, which becomes an extra root.
    """
    by_id: Dict[int, Employee] = {e.employee_id: e for e in employees}
    children: Dict[int, List[Employee]] = {}
    roots: List[Employee] = []
    for e in employees:
        if e.manager_id is None or e.manager_id not in by_id or e.manager_id == e.employee_id:
            roots.append(e)
        else:
            children.setdefault(e.manager_id, []).append(e)

    placed: set[int] = set()

    def grow(employee: Employee) -> OrgNode:
        node = OrgNode(employee)
        placed.add(employee.employee_id)
        stack = [node]
        while stack:
            current = stack.pop()
            for child in children.get(current.employee.employee_id, []):
                if child.employee_id in placed:
                    continue
                placed.add(child.employee_id)
                child_node = OrgNode(child)
                current.reports.append(child_node)
                stack.append(child_node)
        return node

    tree = [grow(e) for e in roots]

    for e in sorted(employees, key=lambda x: x.employee_id):
        if e.employee_id not in placed:
            logger.warning("reporting cycle through employee %s", e.employee_id)
            tree.append(grow(e))
    return tree
