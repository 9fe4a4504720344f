from __future__ import annotations

from typing import Callable, Optional, Protocol

from ..employees.model import NewEmployee
from .model import Company


class CompanyRepository(Protocol):
    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def get_by_invitation_code(self, code: str) -> Optional[Company]:
        raise NotImplementedError

    def update_geofence(self, company_id: int, *, latitude: float, longitude: float, radius_m: int) -> Company:
        raise NotImplementedError

    def update_invitation_code(self, company_id: int, code: str) -> Company:
        """Persist a new code; raises ConflictError if another company holds it."""

        raise NotImplementedError

    def create_company_with_admin(
        self,
        *,
        company_name: str,
        admin: NewEmployee,
        issue_code: Callable[[Callable[[str], object]], str],
    ) -> tuple[Company, int]:
        """Create a company, its first admin and its invitation code in one transaction.

        The company row holds the pending placeholder only until
        ``issue_code`` has written a unique code through the writer it is
        given. A concurrent setup still holding the placeholder is rejected
        with ConflictError. Returns the company and the new admin's
        employee id.
        """

        raise NotImplementedError
