from __future__ import annotations

import logging
import math
import secrets
import string
from typing import Callable, Optional

from ..common.retry import RetryExhausted, retry_on
from ..common.validators import require_float
from ..core.constants import INVITATION_CODE_LENGTH, INVITATION_CODE_MAX_ATTEMPTS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import Company
from .repository import CompanyRepository

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invitation_code(length: int = INVITATION_CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


class InvitationCodeIssuer:
    """Writes freshly generated codes until one is unique.

    ``write`` persists a candidate and raises ConflictError when another
    company already holds it. Conflicts trigger a new candidate, up to the
    attempt ceiling; any other failure aborts at once.
    """

    def __init__(
        self,
        *,
        generator: Optional[Callable[[], str]] = None,
        max_attempts: int = INVITATION_CODE_MAX_ATTEMPTS,
    ):
        self._generate = generator or generate_invitation_code
        self._max_attempts = int(max_attempts)

    def issue(self, write: Callable[[str], object]) -> str:
        def attempt(n: int) -> str:
            code = self._generate()
            write(code)
            return code

        try:
            return retry_on(ConflictError, attempt, max_attempts=self._max_attempts, label="invitation code")
        except RetryExhausted as e:
            logger.error("no unique invitation code after %d attempts", e.attempts)
            raise ConflictError("Could not generate a unique invitation code. Please try again.") from e


class CompanyService:
    """Company setup: geofence configuration and invitation code issuance."""

    def __init__(
        self,
        companies: CompanyRepository,
        *,
        code_generator: Optional[Callable[[], str]] = None,
        max_code_attempts: int = INVITATION_CODE_MAX_ATTEMPTS,
    ):
        self._companies = companies
        self._codes = InvitationCodeIssuer(generator=code_generator, max_attempts=max_code_attempts)

    def get_company(self, company_id: int) -> Company:
        company = self._companies.get_by_id(company_id)
        if not company:
            raise NotFoundError("Company not found")
        return company

    def configure_geofence(
        self,
        *,
        current_role: Role,
        company_id: int,
        latitude,
        longitude,
        radius_m,
    ) -> Company:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only an administrator can configure the office location")

        lat = require_float(latitude, "Latitude")
        lon = require_float(longitude, "Longitude")
        radius = require_float(radius_m, "Radius")
        for label, value in (("Latitude", lat), ("Longitude", lon), ("Radius", radius)):
            if not math.isfinite(value):
                raise ValidationError(f"{label} must be a finite number")
        if not -90.0 <= lat <= 90.0:
            raise ValidationError("Latitude must be between -90 and 90")
        if not -180.0 <= lon <= 180.0:
            raise ValidationError("Longitude must be between -180 and 180")
        if radius <= 0:
            raise ValidationError("Radius must be greater than zero")

        return self._companies.update_geofence(company_id, latitude=lat, longitude=lon, radius_m=int(round(radius)))

    def issue_invitation_code(self, *, current_role: Role, company_id: int) -> str:
        """Generate a fresh code and store it on the company, replacing the old one."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only an administrator can issue invitation codes")

        code = self._codes.issue(lambda candidate: self._companies.update_invitation_code(company_id, candidate))
        logger.info("issued invitation code for company %s", company_id)
        return code
