from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..ai.images import ImageData
from ..ai.verification import FaceVerifier
from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_min_length, require_non_empty, require_text
from ..companies.repository import CompanyRepository
from ..companies.service import InvitationCodeIssuer
from ..core.constants import DELETION_GRACE_DAYS, PENDING_INVITATION_CODE
from ..core.enums import MANAGEMENT_ROLES, Role
from ..core.exceptions import (
    AccountTerminatedError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
    VerificationFailedError,
)
from .model import Employee, NewEmployee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Identity carried by a logged-in request (stored in the Flask session)."""

    employee_id: int
    name: str
    email: str
    role: Role
    company_id: int
    onboarding_completed: bool

    @classmethod
    def from_employee(cls, employee: Employee) -> "SessionUser":
        return cls(
            employee_id=employee.employee_id,
            name=employee.name,
            email=employee.email,
            role=employee.role,
            company_id=employee.company_id,
            onboarding_completed=employee.onboarding_completed,
        )

    @property
    def is_management(self) -> bool:
        return self.role in MANAGEMENT_ROLES


def require_valid_portrait(verifier: FaceVerifier, photo: ImageData) -> str:
    """Run the portrait check and return the avatar reference to store.

    A rejected photo is never stored anywhere.
    """
    verdict = verifier.validate_portrait(photo)
    if not verdict.is_valid:
        raise VerificationFailedError(verdict.reason)
    return photo.to_data_url()


class AuthService:
    """Use cases: log in, sign up as a company admin, sign up as an employee."""

    def __init__(
        self,
        employees: EmployeeRepository,
        companies: CompanyRepository,
        verifier: FaceVerifier,
        *,
        codes: Optional[InvitationCodeIssuer] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._companies = companies
        self._verifier = verifier
        self._codes = codes or InvitationCodeIssuer()
        self._clock = clock

    def authenticate(self, email: str, password: str) -> SessionUser:
        employee = self._employees.get_by_email(require_text(email, "Email").strip().lower())
        if not employee:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except (TypeError, ValueError):
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        if employee.is_scheduled_for_deletion:
            raise AccountTerminatedError(
                "This account is scheduled for deletion.",
                reason=employee.termination_reason,
                deletion_date=employee.scheduled_deletion_date.isoformat(),
            )

        return SessionUser.from_employee(employee)

    def session_for(self, employee_id: int) -> SessionUser:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise AuthenticationError("Your session has expired, please log in again")
        return SessionUser.from_employee(employee)

    def _check_credentials(self, *, name: str, email: str, password: str) -> tuple[str, str]:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", 6)
        if self._employees.get_by_email(email):
            raise ValidationError("An account with this email already exists")
        return name, email

    def sign_up_admin(self, *, company_name: str, name: str, email: str, password: str, photo: ImageData) -> SessionUser:
        """Create a company together with its first administrator.

        The company, the admin and the company's first invitation code are
        written in one transaction. The admin can replace the code later
        during onboarding.
        """
        company_name = require_non_empty(company_name, "Company name")
        name, email = self._check_credentials(name=name, email=email, password=password)
        avatar_url = require_valid_portrait(self._verifier, photo)

        admin = NewEmployee(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.ADMIN,
            date_of_joining=self._clock().date(),
            avatar_url=avatar_url,
            department="Management",
            job_title="Administrator",
        )
        company, employee_id = self._companies.create_company_with_admin(
            company_name=company_name, admin=admin, issue_code=self._codes.issue
        )
        logger.info("company %s created with admin %s", company.company_id, employee_id)
        return self.session_for(employee_id)

    def sign_up_employee(
        self,
        *,
        invitation_code: str,
        name: str,
        email: str,
        password: str,
        photo: ImageData,
        phone: str = "",
    ) -> SessionUser:
        code = require_text(invitation_code, "Invitation code").strip().upper()
        if not code or code == PENDING_INVITATION_CODE:
            raise ValidationError("Invalid invitation code.")
        company = self._companies.get_by_invitation_code(code)
        if not company:
            raise ValidationError("Invalid invitation code.")

        name, email = self._check_credentials(name=name, email=email, password=password)
        avatar_url = require_valid_portrait(self._verifier, photo)

        employee_id = self._employees.create(
            NewEmployee(
                name=name,
                email=email,
                password_hash=generate_password_hash(password),
                role=Role.EMPLOYEE,
                date_of_joining=self._clock().date(),
                company_id=company.company_id,
                avatar_url=avatar_url,
                phone=require_text(phone, "Phone").strip(),
            )
        )
        return self.session_for(employee_id)


class EmployeeService:
    """Use cases: profile edits, avatar changes, removal, onboarding."""

    def __init__(
        self,
        employees: EmployeeRepository,
        verifier: FaceVerifier,
        *,
        deletion_grace_days: int = DELETION_GRACE_DAYS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._verifier = verifier
        self._deletion_grace_days = int(deletion_grace_days)
        self._clock = clock

    def get_employee(self, *, actor: SessionUser, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.company_id != actor.company_id:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(self, *, actor: SessionUser) -> Sequence[Employee]:
        return self._employees.list_for_company(actor.company_id)

    def update_profile(self, *, actor: SessionUser, employee_id: int, changes: dict) -> Employee:
        target = self.get_employee(actor=actor, employee_id=employee_id)
        if actor.employee_id != target.employee_id and not actor.is_management:
            raise AuthorizationError("You can only edit your own profile")

        clean: dict = {}
        for key in ("name", "phone", "department", "job_title"):
            if key in changes:
                value = require_text(changes[key], key.replace("_", " ").capitalize()).strip()
                if key == "name":
                    value = require_non_empty(value, "Name")
                clean[key] = value

        if "manager_id" in changes:
            if not actor.is_management:
                raise AuthorizationError("Only HR or an administrator can change reporting lines")
            clean["manager_id"] = self._check_manager(target, changes["manager_id"])

        if "avatar_url" in changes:
            raise ValidationError("Upload a new photo to change the profile picture")

        return self._employees.update_profile(target.employee_id, clean)

    def _check_manager(self, target: Employee, manager_id) -> Optional[int]:
        if manager_id in (None, ""):
            return None
        try:
            manager_id = int(manager_id)
        except (TypeError, ValueError):
            raise ValidationError("Manager is not valid")
        if manager_id == target.employee_id:
            raise ValidationError("An employee cannot report to themselves")
        manager = self._employees.get_by_id(manager_id)
        if not manager or manager.company_id != target.company_id:
            raise ValidationError("Manager is not valid")
        return manager_id

    def update_avatar(self, *, actor: SessionUser, employee_id: int, photo: ImageData) -> Employee:
        target = self.get_employee(actor=actor, employee_id=employee_id)
        if actor.employee_id != target.employee_id and not actor.is_management:
            raise AuthorizationError("You can only change your own photo")
        avatar_url = require_valid_portrait(self._verifier, photo)
        return self._employees.update_profile(target.employee_id, {"avatar_url": avatar_url})

    def remove_employee(self, *, actor: SessionUser, employee_id: int, reason: str) -> Employee:
        """Schedule the employee for deletion after the grace period."""
        if not actor.is_management:
            raise AuthorizationError("You do not have permission to remove employees")
        target = self.get_employee(actor=actor, employee_id=employee_id)
        if target.employee_id == actor.employee_id:
            raise ValidationError("You cannot remove your own account")
        if target.is_scheduled_for_deletion:
            raise ValidationError("This employee is already scheduled for deletion")

        reason = require_non_empty(reason, "Reason")
        deletion_date = self._clock() + timedelta(days=self._deletion_grace_days)
        logger.info("employee %s scheduled for deletion on %s", target.employee_id, deletion_date.date())
        return self._employees.schedule_deletion(target.employee_id, deletion_date=deletion_date, reason=reason)

    def complete_onboarding(self, *, actor: SessionUser) -> Employee:
        return self._employees.set_onboarding_completed(actor.employee_id)
