from __future__ import annotations

import re

import pytest

from employee_management.companies.model import Company
from employee_management.companies.service import CompanyService, InvitationCodeIssuer, generate_invitation_code
from employee_management.core.enums import Role
from employee_management.core.exceptions import AuthorizationError, ConflictError, RemoteServiceError, ValidationError
from tests.fakes import InMemoryCompanies, OFFICE

CODE_RE = re.compile(r"^[A-Z0-9]{6}$")


def _companies():
    return InMemoryCompanies(
        Company(company_id=1, name="Acme", invitation_code="PENDING"),
        Company(company_id=2, name="Globex", invitation_code="TAKEN1"),
    )


def _scripted(*codes):
    it = iter(codes)
    return lambda: next(it)


def test_generated_codes_are_six_uppercase_alphanumerics():
    for _ in range(200):
        assert CODE_RE.match(generate_invitation_code())


def test_issue_stores_code_on_company():
    companies = _companies()
    svc = CompanyService(companies, code_generator=_scripted("NEW123"))

    code = svc.issue_invitation_code(current_role=Role.ADMIN, company_id=1)

    assert code == "NEW123"
    assert companies.get_by_id(1).invitation_code == "NEW123"
    assert companies.get_by_id(1).has_invitation_code


def test_collision_is_retried_with_a_new_code():
    companies = _companies()
    svc = CompanyService(companies, code_generator=_scripted("TAKEN1", "FRESH2"))

    code = svc.issue_invitation_code(current_role=Role.ADMIN, company_id=1)

    assert code == "FRESH2"
    assert companies.code_writes == ["TAKEN1", "FRESH2"]
    assert companies.get_by_id(2).invitation_code == "TAKEN1"


def test_gives_up_after_five_collisions():
    companies = _companies()
    companies.taken_codes = {"AAAAA1", "AAAAA2", "AAAAA3", "AAAAA4", "AAAAA5"}
    svc = CompanyService(companies, code_generator=_scripted("AAAAA1", "AAAAA2", "AAAAA3", "AAAAA4", "AAAAA5", "NEVER6"))

    with pytest.raises(ConflictError, match="Could not generate a unique invitation code"):
        svc.issue_invitation_code(current_role=Role.ADMIN, company_id=1)

    assert len(companies.code_writes) == 5
    assert companies.get_by_id(1).invitation_code == "PENDING"


def test_attempt_ceiling_is_configurable():
    companies = _companies()
    svc = CompanyService(companies, code_generator=lambda: "TAKEN1", max_code_attempts=2)

    with pytest.raises(ConflictError):
        svc.issue_invitation_code(current_role=Role.ADMIN, company_id=1)
    assert len(companies.code_writes) == 2


def test_other_store_errors_abort_without_retry():
    companies = _companies()
    companies.fail_with = RemoteServiceError("The record store failed, please try again.")
    svc = CompanyService(companies, code_generator=_scripted("NEW123", "NEW456"))

    with pytest.raises(RemoteServiceError):
        svc.issue_invitation_code(current_role=Role.ADMIN, company_id=1)
    assert companies.code_writes == ["NEW123"]


def test_only_admin_issues_codes():
    svc = CompanyService(_companies())
    with pytest.raises(AuthorizationError):
        svc.issue_invitation_code(current_role=Role.HR_MANAGER, company_id=1)


def test_configure_geofence():
    companies = _companies()
    svc = CompanyService(companies)

    company = svc.configure_geofence(
        current_role=Role.ADMIN, company_id=1, latitude=OFFICE[0], longitude=OFFICE[1], radius_m="150"
    )

    assert company.geofence is not None
    assert company.geofence.radius_m == 150
    assert company.geofence.contains(*OFFICE)


@pytest.mark.parametrize(
    "lat, lon, radius",
    [
        (91, 0, 100),
        (0, -181, 100),
        (0, 0, 0),
        (0, 0, -5),
        ("north", 0, 100),
        (None, 0, 100),
        (0, 0, "nan"),
        (0, 0, "inf"),
        (0, 0, "1e400"),
        ("nan", 0, 100),
        (0, "-inf", 100),
        (0, 0, True),
    ],
)
def test_configure_geofence_rejects_bad_values(lat, lon, radius):
    svc = CompanyService(_companies())
    with pytest.raises(ValidationError):
        svc.configure_geofence(current_role=Role.ADMIN, company_id=1, latitude=lat, longitude=lon, radius_m=radius)


def test_geofence_needs_all_three_values():
    assert Company(1, "Acme", "ABC123", latitude=1.0, longitude=2.0).geofence is None
    assert Company(1, "Acme", "ABC123", latitude=1.0, longitude=2.0, radius_m=0).geofence is None
    assert Company(1, "Acme", "ABC123", latitude=0.0, longitude=0.0, radius_m=10).geofence is not None


def test_pending_placeholder_is_not_a_code():
    assert not Company(1, "Acme", "PENDING").has_invitation_code


def test_issuer_hands_each_candidate_to_the_writer():
    written = []

    def write(code):
        written.append(code)
        if code == "TAKEN1":
            raise ConflictError("Duplicate value violates a unique constraint")

    issuer = InvitationCodeIssuer(generator=_scripted("TAKEN1", "FRESH2"))

    assert issuer.issue(write) == "FRESH2"
    assert written == ["TAKEN1", "FRESH2"]
