from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from employee_management.ai.assist import AssistService
from employee_management.ai.images import ImageLoader
from employee_management.attendance.service import AttendanceService
from employee_management.companies.model import Company
from employee_management.companies.service import CompanyService
from employee_management.container import Container
from employee_management.core.enums import Role
from employee_management.employees.service import AuthService, EmployeeService
from employee_management.leaves.service import LeaveService
from employee_management.main import create_app
from employee_management.organization.service import OrganizationService
from employee_management.payroll.service import PayrollService
from employee_management.performance.service import PerformanceService
from tests.fakes import (
    OFFICE,
    FakeTextClient,
    FakeVerifier,
    InMemoryAttendance,
    InMemoryCompanies,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryPayrolls,
    InMemoryReviews,
    fixed_clock,
    make_employee,
)

PASSWORD = "secret1"


class World:
    """Everything an endpoint test may want to poke at."""

    def __init__(self):
        hashed = generate_password_hash(PASSWORD)
        self.employees = InMemoryEmployees(
            make_employee(1, role=Role.ADMIN, password_hash=hashed),
            make_employee(2, manager_id=1, password_hash=hashed),
        )
        self.companies = InMemoryCompanies(
            Company(company_id=1, name="Acme", invitation_code="ABC123", latitude=OFFICE[0], longitude=OFFICE[1], radius_m=200),
            employees=self.employees,
        )
        self.attendance = InMemoryAttendance()
        self.verifier = FakeVerifier()
        self.text = FakeTextClient()
        clock = fixed_clock()
        assist = AssistService(self.text)
        self.container = Container(
            conn=None,
            auth_service=AuthService(self.employees, self.companies, self.verifier, clock=clock),
            employee_service=EmployeeService(self.employees, self.verifier, clock=clock),
            company_service=CompanyService(self.companies),
            attendance_service=AttendanceService(
                self.attendance,
                self.employees,
                self.companies,
                self.verifier,
                ImageLoader(timeout=1),
                clock=clock,
            ),
            leave_service=LeaveService(InMemoryLeaves(), self.employees),
            payroll_service=PayrollService(InMemoryPayrolls(self.employees), self.employees, clock=clock),
            performance_service=PerformanceService(InMemoryReviews(self.employees), self.employees, assist, clock=clock),
            organization_service=OrganizationService(self.employees),
            assist_service=assist,
        )


@pytest.fixture
def world():
    return World()


@pytest.fixture
def client(world):
    app = create_app(world.container, settings_module="employee_management.settings.testing")
    return app.test_client()


@pytest.fixture
def login(client):
    def do(email):
        resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return do
