from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType

from .ai.assist import AssistService
from .ai.client import GeminiClient
from .ai.images import ImageLoader
from .ai.verification import GeminiFaceVerifier
from .attendance.camera import FrameSourceFactory, UploadedFrameSource, frame_source_factory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .companies.mysql_company_repository import MySQLCompanyRepository
from .companies.service import CompanyService, InvitationCodeIssuer
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import AuthService, EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .organization.service import OrganizationService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .performance.mysql_performance_repository import MySQLPerformanceRepository
from .performance.service import PerformanceService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    auth_service: AuthService
    employee_service: EmployeeService
    company_service: CompanyService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    performance_service: PerformanceService
    organization_service: OrganizationService
    assist_service: AssistService

    frame_sources: FrameSourceFactory = field(default=UploadedFrameSource)


def build_container(*, settings: ModuleType) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    employees_repo = MySQLEmployeeRepository(conn)
    companies_repo = MySQLCompanyRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    payroll_repo = MySQLPayrollRepository(conn)
    reviews_repo = MySQLPerformanceRepository(conn)

    timeout = float(getattr(settings, "AI_TIMEOUT_SECONDS", 20))
    client = GeminiClient(
        getattr(settings, "GEMINI_API_KEY", ""),
        model=getattr(settings, "GEMINI_MODEL", "gemini-2.5-flash"),
        timeout=timeout,
    )
    verifier = GeminiFaceVerifier(client)
    code_attempts = int(getattr(settings, "INVITATION_CODE_MAX_ATTEMPTS", 5))
    assist_service = AssistService(client)

    return Container(
        conn=conn,
        auth_service=AuthService(
            employees_repo,
            companies_repo,
            verifier,
            codes=InvitationCodeIssuer(max_attempts=code_attempts),
        ),
        employee_service=EmployeeService(
            employees_repo,
            verifier,
            deletion_grace_days=int(getattr(settings, "DELETION_GRACE_DAYS", 10)),
        ),
        company_service=CompanyService(
            companies_repo,
            max_code_attempts=code_attempts,
        ),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            companies_repo,
            verifier,
            ImageLoader(timeout=timeout),
        ),
        leave_service=LeaveService(leaves_repo, employees_repo),
        payroll_service=PayrollService(payroll_repo, employees_repo),
        performance_service=PerformanceService(reviews_repo, employees_repo, assist_service),
        organization_service=OrganizationService(employees_repo),
        assist_service=assist_service,
        frame_sources=frame_source_factory(
            getattr(settings, "FRAME_SOURCE", "upload"),
            device_index=int(getattr(settings, "CAMERA_DEVICE_INDEX", 0)),
        ),
    )
