from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..ai.images import ImageLoader
from ..ai.verification import FaceVerifier
from ..common.datetime_utils import format_clock_time, now_local
from ..common.notifications import LoggingNotifier, Notifier
from ..companies.model import Company, Geofence
from ..companies.repository import CompanyRepository
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, ClockAction
from ..core.exceptions import (
    ConfigurationError,
    ConflictError,
    GeofenceViolationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
    VerificationFailedError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .camera import CAMERA_REQUIRED_MESSAGE, FrameSource
from .model import AttendanceRecord, ClockButton, ClockResult, ClockState, Location, state_of
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Smart attendance: geofenced, face-verified clock-in and clock-out.

    Per employee and day the record moves NoRecord -> ClockedIn ->
    ClockedOut. Both transitions pass the same gate (geofence, then face
    match against the profile photo) and nothing is written unless the
    gate passes.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        companies: CompanyRepository,
        verifier: FaceVerifier,
        image_loader: ImageLoader,
        *,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._companies = companies
        self._verifier = verifier
        self._images = image_loader
        self._notifier = notifier or LoggingNotifier()
        self._clock = clock

    def _load(self, employee_id: int) -> tuple[Employee, Company]:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        company = self._companies.get_by_id(employee.company_id)
        if not company:
            raise NotFoundError("Company not found")
        return employee, company

    def today_record(self, employee_id: int, *, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, today or self._clock().date())

    def history(self, employee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_employee(employee_id, limit)

    def clock_button(self, employee_id: int, *, verifying: bool = False) -> ClockButton:
        _, company = self._load(employee_id)
        if company.geofence is None:
            return ClockButton("Not Configured", disabled=True)
        if verifying:
            return ClockButton("Verifying...", disabled=True, loading=True)

        state = state_of(self.today_record(employee_id))
        if state == ClockState.NO_RECORD:
            return ClockButton("Smart Clock-In", disabled=False)
        if state == ClockState.CLOCKED_IN:
            return ClockButton("Smart Clock-Out", disabled=False)
        return ClockButton("Completed for Today", disabled=True)

    def clock(self, employee_id: int, *, location: Optional[Location], frame_source: FrameSource) -> ClockResult:
        """Clock in or out depending on today's record."""
        record = self.today_record(employee_id)
        if state_of(record) == ClockState.NO_RECORD:
            return self.clock_in(employee_id, location=location, frame_source=frame_source)
        return self.clock_out(employee_id, location=location, frame_source=frame_source)

    def clock_in(self, employee_id: int, *, location: Optional[Location], frame_source: FrameSource) -> ClockResult:
        now = self._clock()
        today = now.date()

        if self._attendance.get_for_employee_and_date(employee_id, today):
            raise ConflictError("You have already clocked in today.")

        self._verify_presence(employee_id, location=location, frame_source=frame_source)

        try:
            record = self._attendance.create_clock_in(
                employee_id=employee_id,
                work_date=today,
                check_in_time=format_clock_time(now),
                status=AttendanceStatus.PRESENT,
            )
        except ConflictError:
            raise ConflictError("You have already clocked in today.")

        logger.info("employee %s clocked in at %s", employee_id, record.check_in_time)
        self._notifier.notify(f"Clocked in at {record.check_in_time}.", "success")
        return ClockResult(record=record, action=ClockAction.CLOCK_IN, celebrate=True)

    def clock_out(self, employee_id: int, *, location: Optional[Location], frame_source: FrameSource) -> ClockResult:
        now = self._clock()
        record = self._attendance.get_for_employee_and_date(employee_id, now.date())

        state = state_of(record)
        if state == ClockState.NO_RECORD:
            raise ValidationError("You have not clocked in today.")
        if state == ClockState.CLOCKED_OUT:
            raise ConflictError("Already clocked out for today.")

        self._verify_presence(employee_id, location=location, frame_source=frame_source)

        record = self._attendance.set_clock_out(
            attendance_id=record.attendance_id,
            check_out_time=format_clock_time(now),
        )
        logger.info("employee %s clocked out at %s", employee_id, record.check_out_time)
        self._notifier.notify(f"Clocked out at {record.check_out_time}.", "success")
        return ClockResult(record=record, action=ClockAction.CLOCK_OUT)

    def _verify_presence(self, employee_id: int, *, location: Optional[Location], frame_source: FrameSource) -> None:
        employee, company = self._load(employee_id)

        geofence = company.geofence
        if geofence is None:
            raise ConfigurationError("Smart attendance is not configured for your company yet.")

        if location is None:
            raise PermissionDeniedError(CAMERA_REQUIRED_MESSAGE)
        self._check_geofence(geofence, location)

        if not employee.avatar_url:
            raise VerificationFailedError("You must have a profile picture set for facial recognition.")
        reference = self._images.load(employee.avatar_url)

        with frame_source.open() as camera:
            live = camera.capture()
            matched = self._verifier.match_faces(live, reference)

        if not matched:
            raise VerificationFailedError(
                "Facial recognition failed. Ensure you are in a well-lit area and match your profile picture."
            )

    @staticmethod
    def _check_geofence(geofence: Geofence, location: Location) -> None:
        if not (math.isfinite(location.latitude) and math.isfinite(location.longitude)):
            raise ValidationError("Device location is not valid.")
        distance = geofence.distance_to(location.latitude, location.longitude)
        if not distance <= geofence.radius_m:
            raise GeofenceViolationError(
                f"You must be within {geofence.radius_m:g}m of the office. You are ~{round(distance)}m away.",
                distance_m=distance,
                radius_m=geofence.radius_m,
            )
