from __future__ import annotations

from datetime import datetime

import pytest

from employee_management.attendance.camera import CAMERA_REQUIRED_MESSAGE, UploadedFrameSource
from employee_management.attendance.model import ClockState, Location, state_of
from employee_management.attendance.service import AttendanceService
from employee_management.common.geo import haversine_distance
from employee_management.companies.model import Company
from employee_management.core.enums import AttendanceStatus, ClockAction
from employee_management.core.exceptions import (
    ConfigurationError,
    ConflictError,
    GeofenceViolationError,
    PermissionDeniedError,
    ValidationError,
    VerificationFailedError,
    VerificationUnavailableError,
)
from tests.fakes import (
    FACE,
    FAR_AWAY,
    NEARBY,
    NOW,
    OFFICE,
    PORTRAIT,
    FakeImageLoader,
    FakeVerifier,
    InMemoryAttendance,
    InMemoryCompanies,
    InMemoryEmployees,
    RecordingFrameSource,
    RecordingNotifier,
    fixed_clock,
    make_employee,
)

HERE = Location(*NEARBY)


def _company(**overrides):
    values = dict(company_id=1, name="Acme", invitation_code="ABC123", latitude=OFFICE[0], longitude=OFFICE[1], radius_m=200)
    values.update(overrides)
    return Company(**values)


def _service(*, company=None, employee=None, verifier=None, now=NOW):
    attendance = InMemoryAttendance()
    employees = InMemoryEmployees(employee or make_employee(7))
    companies = InMemoryCompanies(company or _company())
    verifier = verifier or FakeVerifier()
    notifier = RecordingNotifier()
    svc = AttendanceService(
        attendance,
        employees,
        companies,
        verifier,
        FakeImageLoader(),
        notifier=notifier,
        clock=fixed_clock(now),
    )
    return svc, attendance, verifier, notifier


def test_clock_in_inside_geofence_with_matching_face():
    svc, attendance, verifier, notifier = _service()
    camera = RecordingFrameSource()

    result = svc.clock(7, location=HERE, frame_source=camera)

    assert result.action == ClockAction.CLOCK_IN
    assert result.celebrate is True
    assert result.record.status == AttendanceStatus.PRESENT
    assert result.record.check_in_time == "09:15"
    assert result.record.work_date == NOW.date()
    assert verifier.match_calls == [(FACE, PORTRAIT)]
    assert camera.opened == camera.released == 1
    assert notifier.messages == [("Clocked in at 09:15.", "success")]
    assert len(attendance.rows) == 1


def test_second_action_clocks_out_and_does_not_celebrate():
    svc, attendance, _, _ = _service()
    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())

    svc._clock = fixed_clock(datetime(2026, 3, 2, 17, 45))
    result = svc.clock(7, location=HERE, frame_source=RecordingFrameSource())

    assert result.action == ClockAction.CLOCK_OUT
    assert result.celebrate is False
    assert result.record.check_in_time == "09:15"
    assert result.record.check_out_time == "17:45"
    assert state_of(result.record) == ClockState.CLOCKED_OUT
    assert len(attendance.rows) == 1


def test_third_action_is_rejected_without_using_camera():
    svc, attendance, verifier, _ = _service()
    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())
    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())
    camera = RecordingFrameSource()

    with pytest.raises(ConflictError, match="Already clocked out for today."):
        svc.clock(7, location=HERE, frame_source=camera)

    assert camera.opened == 0
    assert len(verifier.match_calls) == 2
    record = next(iter(attendance.rows.values()))
    assert record.check_out_time == "09:15"


def test_clock_in_twice_is_a_conflict():
    svc, _, _, _ = _service()
    svc.clock_in(7, location=HERE, frame_source=RecordingFrameSource())

    with pytest.raises(ConflictError):
        svc.clock_in(7, location=HERE, frame_source=RecordingFrameSource())


def test_clock_out_without_record_is_rejected():
    svc, attendance, _, _ = _service()

    with pytest.raises(ValidationError, match="not clocked in"):
        svc.clock_out(7, location=HERE, frame_source=RecordingFrameSource())
    assert attendance.rows == {}


def test_outside_geofence_reports_distance_and_writes_nothing():
    svc, attendance, verifier, _ = _service()
    camera = RecordingFrameSource()

    with pytest.raises(GeofenceViolationError) as exc:
        svc.clock(7, location=Location(*FAR_AWAY), frame_source=camera)

    assert str(exc.value) == "You must be within 200m of the office. You are ~890m away."
    assert round(exc.value.distance_m) == 890
    assert attendance.rows == {}
    assert camera.opened == 0
    assert verifier.match_calls == []


def test_point_on_the_boundary_is_inside():
    distance = haversine_distance(*OFFICE, *FAR_AWAY)
    svc, _, _, _ = _service(company=_company(radius_m=distance))

    result = svc.clock(7, location=Location(*FAR_AWAY), frame_source=RecordingFrameSource())
    assert result.action == ClockAction.CLOCK_IN


def test_unconfigured_geofence_fails_before_location_or_camera():
    svc, attendance, verifier, _ = _service(company=_company(latitude=None, longitude=None, radius_m=None))
    camera = RecordingFrameSource()

    with pytest.raises(ConfigurationError):
        svc.clock(7, location=None, frame_source=camera)

    assert camera.opened == 0
    assert verifier.match_calls == []
    assert attendance.rows == {}


def test_zero_radius_counts_as_unconfigured():
    svc, _, _, _ = _service(company=_company(radius_m=0))

    with pytest.raises(ConfigurationError):
        svc.clock(7, location=HERE, frame_source=RecordingFrameSource())


def test_missing_location_is_a_permission_error():
    svc, attendance, _, _ = _service()

    with pytest.raises(PermissionDeniedError, match=CAMERA_REQUIRED_MESSAGE):
        svc.clock(7, location=None, frame_source=RecordingFrameSource())
    assert attendance.rows == {}


def test_missing_camera_frame_is_a_permission_error():
    svc, attendance, _, _ = _service()

    with pytest.raises(PermissionDeniedError):
        svc.clock(7, location=HERE, frame_source=UploadedFrameSource(None))
    assert attendance.rows == {}


def test_face_mismatch_blocks_clock_in():
    svc, attendance, _, _ = _service(verifier=FakeVerifier(match=False))
    camera = RecordingFrameSource()

    with pytest.raises(VerificationFailedError, match="Facial recognition failed"):
        svc.clock(7, location=HERE, frame_source=camera)

    assert attendance.rows == {}
    assert camera.released == 1


def test_verification_outage_is_not_a_pass():
    svc, attendance, _, _ = _service(verifier=FakeVerifier(unavailable=True))
    camera = RecordingFrameSource()

    with pytest.raises(VerificationUnavailableError):
        svc.clock(7, location=HERE, frame_source=camera)

    assert attendance.rows == {}
    assert camera.released == 1


def test_camera_is_released_when_capture_fails():
    svc, attendance, _, _ = _service()
    camera = RecordingFrameSource(capture_error=RuntimeError("device lost"))

    with pytest.raises(RuntimeError):
        svc.clock(7, location=HERE, frame_source=camera)

    assert camera.opened == camera.released == 1
    assert attendance.rows == {}


def test_employee_without_profile_picture_cannot_clock_in():
    svc, attendance, verifier, _ = _service(employee=make_employee(7, avatar_url=None))

    with pytest.raises(VerificationFailedError, match="profile picture"):
        svc.clock(7, location=HERE, frame_source=RecordingFrameSource())

    assert verifier.match_calls == []
    assert attendance.rows == {}


def test_non_finite_location_is_rejected():
    svc, attendance, _, _ = _service()

    with pytest.raises(ValidationError):
        svc.clock(7, location=Location(float("nan"), OFFICE[1]), frame_source=RecordingFrameSource())
    assert attendance.rows == {}


def test_clock_button_follows_the_day():
    svc, _, _, _ = _service()

    button = svc.clock_button(7)
    assert (button.label, button.disabled) == ("Smart Clock-In", False)

    assert svc.clock_button(7, verifying=True).label == "Verifying..."
    assert svc.clock_button(7, verifying=True).disabled is True

    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())
    button = svc.clock_button(7)
    assert (button.label, button.disabled) == ("Smart Clock-Out", False)

    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())
    button = svc.clock_button(7)
    assert (button.label, button.disabled) == ("Completed for Today", True)


def test_clock_button_without_geofence():
    svc, _, _, _ = _service(company=_company(radius_m=None))

    button = svc.clock_button(7)
    assert (button.label, button.disabled) == ("Not Configured", True)


def test_history_is_newest_first():
    svc, _, _, _ = _service()
    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())
    svc._clock = fixed_clock(datetime(2026, 3, 3, 8, 0))
    svc.clock(7, location=HERE, frame_source=RecordingFrameSource())

    dates = [r.work_date.isoformat() for r in svc.history(7)]
    assert dates == ["2026-03-03", "2026-03-02"]
