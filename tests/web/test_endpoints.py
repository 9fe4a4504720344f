from __future__ import annotations

import dataclasses
from datetime import datetime

import pytest

from employee_management.main import create_app
from tests.fakes import FAR_AWAY, NEARBY, RecordingFrameSource, png_base64
from tests.web.conftest import PASSWORD


def test_login_and_me(client, login):
    body = login("e2@example.com").get_json()
    assert body["success"] is True
    assert body["user"]["role"] == "Employee"

    me = client.get("/me").get_json()
    assert me["employee"]["id"] == 2
    assert "password_hash" not in me["employee"]


def test_requires_login(client):
    resp = client.get("/attendance/clock-button")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_bad_credentials_are_401(client):
    resp = client.post("/auth/login", json={"email": "e2@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Invalid email or password"}


def test_terminated_account_login_reports_reason(world, client):
    world.employees.update_profile(2, {"scheduled_deletion_date": datetime(2026, 3, 12), "termination_reason": "Resigned"})

    resp = client.post("/auth/login", json={"email": "e2@example.com", "password": "secret1"})

    body = resp.get_json()
    assert resp.status_code == 401
    assert body["reason"] == "Resigned"
    assert body["deletion_date"].startswith("2026-03-12")


def test_smart_clock_flow(world, client, login):
    login("e2@example.com")
    frame = png_base64()

    assert client.get("/attendance/clock-button").get_json()["label"] == "Smart Clock-In"

    resp = client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1], "frame": frame})
    body = resp.get_json()
    assert resp.status_code == 200, body
    assert body["action"] == "clock_in"
    assert body["celebrate"] is True
    assert body["message"] == "Clocked in at 09:15."

    resp = client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1], "frame": frame})
    assert resp.get_json()["action"] == "clock_out"

    resp = client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1], "frame": frame})
    assert resp.status_code == 409
    assert resp.get_json()["message"] == "Already clocked out for today."

    history = client.get("/attendance/me").get_json()
    assert history["today"]["check_out_time"] == "09:15"
    assert len(history["records"]) == 1


def test_clock_outside_geofence_is_403_with_distance(world, client, login):
    login("e2@example.com")

    resp = client.post("/attendance/clock", json={"latitude": FAR_AWAY[0], "longitude": FAR_AWAY[1], "frame": png_base64()})

    body = resp.get_json()
    assert resp.status_code == 403
    assert body["distance_m"] == 890
    assert world.attendance.rows == {}


def test_clock_without_frame_or_location_is_403(world, client, login):
    login("e2@example.com")

    assert client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1]}).status_code == 403
    assert client.post("/attendance/clock", json={"frame": png_base64()}).status_code == 403
    assert world.attendance.rows == {}


def test_face_mismatch_is_422(world, client, login):
    world.verifier.match = False
    login("e2@example.com")

    resp = client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1], "frame": png_base64()})
    assert resp.status_code == 422


def test_verification_outage_is_503(world, client, login):
    world.verifier.unavailable = True
    login("e2@example.com")

    resp = client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1], "frame": png_base64()})
    assert resp.status_code == 503
    assert resp.get_json()["message"] == "Could not verify, please try again."


def test_admin_issues_code_and_employee_joins(world, client, login):
    login("e1@example.com")
    resp = client.post("/company/invitation-code")
    assert resp.status_code == 201
    code = resp.get_json()["invitation_code"]
    client.post("/auth/logout")

    resp = client.post(
        "/auth/signup/employee",
        json={"invitation_code": code, "name": "Nia", "email": "nia@example.com", "password": "secret1", "photo": png_base64()},
    )
    assert resp.status_code == 201
    assert resp.get_json()["user"]["company_id"] == 1


def test_admin_sign_up_then_onboarding(world, client):
    resp = client.post(
        "/auth/signup/admin",
        json={"company_name": "Globex", "name": "Hank", "email": "hank@example.com", "password": "secret1", "photo": png_base64()},
    )
    assert resp.status_code == 201, resp.get_json()

    company = client.get("/company").get_json()["company"]
    first_code = company["invitation_code"]
    assert first_code and first_code != "PENDING"
    assert company["geofence"] is None

    resp = client.put("/company/geofence", json={"latitude": 40.0, "longitude": -74.0, "radius_m": 150})
    assert resp.get_json()["company"]["geofence"]["radius_m"] == 150
    resp = client.post("/company/invitation-code")
    assert resp.status_code == 201
    assert client.get("/company").get_json()["company"]["invitation_code"] == resp.get_json()["invitation_code"]
    assert client.post("/onboarding/complete").get_json()["employee"]["onboarding_completed"] is True


def test_employee_cannot_configure_geofence(client, login):
    login("e2@example.com")
    assert client.put("/company/geofence", json={"latitude": 1, "longitude": 1, "radius_m": 10}).status_code == 403


@pytest.mark.parametrize("radius", ["nan", "inf", "1e400"])
def test_non_finite_geofence_radius_is_a_bad_request(client, login, radius):
    login("e1@example.com")
    resp = client.put("/company/geofence", json={"latitude": 40.0, "longitude": -74.0, "radius_m": radius})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_non_text_profile_fields_are_a_bad_request(client, login):
    login("e2@example.com")
    assert client.put("/employees/2", json={"name": 5}).status_code == 400
    assert client.post("/auth/login", json={"email": 123, "password": "secret1"}).status_code == 400


def test_invalid_portrait_blocks_avatar_change(world, client, login):
    world.verifier.portrait_ok = False
    world.verifier.reason = "No face detected."
    login("e2@example.com")
    before = world.employees.get_by_id(2).avatar_url

    resp = client.post("/me/avatar", json={"photo": png_base64()})

    assert resp.status_code == 422
    assert resp.get_json()["message"] == "No face detected."
    assert world.employees.get_by_id(2).avatar_url == before


def test_leave_request_and_approval(client, login):
    login("e2@example.com")
    resp = client.post(
        "/leaves",
        json={"leave_type": "Annual", "start_date": "2026-04-01", "end_date": "2026-04-03", "reason": "Trip"},
    )
    assert resp.status_code == 201
    leave_id = resp.get_json()["leave"]["id"]

    login("e1@example.com")
    assert [l["id"] for l in client.get("/leaves/approvals").get_json()["leaves"]] == [leave_id]
    resp = client.post(f"/leaves/{leave_id}/approve")
    assert resp.get_json()["leave"]["status"] == "Approved"
    assert client.post(f"/leaves/{leave_id}/reject").status_code == 409


def test_payroll_review_and_reports(world, client, login):
    login("e1@example.com")

    resp = client.post("/payroll/process", json={"month": "March", "year": 2026})
    assert resp.get_json()["message"] == "Payroll processed for 2 employee(s)."

    resp = client.post("/performance", json={"employee_id": 2, "rating": 4.5, "comments": "Great"})
    assert resp.status_code == 201
    assert client.post("/performance/feedback-draft", json={"employee_id": 2, "rating": 4}).get_json()["comments"]
    assert client.get("/reports/turnover-risk").status_code == 200
    assert client.get("/wellness/tip").get_json()["tip"] == "Take a short walk every hour."

    chart = client.get("/organization/chart").get_json()["chart"]
    assert chart[0]["id"] == 1
    assert chart[0]["reports"][0]["id"] == 2

    login("e2@example.com")
    assert client.get("/payroll/me").get_json()["payrolls"][0]["net_salary"] == 4500.0
    assert client.get("/performance/me").get_json()["reviews"][0]["rating"] == 4.5
    assert client.post("/payroll/process", json={"month": "March", "year": 2026}).status_code == 403


def test_remove_employee(world, client, login):
    login("e1@example.com")

    resp = client.post("/employees/2/remove", json={"reason": "Contract ended"})

    assert resp.status_code == 200
    assert resp.get_json()["employee"]["scheduled_deletion_date"].startswith("2026-03-12")


def test_kiosk_mode_reads_the_server_camera(world):
    kiosk = RecordingFrameSource()
    container = dataclasses.replace(world.container, frame_sources=lambda uploaded: kiosk)
    client = create_app(container, settings_module="employee_management.settings.testing").test_client()
    client.post("/auth/login", json={"email": "e2@example.com", "password": PASSWORD})

    resp = client.post("/attendance/clock", json={"latitude": NEARBY[0], "longitude": NEARBY[1]})

    assert resp.status_code == 200, resp.get_json()
    assert (kiosk.opened, kiosk.released) == (1, 1)
    assert world.verifier.match_calls[0][0] == kiosk.frame
