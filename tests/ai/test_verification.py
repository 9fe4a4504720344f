from __future__ import annotations

from types import SimpleNamespace

import httpx
import pytest
from google.genai import errors, types

from employee_management.ai.client import GeminiClient
from employee_management.ai.images import ImageData
from employee_management.ai.verification import GeminiFaceVerifier, parse_portrait_verdict, parse_yes_no
from employee_management.core.exceptions import RemoteServiceError, VerificationUnavailableError

LIVE = ImageData(data=b"live", mime_type="image/jpeg")
REFERENCE = ImageData(data=b"ref", mime_type="image/png")


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeSdk:
    """Stands in for ``genai.Client``; only ``models.generate_content`` is used."""

    def __init__(self, text=None, error=None):
        self.models = FakeModels(text, error)


def _verifier(sdk, **kwargs):
    return GeminiFaceVerifier(GeminiClient("key-1", client=sdk, **kwargs))


@pytest.mark.parametrize("text", ["Yes", "yes.", "  YES, same person"])
def test_yes_passes(text):
    assert parse_yes_no(text) is True


@pytest.mark.parametrize("text", ["No", "no.", "No, different person"])
def test_no_fails(text):
    assert parse_yes_no(text) is False


@pytest.mark.parametrize("text", ["", "Maybe", "I cannot tell"])
def test_anything_else_is_unavailable(text):
    with pytest.raises(VerificationUnavailableError):
        parse_yes_no(text)


def test_portrait_verdict_parsing():
    verdict = parse_portrait_verdict('{"isValid": false, "reason": "No face detected."}')
    assert verdict.is_valid is False
    assert verdict.reason == "No face detected."

    assert parse_portrait_verdict('{"isValid": true}').reason == "Photo is valid."


@pytest.mark.parametrize("text", ["not json", '{"isValid": "yes"}', "[]"])
def test_malformed_portrait_verdict_is_unavailable(text):
    with pytest.raises(VerificationUnavailableError):
        parse_portrait_verdict(text)


def test_match_faces_sends_both_images():
    sdk = FakeSdk("Yes")

    assert _verifier(sdk).match_faces(LIVE, REFERENCE) is True

    call = sdk.models.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    assert call["config"] is None
    images = [p.inline_data for p in call["contents"] if isinstance(p, types.Part)]
    assert [(i.mime_type, i.data) for i in images] == [("image/jpeg", b"live"), ("image/png", b"ref")]
    assert any(isinstance(p, str) and "same person" in p for p in call["contents"])


def test_validate_portrait_requests_json():
    sdk = FakeSdk('{"isValid": true, "reason": "Photo is valid."}')

    verdict = _verifier(sdk).validate_portrait(REFERENCE)

    assert verdict.is_valid
    config = sdk.models.calls[0]["config"]
    assert config.response_mime_type == "application/json"
    assert config.response_schema is not None


@pytest.mark.parametrize(
    "sdk",
    [
        FakeSdk(error=httpx.ReadTimeout("slow")),
        FakeSdk(error=httpx.ConnectError("down")),
        FakeSdk(error=errors.ClientError(429, {"error": {"code": 429, "message": "quota", "status": "RESOURCE_EXHAUSTED"}})),
        FakeSdk(error=errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})),
        FakeSdk(text=None),
        FakeSdk(text="   "),
    ],
)
def test_transport_failures_never_pass(sdk):
    with pytest.raises(VerificationUnavailableError):
        _verifier(sdk).match_faces(LIVE, REFERENCE)


def test_client_without_api_key_fails_without_calling_out(monkeypatch):
    created = []
    monkeypatch.setattr("employee_management.ai.client.genai.Client", lambda **kwargs: created.append(kwargs))
    client = GeminiClient("")

    with pytest.raises(RemoteServiceError, match="not configured"):
        client.generate_text("hello")
    assert created == []


def test_sdk_client_gets_key_and_timeout(monkeypatch):
    created = []

    def fake_client(**kwargs):
        created.append(kwargs)
        return FakeSdk("Fine.")

    monkeypatch.setattr("employee_management.ai.client.genai.Client", fake_client)
    client = GeminiClient("key-1", timeout=20)

    assert client.generate_text("hello") == "Fine."
    assert client.generate_text("again") == "Fine."
    assert len(created) == 1
    assert created[0]["api_key"] == "key-1"
    assert created[0]["http_options"].timeout == 20000


def test_single_face_check():
    assert _verifier(FakeSdk("Yes")).detect_single_face(LIVE) is True
    assert _verifier(FakeSdk("No")).detect_single_face(LIVE) is False
