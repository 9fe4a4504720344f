from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from ..core.exceptions import RemoteServiceError, VerificationUnavailableError
from .client import GeminiClient
from .images import ImageData

logger = logging.getLogger(__name__)

PORTRAIT_PROMPT = """
Analyze this image for use as a professional profile picture.
Check for two conditions:
1. Does the image contain one, and only one, clear human face?
2. Is the image a professional headshot? (e.g., not a group photo, cartoon, object, or containing inappropriate content).

Return your answer as a JSON object with two keys: "isValid" (boolean) and "reason" (a brief string explanation, max 10 words).
If it is valid, the reason should be "Photo is valid.".
If invalid, explain why (e.g., "No face detected.", "Multiple faces detected.", "Image is not a person.", "Image is not professional.").
"""

PORTRAIT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "isValid": {"type": "BOOLEAN"},
        "reason": {"type": "STRING"},
    },
    "required": ["isValid", "reason"],
}

FACE_MATCH_PROMPT = """
Act as a security system. Compare the person in the live camera frame to the person in the user's profile photo.
Are they the same person?
The live frame might have different lighting or angles. Be reasonably certain before confirming.
Respond with only the word 'Yes' or 'No'."""

SINGLE_FACE_PROMPT = "Is there one single, clear human face visible in this image? Answer with only the word 'Yes' or 'No'."


@dataclass(frozen=True)
class PortraitVerdict:
    is_valid: bool
    reason: str


class FaceVerifier(Protocol):
    """Remote image checks used as gates before writes.

    A heuristic classifier, not proof of identity.
    """

    def validate_portrait(self, image: ImageData) -> PortraitVerdict:
        raise NotImplementedError

    def match_faces(self, live: ImageData, reference: ImageData) -> bool:
        raise NotImplementedError

    def detect_single_face(self, image: ImageData) -> bool:
        raise NotImplementedError


def parse_yes_no(text: str) -> bool:
    """Read a one-word Yes/No answer.

    Only an explicit "yes" passes. Anything that is neither yes nor no is
    treated as an unusable answer rather than a rejection.
    """
    words = re.findall(r"[a-z]+", (text or "").lower())
    if not words:
        raise VerificationUnavailableError()
    if words[0] == "yes":
        return True
    if words[0] == "no":
        return False
    logger.warning("unexpected yes/no answer from verifier: %r", text)
    raise VerificationUnavailableError()


def parse_portrait_verdict(text: str) -> PortraitVerdict:
    try:
        payload = json.loads(text)
    except ValueError:
        logger.warning("portrait verdict is not JSON: %r", text)
        raise VerificationUnavailableError()

    if not isinstance(payload, dict) or not isinstance(payload.get("isValid"), bool):
        logger.warning("portrait verdict has no boolean isValid: %r", payload)
        raise VerificationUnavailableError()

    reason = payload.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        reason = "Photo is valid." if payload["isValid"] else "Photo was rejected."
    return PortraitVerdict(is_valid=payload["isValid"], reason=reason.strip())


class GeminiFaceVerifier(FaceVerifier):
    def __init__(self, client: GeminiClient):
        self._client = client

    def validate_portrait(self, image: ImageData) -> PortraitVerdict:
        try:
            text = self._client.generate([image, PORTRAIT_PROMPT], response_schema=PORTRAIT_SCHEMA)
        except RemoteServiceError as e:
            raise VerificationUnavailableError() from e
        return parse_portrait_verdict(text)

    def match_faces(self, live: ImageData, reference: ImageData) -> bool:
        try:
            text = self._client.generate(
                [
                    "This is the live camera frame:",
                    live,
                    "This is the user's profile photo:",
                    reference,
                    FACE_MATCH_PROMPT,
                ]
            )
        except RemoteServiceError as e:
            raise VerificationUnavailableError() from e
        return parse_yes_no(text)

    def detect_single_face(self, image: ImageData) -> bool:
        try:
            text = self._client.generate([image, SINGLE_FACE_PROMPT])
        except RemoteServiceError as e:
            raise VerificationUnavailableError() from e
        return parse_yes_no(text)
