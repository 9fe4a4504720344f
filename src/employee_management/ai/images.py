from __future__ import annotations

import base64
import binascii
import io
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import ValidationError, VerificationUnavailableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageData:
    """Raw image bytes plus their mime type, as sent to the vision model."""

    data: bytes
    mime_type: str

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


def sniff_mime_type(data: bytes) -> str:
    """Identify an image with Pillow; anything Pillow cannot open is rejected."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        raise ValidationError("The uploaded file is not a readable image")
    mime = Image.MIME.get(fmt or "")
    if not mime:
        raise ValidationError(f"Unsupported image format: {fmt}")
    return mime


_MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg", "image/x-png": "image/png"}


def image_from_bytes(data: bytes, mime_type: Optional[str] = None) -> ImageData:
    """Wrap image bytes, always checking them with Pillow.

    A declared mime type must agree with what the bytes actually are.
    """
    if not data:
        raise ValidationError("Image is empty")
    actual = sniff_mime_type(data)
    if mime_type:
        declared = mime_type.strip().lower()
        declared = _MIME_ALIASES.get(declared, declared)
        if declared != actual:
            raise ValidationError(f"Image is declared as {mime_type} but is {actual}")
    return ImageData(data=data, mime_type=actual)


def image_from_base64(value: str, mime_type: Optional[str] = None) -> ImageData:
    """Accept either bare base64 or a ``data:<mime>;base64,<payload>`` URL."""
    value = (value or "").strip()
    if value.startswith("data:"):
        return parse_data_url(value)
    try:
        raw = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image is not valid base64")
    return image_from_bytes(raw, mime_type)


def parse_data_url(url: str) -> ImageData:
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith("data:") or ";base64" not in header:
        raise ValidationError("Image data URL is malformed")
    mime_type = header[len("data:"):].split(";", 1)[0] or None
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image is not valid base64")
    return image_from_bytes(raw, mime_type)


class ImageLoader:
    """Resolve an avatar reference (data URL or http(s) URL) into image bytes."""

    def __init__(self, *, timeout: float, session: Optional[requests.Session] = None):
        self._timeout = timeout
        self._session = session or requests.Session()

    def load(self, url: str) -> ImageData:
        if url.startswith("data:"):
            return parse_data_url(url)

        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("failed to fetch image from %s: %s", url, e)
            raise VerificationUnavailableError() from e

        # Content-Type headers from CDNs are unreliable; the bytes decide.
        return image_from_bytes(response.content)
