from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator, Optional, Protocol

import cv2

from ..ai.images import ImageData
from ..core.exceptions import PermissionDeniedError, VerificationUnavailableError

logger = logging.getLogger(__name__)

CAMERA_REQUIRED_MESSAGE = "Camera and location access are required for Smart Attendance."


class Camera(Protocol):
    def capture(self) -> ImageData:
        raise NotImplementedError


class FrameSource(Protocol):
    """Acquires a camera only for the duration of a verification.

    ``open()`` is a context manager; the device is released on every exit
    path, including failures raised while it is held.
    """

    def open(self) -> ContextManager[Camera]:
        raise NotImplementedError


class _StaticCamera:
    def __init__(self, image: ImageData):
        self._image = image

    def capture(self) -> ImageData:
        return self._image


class UploadedFrameSource:
    """A frame captured on the client and posted with the request."""

    def __init__(self, image: Optional[ImageData]):
        self._image = image

    @contextmanager
    def open(self) -> Iterator[Camera]:
        if self._image is None:
            raise PermissionDeniedError(CAMERA_REQUIRED_MESSAGE)
        yield _StaticCamera(self._image)


class _OpenCVCamera:
    def __init__(self, capture: "cv2.VideoCapture", jpeg_quality: int):
        self._capture = capture
        self._jpeg_quality = jpeg_quality

    def capture(self) -> ImageData:
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise VerificationUnavailableError("Could not read a frame from the camera, please try again.")
        ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self._jpeg_quality])
        if not ok:
            raise VerificationUnavailableError("Could not encode the camera frame, please try again.")
        return ImageData(data=buf.tobytes(), mime_type="image/jpeg")


class OpenCVFrameSource:
    """Local camera (kiosk mode) read through OpenCV."""

    def __init__(self, device_index: int = 0, *, warmup_seconds: float = 1.5, jpeg_quality: int = 90):
        self._device_index = device_index
        self._warmup_seconds = warmup_seconds
        self._jpeg_quality = jpeg_quality

    @contextmanager
    def open(self) -> Iterator[Camera]:
        capture = cv2.VideoCapture(self._device_index)
        try:
            if not capture.isOpened():
                raise PermissionDeniedError(CAMERA_REQUIRED_MESSAGE)
            # Let exposure settle before the frame that gets analysed.
            time.sleep(self._warmup_seconds)
            yield _OpenCVCamera(capture, self._jpeg_quality)
        finally:
            capture.release()
            logger.debug("camera %s released", self._device_index)


FrameSourceFactory = Callable[[Optional[ImageData]], FrameSource]


def frame_source_factory(kind: str, *, device_index: int = 0) -> FrameSourceFactory:
    """Map the FRAME_SOURCE setting to a per-request frame source builder.

    The builder receives the frame uploaded with the request, if any. A
    kiosk ignores it and reads the camera attached to the server instead.
    """
    kind = (kind or "upload").strip().lower()
    if kind == "upload":
        return UploadedFrameSource
    if kind == "opencv":
        source = OpenCVFrameSource(device_index)
        return lambda uploaded: source
    raise ValueError(f"Unknown FRAME_SOURCE: {kind!r} (expected 'upload' or 'opencv')")
