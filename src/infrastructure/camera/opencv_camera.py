import logging
import weakref
from typing import Callable, Iterable, List, Optional

import cv2

from src.application.ports import VideoSourcePort
from src.domain.errors import CameraFailureReason, CameraUnavailable
from src.domain.models import CapturedImage
from src.infrastructure.media.image_utils import DEFAULT_JPEG_QUALITY, frame_to_jpeg


logger = logging.getLogger(__name__)


VideoSourceFactory = Callable[[int], VideoSourcePort]


def _release_capture(capture: VideoSourcePort, index: int) -> None:
    try:
        capture.release()
    finally:
        logger.info("Released camera %d", index)


class CameraHandle:
    """
    An opened video device. Owns the device until release() is called, or
    until the handle is garbage-collected (e.g. its UI session ended).
    """

    def __init__(self, capture: VideoSourcePort, index: int, jpeg_quality: float = DEFAULT_JPEG_QUALITY):
        self._capture = capture
        self.index = index
        self.jpeg_quality = jpeg_quality
        self._finalizer = weakref.finalize(self, _release_capture, capture, index)

    @property
    def released(self) -> bool:
        return not self._finalizer.alive

    def is_ready(self) -> bool:
        return not self.released and self._capture.isOpened()

    def capture_frame(self) -> Optional[CapturedImage]:
        """
        Sample the current frame as a JPEG still. Returns None when the device
        has no frame yet (zero dimensions, failed read); callers just try again.
        """
        if not self.is_ready():
            return None
        ok, frame = self._capture.read()
        if not ok or frame is None:
            return None
        height, width = frame.shape[:2]
        if height == 0 or width == 0:
            return None
        return CapturedImage(
            data=frame_to_jpeg(frame, self.jpeg_quality),
            mime_type="image/jpeg",
            source="camera",
        )

    def release(self) -> None:
        # finalize runs its callback at most once.
        self._finalizer()

    def __enter__(self) -> "CameraHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def _candidate_indices(preferred_index: int, fallback_indices: Iterable[int]) -> List[int]:
    indices = [preferred_index]
    for index in fallback_indices:
        if index not in indices:
            indices.append(index)
    return indices


def _failure_reason(failures: List[CameraFailureReason]) -> CameraFailureReason:
    for reason in (CameraFailureReason.PERMISSION_DENIED, CameraFailureReason.BUSY, CameraFailureReason.OTHER):
        if reason in failures:
            return reason
    return CameraFailureReason.NO_DEVICE


def open_camera(
    preferred_index: int = 0,
    fallback_indices: Iterable[int] = (),
    factory: Optional[VideoSourceFactory] = None,
    jpeg_quality: float = DEFAULT_JPEG_QUALITY,
) -> CameraHandle:
    """
    Open the preferred (back-facing) device, falling back to any other index.

    Raises:
        CameraUnavailable: no candidate could be opened and read
    """
    factory = factory or cv2.VideoCapture
    failures: List[CameraFailureReason] = []
    detail = ""

    for index in _candidate_indices(preferred_index, fallback_indices):
        try:
            capture = factory(index)
        except PermissionError as e:
            logger.warning("Camera %d permission denied: %s", index, e)
            failures.append(CameraFailureReason.PERMISSION_DENIED)
            continue
        except Exception as e:
            logger.warning("Camera %d failed to open: %s", index, e)
            failures.append(CameraFailureReason.OTHER)
            detail = str(e)
            continue

        if not capture.isOpened():
            capture.release()
            logger.info("Camera %d not available, trying next device", index)
            continue

        # A device that opens but yields no frame is held by something else.
        try:
            ok, _ = capture.read()
        except Exception as e:
            capture.release()
            logger.warning("Camera %d failed on first read: %s", index, e)
            failures.append(CameraFailureReason.OTHER)
            detail = str(e)
            continue
        if not ok:
            capture.release()
            logger.warning("Camera %d opened but returned no frame", index)
            failures.append(CameraFailureReason.BUSY)
            continue

        if index != preferred_index:
            logger.info("Preferred camera %d unavailable, using camera %d", preferred_index, index)
        return CameraHandle(capture, index, jpeg_quality=jpeg_quality)

    raise CameraUnavailable(_failure_reason(failures), detail)
