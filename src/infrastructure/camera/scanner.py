import logging
from typing import Callable, Optional

from src.domain.models import CapturedImage
from src.infrastructure.camera.auto_capture import DEFAULT_INTERVAL_S, AutoCaptureSampler
from src.infrastructure.camera.opencv_camera import CameraHandle


logger = logging.getLogger(__name__)


class LiveScanner:
    """
    The scanning view: one opened camera, a manual shutter and the optional
    auto-capture sampler. close() tears both down and is safe to repeat.
    """

    def __init__(
        self,
        camera: CameraHandle,
        on_capture: Callable[[CapturedImage], None],
        is_busy: Callable[[], bool] = lambda: False,
        interval_s: float = DEFAULT_INTERVAL_S,
    ):
        self.camera = camera
        self.on_capture = on_capture
        self.is_busy = is_busy
        self.sampler = AutoCaptureSampler(camera, on_capture, is_busy, interval_s)
        self.last_frame: Optional[CapturedImage] = None

    @property
    def auto_mode(self) -> bool:
        return self.sampler.enabled

    def preview(self) -> Optional[CapturedImage]:
        """Latest frame for display only; nothing is delivered to on_capture."""
        image = self.camera.capture_frame()
        if image is not None:
            self.last_frame = image
        return self.last_frame

    def shutter(self) -> Optional[CapturedImage]:
        if self.is_busy():
            return None
        image = self.camera.capture_frame()
        if image is None:
            logger.debug("Camera not ready, shutter ignored")
            return None
        self.on_capture(image)
        return image

    def set_auto_mode(self, enabled: bool, background: bool = True) -> None:
        """
        With background=False the caller drives sampling by calling
        sampler.tick() on its own schedule (e.g. a periodic UI refresh).
        """
        if not enabled:
            self.sampler.stop()
        elif background:
            self.sampler.start()
        else:
            self.sampler.enabled = True

    def close(self) -> None:
        try:
            self.sampler.stop()
        finally:
            self.camera.release()

    def __enter__(self) -> "LiveScanner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
