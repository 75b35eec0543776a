import asyncio
import logging
from typing import Callable, Optional

from src.domain.models import CapturedImage
from src.infrastructure.camera.opencv_camera import CameraHandle


logger = logging.getLogger(__name__)


DEFAULT_INTERVAL_S = 4.0


class AutoCaptureSampler:
    """Periodically samples the camera while enabled and no analysis is running."""

    def __init__(
        self,
        camera: CameraHandle,
        on_capture: Callable[[CapturedImage], None],
        is_busy: Callable[[], bool],
        interval_s: float = DEFAULT_INTERVAL_S,
    ):
        self.camera = camera
        self.on_capture = on_capture
        self.is_busy = is_busy
        self.interval_s = interval_s
        self.enabled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self) -> Optional[CapturedImage]:
        if not self.enabled or self.is_busy() or not self.camera.is_ready():
            return None
        image = self.camera.capture_frame()
        if image is None:
            return None
        self.on_capture(image)
        return image

    async def _run(self) -> None:
        while self.enabled:
            await asyncio.sleep(self.interval_s)
            try:
                self.tick()
            except Exception as e:
                logger.exception("Auto-capture sample failed: %s", e)

    def start(self) -> None:
        """Must be called from a running event loop."""
        self.enabled = True
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        self.enabled = False
        if self._task is not None:
            self._task.cancel()
            self._task = None
