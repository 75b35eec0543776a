from enum import Enum


class CameraFailureReason(str, Enum):
    PERMISSION_DENIED = "permission-denied"
    NO_DEVICE = "no-device"
    BUSY = "busy"
    OTHER = "other"


CAMERA_MESSAGES = {
    CameraFailureReason.PERMISSION_DENIED: "Camera access was denied. Please allow camera permissions and try again.",
    CameraFailureReason.NO_DEVICE: "No camera device found.",
    CameraFailureReason.BUSY: "Camera is in use by another app or cannot be started.",
    CameraFailureReason.OTHER: "Unable to access camera.",
}


class CameraUnavailable(Exception):
    def __init__(self, reason: CameraFailureReason, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = CAMERA_MESSAGES[reason]
        if detail and reason == CameraFailureReason.OTHER:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidInput(ValueError):
    """Rejected operator input, e.g. a non-image upload."""


class AnalysisFailed(Exception):
    """The complication analysis could not produce an assessment."""
