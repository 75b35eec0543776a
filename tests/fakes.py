"""Test doubles shared across suites."""
from src.application.schemas import ComplicationAssessment


ASSESSMENT_PAYLOAD = {
    "status": "No complication",
    "severity": "none",
    "visualEvidence": "Insertion site clean, no erythema or swelling.",
    "nursingIntervention": "Continue routine site checks.",
    "safetyWarning": "Reassess if pain or swelling develops.",
}

ASSESSMENT = ComplicationAssessment.model_validate(ASSESSMENT_PAYLOAD)


class DummyLLM:
    """Returns canned responses in order and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    async def generate_json(self, system, parts, schema_name, schema):
        self.calls.append({"system": system, "parts": parts, "schema_name": schema_name, "schema": schema})
        response = self.responses.pop(0) if self.responses else None
        if isinstance(response, Exception):
            raise response
        return response


class FakeFrame:
    """Stands in for a numpy frame where only .shape is read."""

    def __init__(self, height, width):
        self.shape = (height, width, 3)


class FakeCapture:
    """cv2.VideoCapture look-alike."""

    def __init__(self, opened=True, frames=None, read_error=None):
        self.opened = opened
        self.read_error = read_error
        self.frames = list(frames) if frames is not None else []
        self.release_count = 0

    def isOpened(self):
        return self.opened and self.release_count == 0

    def read(self):
        if self.read_error is not None:
            raise self.read_error
        if not self.frames:
            return False, None
        frame = self.frames.pop(0)
        return frame is not None, frame

    def release(self):
        self.release_count += 1
