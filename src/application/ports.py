from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Union


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class ImagePart:
    data_base64: str
    mime_type: str = "image/jpeg"


Part = Union[TextPart, ImagePart]


class LLMPort(Protocol):
    async def generate_json(
        self,
        system: Optional[str],
        parts: List[Part],
        schema_name: str,
        schema: Dict[str, Any],
    ) -> str:
        """
        Sends one schema-constrained generation request and returns the raw
        response text, which is expected to be a JSON object matching `schema`.
        """
        ...


class VideoSourcePort(Protocol):
    """Minimal surface of an opened video device (cv2.VideoCapture-compatible)."""

    def isOpened(self) -> bool:
        ...

    def read(self):
        ...

    def release(self) -> None:
        ...
