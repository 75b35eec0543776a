"""
Image helpers: JPEG encoding of camera frames, base64 encoding, and turning
an uploaded file into a CapturedImage.
"""
import base64
import io
import mimetypes
import os
from typing import Optional

import cv2
from PIL import Image

from src.domain.errors import InvalidInput
from src.domain.models import CapturedImage
from src.infrastructure.media.validators import (
    DEFAULT_MAX_UPLOAD_BYTES,
    validate_image_type,
    validate_image_upload,
)


DEFAULT_JPEG_QUALITY = 0.85


def frame_to_jpeg(frame, quality: float = DEFAULT_JPEG_QUALITY) -> bytes:
    """
    Encode an OpenCV BGR frame as JPEG bytes.

    `quality` is on the 0-1 scale used by the rest of the app.
    """
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    img = Image.fromarray(rgb)
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=int(round(quality * 100)))
    return buf.getvalue()


def _read_all(source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as f:
            return f.read()
    if hasattr(source, "getvalue"):
        return source.getvalue()
    if hasattr(source, "read"):
        if hasattr(source, "seek"):
            source.seek(0)
        return source.read()
    raise TypeError(f"Cannot read image from {type(source).__name__}")


def encode_base64(source) -> str:
    """
    Read `source` fully and return the base64 payload only.

    Accepts bytes, a path, a file-like object, or a data URL string (whose
    header is stripped).

    Raises:
        InvalidInput: the source cannot be read
    """
    if isinstance(source, str) and source.startswith("data:"):
        header, _, payload = source.partition(",")
        if ";base64" not in header or not payload:
            raise InvalidInput("Malformed data URL")
        return payload
    try:
        data = _read_all(source)
    except (OSError, TypeError, ValueError) as e:
        raise InvalidInput(f"Could not read image: {e}") from e
    return base64.b64encode(data).decode("ascii")


def capture_from_file(
    file,
    mime_type: Optional[str] = None,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    source: str = "upload",
) -> CapturedImage:
    """
    Normalize an uploaded file (e.g. a Streamlit UploadedFile) into a CapturedImage.

    Raises:
        InvalidInput: not an image, empty, too large, or unreadable
    """
    mime_type = mime_type or getattr(file, "type", None)
    if not mime_type:
        name = getattr(file, "name", None) or (file if isinstance(file, str) else None)
        if name:
            mime_type, _ = mimetypes.guess_type(str(name))

    type_valid, type_error = validate_image_type(mime_type)
    if not type_valid:
        raise InvalidInput(type_error)

    try:
        data = _read_all(file)
    except (OSError, TypeError, ValueError) as e:
        raise InvalidInput(f"Could not read image: {e}") from e

    is_valid, error = validate_image_upload(mime_type, len(data), max_bytes)
    if not is_valid:
        raise InvalidInput(error)

    return CapturedImage(data=data, mime_type=mime_type.strip().lower(), source=source)
