"""Upload validation for site photos and label photos."""
from typing import Optional, Tuple


DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def validate_image_type(mime_type: Optional[str]) -> Tuple[bool, str]:
    """
    Check the declared MIME type of an upload.

    Args:
        mime_type: Declared type, e.g. "image/png"

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not mime_type or not mime_type.strip():
        return False, "File type is unknown; please select an image"

    mime_type = mime_type.strip().lower()
    if not mime_type.startswith("image/") or mime_type == "image/":
        return False, f"Unsupported file type '{mime_type}'; please select an image"

    return True, ""


def validate_image_size(size: int, max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> Tuple[bool, str]:
    if size <= 0:
        return False, "The selected file is empty"
    if size > max_bytes:
        return False, f"Image is too large (max {max_bytes // (1024 * 1024)} MB)"
    return True, ""


def validate_image_upload(
    mime_type: Optional[str],
    size: int,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> Tuple[bool, str]:
    type_valid, type_error = validate_image_type(mime_type)
    if not type_valid:
        return False, type_error
    return validate_image_size(size, max_bytes)
