import os
import logging
from typing import List

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            pass
    # Fallback to environment variables
    return os.environ.get(name, default)


def _get_float(name: str, default: float) -> float:
    raw = get_secret(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid value for %s: %r; using %s", name, raw, default)
        return default


class Settings:
    @property
    def mistral_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY")

    @property
    def mistral_model(self) -> str:
        return get_secret("MISTRAL_MODEL", "pixtral-large-latest") or "pixtral-large-latest"

    @property
    def mistral_server_url(self) -> str | None:
        return get_secret("MISTRAL_SERVER_URL") or None

    @property
    def mistral_timeout_ms(self) -> int:
        return int(_get_float("MISTRAL_TIMEOUT_MS", 60000))

    @property
    def response_language(self) -> str:
        language = (get_secret("RESPONSE_LANGUAGE", "en") or "en").strip().lower()
        return language if language in {"en", "th"} else "en"

    @property
    def auto_capture_interval_s(self) -> float:
        return max(0.5, _get_float("AUTO_CAPTURE_INTERVAL_S", 4.0))

    @property
    def preview_interval_s(self) -> float:
        return max(0.1, _get_float("PREVIEW_INTERVAL_S", 0.5))

    @property
    def jpeg_quality(self) -> float:
        return min(1.0, max(0.1, _get_float("JPEG_QUALITY", 0.85)))

    @property
    def camera_index(self) -> int:
        return int(_get_float("CAMERA_INDEX", 0))

    @property
    def camera_fallback_indices(self) -> List[int]:
        raw = get_secret("CAMERA_FALLBACK_INDICES", "1,2") or ""
        indices = []
        for item in raw.split(","):
            item = item.strip()
            if item.isdigit():
                indices.append(int(item))
        return indices

    @property
    def max_upload_bytes(self) -> int:
        return int(_get_float("MAX_UPLOAD_MB", 10) * 1024 * 1024)

    @property
    def log_level(self) -> str:
        return (get_secret("LOG_LEVEL", "INFO") or "INFO").upper()
