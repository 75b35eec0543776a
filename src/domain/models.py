import base64
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import PAIN_RANGE, SIZE_RANGE_CM, clamp


class FluidCategory(str, Enum):
    NON_VESICANT = "non_vesicant"
    VESICANT = "vesicant"
    UNSURE = "unsure"


class SkinTemp(str, Enum):
    COOL = "cool"
    NORMAL = "normal"
    WARM = "warm"


class CapturedImage(BaseModel):
    """A single still image, already encoded (JPEG from the camera, or an uploaded file)."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "image/jpeg"
    source: Optional[str] = Field(None, description="camera/upload/label")

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"

    def __repr__(self) -> str:
        return f"CapturedImage(mime_type={self.mime_type!r}, size={len(self.data)}, source={self.source!r})"


def _as_number(v) -> Optional[float]:
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            return None
    return None


class ClinicalInputs(BaseModel):
    drug_name: str = ""
    pain_level: int = 0
    skin_temp: SkinTemp = SkinTemp.NORMAL
    hardness: bool = False
    fluid_category: FluidCategory = FluidCategory.NON_VESICANT
    symptom_size_cm: float = 0.0

    @field_validator("drug_name", mode="before")
    @classmethod
    def strip_drug_name(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("pain_level", mode="before")
    @classmethod
    def clamp_pain(cls, v):
        number = _as_number(v)
        # Unparseable values fall through to the int check and fail there.
        return v if number is None else int(round(clamp(number, *PAIN_RANGE)))

    @field_validator("symptom_size_cm", mode="before")
    @classmethod
    def clamp_size(cls, v):
        number = _as_number(v)
        return v if number is None else clamp(number, *SIZE_RANGE_CM)
