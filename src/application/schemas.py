from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from src.domain.models import FluidCategory


class FluidClassification(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    category: FluidCategory
    reason: StrictStr
    drug_name: StrictStr = Field(..., alias="drugName")


class ComplicationAssessment(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: StrictStr
    severity: StrictStr
    visual_evidence: StrictStr = Field(..., alias="visualEvidence")
    nursing_intervention: StrictStr = Field(..., alias="nursingIntervention")
    safety_warning: StrictStr = Field(..., alias="safetyWarning")


def _object_schema(properties: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties.keys()),
        "additionalProperties": False,
    }


FLUID_CLASSIFICATION_SCHEMA = _object_schema({
    "category": {"type": "string", "enum": [c.value for c in FluidCategory]},
    "reason": {"type": "string"},
    "drugName": {"type": "string"},
})

COMPLICATION_ASSESSMENT_SCHEMA = _object_schema({
    "status": {"type": "string"},
    "severity": {"type": "string"},
    "visualEvidence": {"type": "string"},
    "nursingIntervention": {"type": "string"},
    "safetyWarning": {"type": "string"},
})
