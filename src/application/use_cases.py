import logging
from typing import List, Optional

from src.application.ports import ImagePart, LLMPort, Part, TextPart
from src.application.schemas import (
    COMPLICATION_ASSESSMENT_SCHEMA,
    FLUID_CLASSIFICATION_SCHEMA,
    ComplicationAssessment,
    FluidClassification,
)
from src.domain.errors import AnalysisFailed
from src.domain.models import CapturedImage, ClinicalInputs, FluidCategory
from src.domain.rules import COMPLICATIONS, TYPICAL_NON_VESICANTS, TYPICAL_VESICANTS


logger = logging.getLogger(__name__)


LANGUAGES = {"en": "English", "th": "Thai"}

MESSAGES = {
    "en": {
        "classification_fallback": "Unable to determine",
        "analysis_failed": "Analysis failed. Please try again.",
    },
    "th": {
        "classification_fallback": "ไม่สามารถระบุได้",
        "analysis_failed": "การวิเคราะห์ล้มเหลว กรุณาลองใหม่อีกครั้ง",
    },
}


def message(key: str, language: str = "en") -> str:
    return MESSAGES.get(language, MESSAGES["en"])[key]


def extract_json_object(raw: Optional[str]) -> str:
    """Trim anything around the outermost JSON object (whitespace, code fences)."""
    if not isinstance(raw, str):
        raise ValueError(f"Expected text response, got {type(raw).__name__}")
    raw = raw.strip()
    if not raw.startswith("{"):
        start_idx = raw.find("{")
        if start_idx != -1:
            raw = raw[start_idx:]
    if not raw.endswith("}"):
        end_idx = raw.rfind("}")
        if end_idx != -1:
            raw = raw[:end_idx + 1]
    return raw


def build_classifier_prompt(language: str = "en") -> str:
    return (
        "Role: Expert Clinical Pharmacist.\n"
        "Task: Identify the IV drug/fluid and classify it as \"vesicant\" or \"non_vesicant\".\n"
        "- Vesicants: " + ", ".join(TYPICAL_VESICANTS) + ".\n"
        "- Non-vesicants: " + ", ".join(TYPICAL_NON_VESICANTS) + ".\n"
        "Use \"unsure\" when the drug cannot be identified.\n"
        "Return a JSON object with keys category (\"vesicant\" | \"non_vesicant\" | \"unsure\"), "
        f"reason (short explanation in {LANGUAGES.get(language, 'English')}), "
        "drugName (identified generic or brand name)."
    )


def build_analysis_instruction(inputs: ClinicalInputs, language: str = "en") -> str:
    lines = [
        "Role: Expert Infusion Nurse Specialist. Analyze IV complications ("
        + ", ".join(c.title() for c in COMPLICATIONS) + ") per INS standards.",
        "Input Data:",
        f"- Drug: {inputs.drug_name or 'unknown'} ({inputs.fluid_category.value})",
        f"- Size: {inputs.symptom_size_cm:g} cm",
        f"- Pain: {inputs.pain_level}/10",
        f"- Temp: {inputs.skin_temp.value}",
        f"- Cord: {'Yes' if inputs.hardness else 'No'}",
        f"Output JSON in {LANGUAGES.get(language, 'English')}.",
    ]
    return "\n".join(lines)


class FluidClassifierUseCase:
    """Classifies an infusate as vesicant or not. Degrades to "unsure" instead of raising."""

    def __init__(self, llm: LLMPort, language: str = "en"):
        self.llm = llm
        self.language = language

    def fallback(self, text: Optional[str] = None) -> FluidClassification:
        return FluidClassification(
            category=FluidCategory.UNSURE,
            reason=message("classification_fallback", self.language),
            drug_name=text or "Unknown",
        )

    async def classify(
        self,
        text: Optional[str] = None,
        image_base64: Optional[str] = None,
        mime_type: str = "image/jpeg",
    ) -> FluidClassification:
        parts: List[Part] = [TextPart(build_classifier_prompt(self.language))]
        if text:
            parts.append(TextPart(f"Drug name to check: {text}"))
        if image_base64:
            parts.append(ImagePart(data_base64=image_base64, mime_type=mime_type))

        try:
            raw = await self.llm.generate_json(
                None, parts, "fluid_classification", FLUID_CLASSIFICATION_SCHEMA
            )
            return FluidClassification.model_validate_json(extract_json_object(raw))
        except Exception as e:
            logger.warning("Fluid classification degraded to 'unsure': %s", e)
            return self.fallback(text)


class ComplicationAnalyzerUseCase:
    """Sends the IV site image plus covariates to the model. Any failure raises AnalysisFailed."""

    def __init__(self, llm: LLMPort, language: str = "en"):
        self.llm = llm
        self.language = language

    async def analyze(self, image: CapturedImage, inputs: ClinicalInputs) -> ComplicationAssessment:
        parts: List[Part] = [
            ImagePart(data_base64=image.to_base64(), mime_type=image.mime_type),
            TextPart("Analyze this IV site complication using the provided clinical data."),
        ]
        try:
            raw = await self.llm.generate_json(
                build_analysis_instruction(inputs, self.language),
                parts,
                "complication_assessment",
                COMPLICATION_ASSESSMENT_SCHEMA,
            )
            return ComplicationAssessment.model_validate_json(extract_json_object(raw))
        except Exception as e:
            logger.exception("Complication analysis failed: %s", e)
            raise AnalysisFailed(message("analysis_failed", self.language)) from e
