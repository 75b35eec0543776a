"""Guided entry of the clinical covariates that accompany the site photo."""
import logging
from typing import Callable, Optional

from src.application.schemas import FluidClassification
from src.application.use_cases import FluidClassifierUseCase
from src.domain.errors import InvalidInput
from src.domain.models import CapturedImage, ClinicalInputs, FluidCategory, SkinTemp


logger = logging.getLogger(__name__)


class ClinicalIntakeForm:
    """
    Holds the draft covariates. The classifier may overwrite the drug name and
    category; it never touches pain, size, temperature or cord.
    """

    def __init__(
        self,
        classifier: FluidClassifierUseCase,
        on_cancel: Optional[Callable[[], None]] = None,
    ):
        self.classifier = classifier
        self.on_cancel = on_cancel
        self.draft = ClinicalInputs()
        self.advisory_reason: str = ""
        self.is_classifying = False
        self._generation = 0

    def _update(self, **changes) -> ClinicalInputs:
        # Revalidate so the clamping rules apply to every edit.
        self.draft = ClinicalInputs(**{**self.draft.model_dump(), **changes})
        return self.draft

    def set_drug_name(self, name: str) -> ClinicalInputs:
        return self._update(drug_name=name)

    def set_pain_level(self, level: float) -> ClinicalInputs:
        return self._update(pain_level=level)

    def set_symptom_size(self, size_cm: float) -> ClinicalInputs:
        return self._update(symptom_size_cm=size_cm)

    def set_skin_temp(self, temp) -> ClinicalInputs:
        return self._update(skin_temp=SkinTemp(temp))

    def set_hardness(self, palpable_cord: bool) -> ClinicalInputs:
        return self._update(hardness=bool(palpable_cord))

    def set_fluid_category(self, category) -> ClinicalInputs:
        return self._update(fluid_category=FluidCategory(category))

    async def lookup_drug_name(self) -> Optional[FluidClassification]:
        name = self.draft.drug_name
        if not name:
            return None
        return await self._classify(text=name)

    async def scan_label(self, label: CapturedImage) -> Optional[FluidClassification]:
        return await self._classify(image_base64=label.to_base64(), mime_type=label.mime_type)

    async def _classify(self, **request) -> Optional[FluidClassification]:
        self._generation += 1
        generation = self._generation
        self.is_classifying = True
        try:
            result = await self.classifier.classify(**request)
        finally:
            if generation == self._generation:
                self.is_classifying = False

        if generation != self._generation:
            logger.info("Discarding classification from a cancelled or superseded lookup")
            return None
        self.apply_classification(result)
        return result

    def apply_classification(self, result: FluidClassification) -> ClinicalInputs:
        self.advisory_reason = result.reason
        return self._update(drug_name=result.drug_name, fluid_category=result.category)

    def submit(self) -> ClinicalInputs:
        if self.is_classifying:
            raise InvalidInput("Fluid classification is still running")
        return self.draft

    def clear(self) -> None:
        """Drop the draft and any in-flight lookup."""
        self._generation += 1
        self.is_classifying = False
        self.draft = ClinicalInputs()
        self.advisory_reason = ""

    def cancel(self) -> None:
        self.clear()
        if self.on_cancel:
            self.on_cancel()
