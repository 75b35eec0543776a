"""Tests for the clinical intake form."""
import asyncio
import json

import pytest

from src.application.intake_form import ClinicalIntakeForm
from src.application.schemas import FluidClassification
from src.application.use_cases import FluidClassifierUseCase
from src.domain.errors import InvalidInput
from src.domain.models import CapturedImage, FluidCategory, SkinTemp

from tests.fakes import DummyLLM


def _classification(category="vesicant", reason="Vasopressor", drug="Dopamine"):
    return json.dumps({"category": category, "reason": reason, "drugName": drug})


class GatedClassifier:
    def __init__(self, result):
        self.result = result
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def classify(self, **request):
        self.started.set()
        await self.gate.wait()
        return self.result


class TestDraft:

    def test_setters_clamp(self):
        form = ClinicalIntakeForm(FluidClassifierUseCase(DummyLLM()))
        assert form.set_pain_level(42).pain_level == 10
        assert form.set_symptom_size(-5).symptom_size_cm == 0.0
        assert form.set_skin_temp("warm").skin_temp == SkinTemp.WARM
        assert form.set_hardness(1).hardness is True
        assert form.set_fluid_category("unsure").fluid_category == FluidCategory.UNSURE

    def test_submit_returns_draft(self):
        form = ClinicalIntakeForm(FluidClassifierUseCase(DummyLLM()))
        form.set_drug_name("NSS")
        form.set_pain_level(3)
        inputs = form.submit()
        assert inputs.drug_name == "NSS"
        assert inputs.pain_level == 3
        assert inputs.fluid_category == FluidCategory.NON_VESICANT


class TestClassification:

    def test_name_lookup_overwrites_name_and_category_only(self):
        llm = DummyLLM(_classification())
        form = ClinicalIntakeForm(FluidClassifierUseCase(llm))
        form.set_drug_name("dopa")
        form.set_pain_level(6)
        form.set_symptom_size(3)
        form.set_skin_temp("cool")
        form.set_hardness(True)

        result = asyncio.run(form.lookup_drug_name())

        assert isinstance(result, FluidClassification)
        draft = form.submit()
        assert draft.drug_name == "Dopamine"
        assert draft.fluid_category == FluidCategory.VESICANT
        assert form.advisory_reason == "Vasopressor"
        assert (draft.pain_level, draft.symptom_size_cm, draft.skin_temp, draft.hardness) == (
            6, 3.0, SkinTemp.COOL, True,
        )

    def test_blank_name_skips_lookup(self):
        llm = DummyLLM(_classification())
        form = ClinicalIntakeForm(FluidClassifierUseCase(llm))
        form.set_drug_name("   ")
        assert asyncio.run(form.lookup_drug_name()) is None
        assert llm.calls == []

    def test_label_scan_uses_image(self):
        llm = DummyLLM(_classification(category="non_vesicant", reason="Isotonic", drug="LR"))
        form = ClinicalIntakeForm(FluidClassifierUseCase(llm))
        label = CapturedImage(data=b"label", mime_type="image/png", source="label")

        asyncio.run(form.scan_label(label))

        assert form.draft.drug_name == "LR"
        parts = llm.calls[0]["parts"]
        assert parts[-1].data_base64 == label.to_base64()
        assert parts[-1].mime_type == "image/png"

    def test_degraded_classification_still_applies(self):
        form = ClinicalIntakeForm(FluidClassifierUseCase(DummyLLM("garbage")))
        form.set_drug_name("Mystery drip")
        asyncio.run(form.lookup_drug_name())
        assert form.draft.fluid_category == FluidCategory.UNSURE
        assert form.draft.drug_name == "Mystery drip"

    def test_cancel_discards_in_flight_classification(self):
        cancelled = []

        async def scenario():
            result = FluidClassification(category="vesicant", reason="chemo", drug_name="5-FU")
            classifier = GatedClassifier(result)
            form = ClinicalIntakeForm(classifier, on_cancel=lambda: cancelled.append(True))
            form.set_drug_name("5fu")
            task = asyncio.create_task(form.lookup_drug_name())
            await classifier.started.wait()
            assert form.is_classifying
            form.cancel()
            classifier.gate.set()
            return form, await task

        form, outcome = asyncio.run(scenario())
        assert outcome is None
        assert cancelled == [True]
        assert form.draft.drug_name == ""
        assert form.advisory_reason == ""
        assert form.is_classifying is False

    def test_submit_blocked_while_classifying(self):
        async def scenario():
            result = FluidClassification(category="unsure", reason="?", drug_name="X")
            classifier = GatedClassifier(result)
            form = ClinicalIntakeForm(classifier)
            form.set_drug_name("X")
            task = asyncio.create_task(form.lookup_drug_name())
            await classifier.started.wait()
            with pytest.raises(InvalidInput):
                form.submit()
            classifier.gate.set()
            await task
            return form

        form = asyncio.run(scenario())
        assert form.submit().fluid_category == FluidCategory.UNSURE
