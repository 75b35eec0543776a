"""Unit tests for domain value objects."""
import base64

import pytest
from pydantic import ValidationError

from src.domain.errors import CameraFailureReason, CameraUnavailable
from src.domain.models import CapturedImage, ClinicalInputs, FluidCategory, SkinTemp
from src.domain.rules import clamp


class TestClinicalInputs:

    def test_defaults(self):
        inputs = ClinicalInputs()
        assert inputs.fluid_category == FluidCategory.NON_VESICANT
        assert inputs.skin_temp == SkinTemp.NORMAL
        assert inputs.pain_level == 0
        assert inputs.symptom_size_cm == 0.0
        assert inputs.hardness is False

    def test_pain_is_clamped(self):
        assert ClinicalInputs(pain_level=15).pain_level == 10
        assert ClinicalInputs(pain_level=-3).pain_level == 0
        assert ClinicalInputs(pain_level=6.6).pain_level == 7

    def test_size_is_clamped(self):
        assert ClinicalInputs(symptom_size_cm=25).symptom_size_cm == 20.0
        assert ClinicalInputs(symptom_size_cm=-1).symptom_size_cm == 0.0
        assert ClinicalInputs(symptom_size_cm=3.5).symptom_size_cm == 3.5

    def test_drug_name_is_stripped(self):
        assert ClinicalInputs(drug_name="  KCl  ").drug_name == "KCl"

    def test_wrong_types_raise_validation_error(self):
        for bad in [{"pain_level": None}, {"pain_level": "severe"}, {"symptom_size_cm": [3]}, {"drug_name": 42}]:
            with pytest.raises(ValidationError):
                ClinicalInputs(**bad)

    def test_numeric_strings_are_clamped(self):
        assert ClinicalInputs(pain_level="12").pain_level == 10
        assert ClinicalInputs(symptom_size_cm="2.5").symptom_size_cm == 2.5
        assert ClinicalInputs(drug_name=None).drug_name == ""

    def test_unknown_skin_temp_rejected(self):
        with pytest.raises(ValidationError):
            ClinicalInputs(skin_temp="hot")


class TestCapturedImage:

    def test_base64_and_data_url(self):
        image = CapturedImage(data=b"abc", mime_type="image/png")
        assert image.to_base64() == base64.b64encode(b"abc").decode()
        assert image.data_url() == "data:image/png;base64," + base64.b64encode(b"abc").decode()

    def test_is_immutable(self):
        image = CapturedImage(data=b"abc")
        with pytest.raises(ValidationError):
            image.mime_type = "image/png"

    def test_repr_hides_bytes(self):
        assert "abc" not in repr(CapturedImage(data=b"abc"))


def test_clamp_handles_nan():
    assert clamp(float("nan"), 0, 10) == 0


def test_camera_unavailable_message():
    error = CameraUnavailable(CameraFailureReason.NO_DEVICE)
    assert error.reason == CameraFailureReason.NO_DEVICE
    assert "No camera" in str(error)

    other = CameraUnavailable(CameraFailureReason.OTHER, "driver crashed")
    assert "driver crashed" in str(other)
