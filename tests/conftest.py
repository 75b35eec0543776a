import json

import pytest

from src.domain.models import CapturedImage, ClinicalInputs

from tests.fakes import ASSESSMENT_PAYLOAD


@pytest.fixture
def site_image():
    return CapturedImage(data=b"\xff\xd8\xff\xe0fake-jpeg", mime_type="image/jpeg", source="camera")


@pytest.fixture
def nss_inputs():
    return ClinicalInputs(
        drug_name="NSS",
        pain_level=2,
        skin_temp="normal",
        hardness=False,
        fluid_category="non_vesicant",
        symptom_size_cm=0,
    )


@pytest.fixture
def assessment_json():
    return json.dumps(ASSESSMENT_PAYLOAD)
