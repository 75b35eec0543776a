from typing import Tuple


PAIN_RANGE: Tuple[int, int] = (0, 10)
SIZE_RANGE_CM: Tuple[float, float] = (0.0, 20.0)

# Reference lists given to the classifier; the model makes the final call.
TYPICAL_VESICANTS = [
    "chemotherapy agents",
    "vasopressors (dopamine, norepinephrine)",
    "calcium gluconate",
    "potassium chloride above 40 mEq/L",
    "dextrose above 10%",
    "phenytoin",
]

TYPICAL_NON_VESICANTS = [
    "normal saline (NSS)",
    "lactated Ringer's (LR)",
    "most antibiotics unless flagged as high risk",
    "vitamins",
]

COMPLICATIONS = ["phlebitis", "infiltration", "extravasation"]


def clamp(value: float, low: float, high: float) -> float:
    if value != value:  # NaN
        return low
    return max(low, min(high, value))
