import math
from typing import Optional

from scalelog.core.errors import ValidationError
from scalelog.models.measurement import MeasurementDiffs, MeasurementEntity, MeasurementIn

# (diff field, source field) pairs reported back to the client
_DIFF_FIELDS = [
    ("weight_kg_diff", "weight_kg"),
    ("fat_percentage_diff", "fat_percentage"),
    ("muscle_kg_diff", "muscle_kg"),
    ("bone_kg_diff", "bone_kg"),
    ("fat_kg_diff", "fat_kg"),
    ("muscle_percentage_diff", "muscle_percentage"),
]


def fat_kg(weight_kg: float, fat_percentage: float) -> float:
    return weight_kg * fat_percentage / 100.0


def muscle_percentage(weight_kg: float, muscle_kg: float) -> float:
    if weight_kg == 0:
        raise ValueError("weight_kg must be non-zero")
    return 100.0 * muscle_kg / weight_kg


def build_entity(payload: MeasurementIn) -> MeasurementEntity:
    """
    Attach the derived values to a validated reading.

    They are computed once here and stored; reads never recompute them.
    """
    derived = {
        "fat_kg": fat_kg(payload.weight_kg, payload.fat_percentage),
        "muscle_percentage": muscle_percentage(payload.weight_kg, payload.muscle_kg),
    }
    # finite inputs can still overflow, e.g. a subnormal weight
    if not all(math.isfinite(v) for v in derived.values()):
        raise ValidationError("derived values out of range")

    return MeasurementEntity(**payload.model_dump(), **derived)


def diff_against(current: MeasurementEntity, previous: Optional[MeasurementEntity]) -> MeasurementDiffs:
    if previous is None:
        return MeasurementDiffs()
    return MeasurementDiffs(
        **{
            diff: getattr(current, field) - getattr(previous, field)
            for diff, field in _DIFF_FIELDS
        }
    )
