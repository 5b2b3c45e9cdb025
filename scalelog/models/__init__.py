from scalelog.models.measurement import (
    ErrorOut,
    MeasurementDiffs,
    MeasurementEntity,
    MeasurementIdOut,
    MeasurementIn,
    MeasurementOut,
)

__all__ = [
    "ErrorOut",
    "MeasurementDiffs",
    "MeasurementEntity",
    "MeasurementIdOut",
    "MeasurementIn",
    "MeasurementOut",
]
