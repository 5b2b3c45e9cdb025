# scalelog/models/measurement.py

from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MeasurementBase(BaseModel):
    """
    One body-composition reading as reported by the scale.

    Wire and document field names keep the historical spelling
    (``date``, ``wheight_kg``, ``imc``); attribute names are the readable ones.
    """

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    timestamp: datetime = Field(..., alias="date", description="ISO8601 timestamp of measurement")

    # Weight
    weight_kg: float = Field(..., alias="wheight_kg")
    bmi: float = Field(..., alias="imc")

    # Core composition
    fat_percentage: float
    water_percentage: float
    protein_percentage: float

    metabolism_kcal: float
    visceral_fat_index: float

    # Muscle & bone
    muscle_kg: float
    bone_kg: float

    metabolic_age: int = Field(..., ge=0, le=255)

    @field_validator("timestamp")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        # naive timestamps (and BSON dates read without tz) are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class MeasurementIn(MeasurementBase):
    @model_validator(mode="after")
    def validate_weight_non_zero(self):
        # muscle_percentage divides by the weight
        if self.weight_kg == 0:
            raise ValueError("wheight_kg must be non-zero")
        return self


class MeasurementEntity(MeasurementBase):
    """Stored form: the reading plus the values derived from it at creation."""

    fat_kg: float
    muscle_percentage: float

    def to_document(self, oid: ObjectId) -> dict:
        doc = self.model_dump(by_alias=True)
        doc["_id"] = oid
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "MeasurementEntity":
        return cls.model_validate({k: v for k, v in doc.items() if k != "_id"})


class MeasurementDiffs(BaseModel):
    """Change since the previous measurement; all zero when not computed."""

    model_config = ConfigDict(populate_by_name=True)

    weight_kg_diff: float = Field(0.0, alias="wheight_kg_diff")
    fat_percentage_diff: float = 0.0
    muscle_kg_diff: float = 0.0
    bone_kg_diff: float = 0.0
    fat_kg_diff: float = 0.0
    muscle_percentage_diff: float = 0.0


class MeasurementOut(MeasurementEntity, MeasurementDiffs):
    id: str

    @classmethod
    def from_entity(cls, oid: ObjectId, entity: MeasurementEntity, diffs: MeasurementDiffs) -> "MeasurementOut":
        return cls(id=str(oid), **entity.model_dump(), **diffs.model_dump())


class MeasurementIdOut(BaseModel):
    id: str


class ErrorOut(BaseModel):
    message: str
