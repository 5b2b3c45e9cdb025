import logging
from typing import Optional

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING

from scalelog.core.composition import build_entity, diff_against
from scalelog.core.db import MeasurementStore
from scalelog.core.errors import NotFoundError, StorageError, ValidationError
from scalelog.models.measurement import (
    MeasurementDiffs,
    MeasurementEntity,
    MeasurementIn,
    MeasurementOut,
)

log = logging.getLogger(__name__)


def _parse_id(measurement_id: str) -> ObjectId:
    try:
        return ObjectId(measurement_id)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid measurement id: {measurement_id!r}")


def _to_entity(doc: dict) -> MeasurementEntity:
    try:
        return MeasurementEntity.from_document(doc)
    except pydantic.ValidationError as exc:
        log.error("Stored measurement %s is malformed: %s", doc.get("_id"), exc)
        raise StorageError("Stored measurement is malformed") from exc


def create(store: MeasurementStore, payload: MeasurementIn) -> str:
    """Store a new measurement with its derived fields; return its id."""
    entity = build_entity(payload)
    oid = ObjectId()

    collection = store.measurements()
    inserted_id = store.insert_one(collection, entity.to_document(oid))

    log.info("Created measurement %s (%s)", inserted_id, entity.timestamp.isoformat())
    return str(inserted_id)


def _previous(store: MeasurementStore, collection, entity: MeasurementEntity) -> Optional[MeasurementEntity]:
    # BSON dates carry no zone; compare as naive UTC
    before = entity.timestamp.replace(tzinfo=None)
    doc = store.find_one(
        collection,
        {"date": {"$lt": before}},
        sort=[("date", DESCENDING)],
    )
    return _to_entity(doc) if doc is not None else None


def get_by_id(store: MeasurementStore, measurement_id: str) -> MeasurementOut:
    """
    Return one measurement in output form.

    The *_diff fields stay 0.0 unless MEASUREMENT_DIFFS_ENABLED is set, in
    which case they are taken against the latest earlier measurement.
    """
    oid = _parse_id(measurement_id)

    collection = store.measurements()
    doc = store.find_one(collection, {"_id": oid})
    if doc is None:
        log.info("Measurement %s not found", measurement_id)
        raise NotFoundError()

    entity = _to_entity(doc)

    diffs = MeasurementDiffs()
    if store.settings.MEASUREMENT_DIFFS_ENABLED:
        diffs = diff_against(entity, _previous(store, collection, entity))

    try:
        return MeasurementOut.from_entity(oid, entity, diffs)
    except pydantic.ValidationError as exc:
        log.error("Measurement %s cannot be rendered: %s", measurement_id, exc)
        raise StorageError("Stored measurement is malformed") from exc
