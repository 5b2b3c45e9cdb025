# scalelog/api/v1/measurements.py

from fastapi import APIRouter, Depends, Request, status

from scalelog.core.db import MeasurementStore
from scalelog.models.measurement import ErrorOut, MeasurementIdOut, MeasurementIn, MeasurementOut
from scalelog.services import measurements

router = APIRouter(prefix="/weight", tags=["weight"])


def get_store(request: Request) -> MeasurementStore:
    return request.app.state.store


_ERRORS = {
    400: {"model": ErrorOut},
    500: {"model": ErrorOut},
    503: {"model": ErrorOut},
}


# ---------- Endpoints ----------

@router.post(
    "/measurement",
    response_model=MeasurementIdOut,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
def create_weight_measurement(payload: MeasurementIn, store: MeasurementStore = Depends(get_store)):
    """
    Store one scale measurement. fat_kg and muscle_percentage are derived here.
    """
    return MeasurementIdOut(id=measurements.create(store, payload))


@router.get(
    "/measurement/{measurement_id}",
    response_model=MeasurementOut,
    responses={404: {"model": ErrorOut}, **_ERRORS},
)
def get_weight_measurement(measurement_id: str, store: MeasurementStore = Depends(get_store)):
    """
    Return a single measurement by its 24-hex id.
    """
    return measurements.get_by_id(store, measurement_id)
