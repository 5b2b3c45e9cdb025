import mongomock
import pytest
from fastapi.testclient import TestClient

from scalelog.core.db import MeasurementStore
from scalelog.main import create_app

from conftest import make_settings


@pytest.fixture
def diff_client():
    settings = make_settings(MEASUREMENT_DIFFS_ENABLED=True)
    store = MeasurementStore(settings, client_factory=mongomock.MongoClient)
    with TestClient(create_app(settings, store)) as client:
        yield client


def _create(client, payload):
    response = client.post("/weight/measurement", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_first_measurement_has_zero_diffs(diff_client, sample):
    measurement_id = _create(diff_client, sample)

    data = diff_client.get(f"/weight/measurement/{measurement_id}").json()

    assert data["wheight_kg_diff"] == 0.0
    assert data["fat_kg_diff"] == 0.0
    assert data["muscle_percentage_diff"] == 0.0


def test_diffs_against_latest_earlier_measurement(diff_client, sample):
    _create(diff_client, dict(sample, date="2023-12-01T00:00:00Z", wheight_kg=90.0))
    _create(diff_client, sample)
    later = _create(
        diff_client,
        dict(sample, date="2024-01-08T06:00:00Z", wheight_kg=78.5, fat_percentage=19.0, muscle_kg=60.5),
    )
    # inserted last but dated in the future; must not count as "previous"
    _create(diff_client, dict(sample, date="2024-02-01T00:00:00Z", wheight_kg=70.0))

    data = diff_client.get(f"/weight/measurement/{later}").json()

    assert data["wheight_kg_diff"] == pytest.approx(-1.5)
    assert data["fat_percentage_diff"] == pytest.approx(-1.0)
    assert data["muscle_kg_diff"] == pytest.approx(0.5)
    assert data["bone_kg_diff"] == pytest.approx(0.0)
    assert data["fat_kg_diff"] == pytest.approx(78.5 * 0.19 - 16.0)
    assert data["muscle_percentage_diff"] == pytest.approx(100 * 60.5 / 78.5 - 75.0)


def test_diffs_disabled_by_default(client, sample):
    _create(client, dict(sample, date="2023-12-01T00:00:00Z", wheight_kg=90.0))
    measurement_id = _create(client, sample)

    data = client.get(f"/weight/measurement/{measurement_id}").json()

    assert data["wheight_kg_diff"] == 0.0
