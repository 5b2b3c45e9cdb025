from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient

from scalelog.core.config import Settings
from scalelog.core.db import MeasurementStore
from scalelog.main import create_app


SAMPLE_MEASUREMENT = {
    "date": "2024-01-01T00:00:00Z",
    "wheight_kg": 80.0,
    "imc": 24.5,
    "fat_percentage": 20.0,
    "water_percentage": 55.0,
    "protein_percentage": 18.0,
    "metabolism_kcal": 1800.0,
    "visceral_fat_index": 8.0,
    "muscle_kg": 60.0,
    "bone_kg": 3.2,
    "metabolic_age": 30,
}


def make_settings(**overrides):
    values = {
        "MONGODB_CONNECTION_STRING": "mongodb://localhost:27017",
        "MONGODB_DATABASE": "scalelog_test",
        "MONGODB_COLLECTION": "Weights",
        "MONGODB_RETRY_DELAY": 0,
    }
    values.update(overrides)
    return Settings(**values)


def mock_client(collection):
    """A client whose every db[...][...] lookup yields ``collection``."""
    client = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    return client


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def store(settings):
    store = MeasurementStore(settings, client_factory=mongomock.MongoClient)
    yield store
    store.close()


@pytest.fixture
def client(settings, store):
    with TestClient(create_app(settings, store)) as client:
        yield client


@pytest.fixture
def sample():
    return dict(SAMPLE_MEASUREMENT)
