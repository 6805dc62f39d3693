"""Shared fixtures for the train live status tests."""

import json

import pytest

from app.schemas.train_schema import TrainStatusResponse
from tests.helpers import load_json


@pytest.fixture
def envelope_factory():
    """Build a TrainStatusResponse from one of the JSON fixtures in tests/data."""

    def _load(name: str) -> TrainStatusResponse:
        return TrainStatusResponse.model_validate(json.loads(load_json(name)))

    return _load
