from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from owm_exporter.config import AppConfig, Coordinates, Units
from owm_exporter.models import Reading

FIXTURES = Path(__file__).parent / "fixtures"


def fixture_payload(name: str) -> Dict[str, Any]:
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture
def london_payload() -> Dict[str, Any]:
    return fixture_payload("london_metric.json")


@pytest.fixture
def london_reading(london_payload) -> Reading:
    return Reading.model_validate(london_payload)


@pytest.fixture
def rainy_reading() -> Reading:
    return Reading.model_validate(fixture_payload("rainy_imperial.json"))


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        coords=Coordinates(lat=51.5, lon=-0.1),
        api_key="test-key",
        units=Units.METRIC,
        interval=0.01,
        backoff_interval=0.02,
    )
