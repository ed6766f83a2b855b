"""OpenWeatherMap poller exposing the latest reading as JSON and Prometheus metrics."""

from .cache import OutcomeCell
from .config import AppConfig, Coordinates, Units, load_config
from .metrics import MetricsBuilder, render_metrics
from .models import Failed, Outcome, Ready, Reading, Unavailable
from .poller import Poller
from .views import outcome_to_json

__all__ = [
    "AppConfig",
    "Coordinates",
    "Failed",
    "MetricsBuilder",
    "Outcome",
    "OutcomeCell",
    "Poller",
    "Ready",
    "Reading",
    "Unavailable",
    "Units",
    "load_config",
    "outcome_to_json",
    "render_metrics",
]
