"""Prometheus text exposition for the latest poll outcome."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import Units
from .models import Failed, Outcome, Ready, Reading, Unavailable

Number = Union[int, float]
Label = Tuple[str, str]


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def format_value(value: Number) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "+Inf" if value > 0 else "-Inf"
    return str(value)


class MetricsBuilder:
    """Accumulates exposition lines in insertion order.

    Labels keep the order they are passed in, and ``global_labels`` are
    appended to every line after them.
    """

    def __init__(self, global_labels: Iterable[Label] = ()) -> None:
        self.global_labels: Tuple[Label, ...] = tuple(global_labels)
        self._lines: List[str] = []

    def add(self, name: str, value: Number, **labels: str) -> "MetricsBuilder":
        pairs: Sequence[Label] = tuple(labels.items()) + self.global_labels
        if pairs:
            rendered = ",".join(f'{key}="{escape_label_value(str(val))}"' for key, val in pairs)
            self._lines.append(f"{name}{{{rendered}}} {format_value(value)}\n")
        else:
            self._lines.append(f"{name} {format_value(value)}\n")
        return self

    def __len__(self) -> int:
        return len(self._lines)

    def render(self) -> str:
        return "".join(self._lines)


def _export_failure(builder: MetricsBuilder, outcome: Failed) -> None:
    builder.add("owm_error", 1)
    if outcome.status is not None:
        builder.add("owm_error", 1, code=str(outcome.status))


def _export_precipitation(builder: MetricsBuilder, name: str, volume_1h, volume_3h) -> None:
    if volume_1h is not None:
        builder.add(name, volume_1h, period="1h", unit="mm")
    if volume_3h is not None:
        builder.add(name, volume_3h, period="3h", unit="mm")


def _export_reading(builder: MetricsBuilder, reading: Reading, units: Units) -> None:
    main = reading.main
    builder.add("owm_error", 0)

    builder.add("owm_temp", main.temp, unit=units.temp_label)
    builder.add("owm_temp_min", main.temp_min, unit=units.temp_label)
    builder.add("owm_temp_max", main.temp_max, unit=units.temp_label)
    builder.add("owm_feels_like", main.feels_like, unit=units.temp_label)
    builder.add("owm_humidity", main.humidity, unit="percent")
    builder.add("owm_pressure", main.pressure, unit=units.pressure_label)

    builder.add("owm_clouds_all", reading.clouds.all, unit="percent")

    _export_precipitation(builder, "owm_rain_volume", reading.rain.volume_1h, reading.rain.volume_3h)
    _export_precipitation(builder, "owm_snow_volume", reading.snow.volume_1h, reading.snow.volume_3h)

    builder.add("owm_wind_direction", reading.wind.deg, unit="degrees")
    builder.add("owm_wind_speed", reading.wind.speed, unit=units.speed_label)

    for condition in reading.weather:
        builder.add("owm_condition", 1, kind=condition.description)

    if reading.visibility is not None:
        builder.add("owm_visibility", reading.visibility, unit="meters")


def render_metrics(outcome: Outcome, units: Units, location: Optional[str] = None) -> str:
    """Render ``outcome`` as exposition text.

    ``Unavailable`` renders as an empty string. When ``location`` is given
    every line also carries a ``location`` label.
    """
    builder = MetricsBuilder([("location", location)] if location is not None else ())

    if isinstance(outcome, Unavailable):
        pass
    elif isinstance(outcome, Failed):
        _export_failure(builder, outcome)
    elif isinstance(outcome, Ready):
        _export_reading(builder, outcome.reading, units)
    else:
        raise TypeError(f"unknown outcome: {outcome!r}")

    return builder.render()
