from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

from .config import Coordinates


class _ProviderModel(BaseModel):
    """Base for provider payload sections: immutable, unknown fields ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Condition(_ProviderModel):
    id: int
    main: str
    description: str
    icon: str


class MainReading(_ProviderModel):
    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    pressure: float
    humidity: float


class Wind(_ProviderModel):
    speed: float
    deg: NonNegativeInt


class Precipitation(_ProviderModel):
    """Accumulated rain or snow volume in mm. ``None`` means the provider omitted it."""

    volume_1h: Optional[float] = Field(default=None, alias="1h")
    volume_3h: Optional[float] = Field(default=None, alias="3h")


class Clouds(_ProviderModel):
    all: NonNegativeInt


class Reading(_ProviderModel):
    """One observation from the OpenWeatherMap current weather endpoint.

    Field names mirror the provider's JSON so the pass-through view can hand
    the reading back unchanged. ``visibility`` is always in meters, the
    provider ignores the ``units`` parameter for it.
    """

    coord: Coordinates
    weather: Tuple[Condition, ...] = ()
    main: MainReading
    wind: Wind
    rain: Precipitation = Field(default_factory=Precipitation)
    snow: Precipitation = Field(default_factory=Precipitation)
    clouds: Clouds
    visibility: Optional[NonNegativeInt] = None


@dataclass(frozen=True)
class Unavailable:
    """No poll has completed yet."""


@dataclass(frozen=True)
class Failed:
    """The latest poll failed. ``status`` is set only for HTTP error responses."""

    status: Optional[int] = None


@dataclass(frozen=True)
class Ready:
    reading: Reading


Outcome = Union[Unavailable, Failed, Ready]
