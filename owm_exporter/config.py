from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

load_dotenv()

DEFAULT_ENDPOINT = "https://api.openweathermap.org/data/2.5/weather"


class ConfigError(ValueError):
    """Raised when the exporter configuration is missing or malformed."""


def _bool_from_env(value: str | None) -> Optional[bool]:
    if value is None:
        return None
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return None


def _load_yaml(path: Path) -> Dict:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file must hold a mapping: {path}")
    return data


class Units(enum.Enum):
    KELVIN = "kelvin"
    METRIC = "metric"
    IMPERIAL = "imperial"

    @classmethod
    def parse(cls, value: str) -> "Units":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigError(
                f"invalid units type '{value}', must be one of: kelvin, metric, imperial"
            ) from None

    @property
    def api_param(self) -> Optional[str]:
        """Value of the provider's ``units`` query parameter, ``None`` for its kelvin default."""
        if self is Units.KELVIN:
            return None
        return self.value

    @property
    def temp_label(self) -> str:
        return {Units.KELVIN: "k", Units.METRIC: "c", Units.IMPERIAL: "f"}[self]

    @property
    def speed_label(self) -> str:
        if self is Units.IMPERIAL:
            return "mph"
        return "m/s"

    @property
    def pressure_label(self) -> str:
        return "hPa"

    def __str__(self) -> str:
        return self.value


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float

    @classmethod
    def parse(cls, value: str) -> "Coordinates":
        """Parse ``"lat,lon"`` in decimal degrees, e.g. ``51.5,-0.1``."""
        parts = value.split(",", 1)
        lat = _parse_float(parts[0])
        if lat is None:
            raise ConfigError("invalid lat")
        lon = _parse_float(parts[1]) if len(parts) > 1 else None
        if lon is None:
            raise ConfigError("invalid lon")
        return cls(lat=lat, lon=lon)


def _parse_float(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except ValueError:
        return None


def _coords_from_mapping(value: Mapping[str, Any]) -> Coordinates:
    for name in ("lat", "lon"):
        if name not in value:
            raise ConfigError(f"coords is missing {name}")
    try:
        return Coordinates(lat=value["lat"], lon=value["lon"])
    except ValidationError as exc:
        raise ConfigError(f"invalid coords: {exc}") from exc


@dataclass
class LoggingConfig:
    level: str = "INFO"
    json: bool = True


@dataclass
class AppConfig:
    coords: Coordinates
    api_key: str
    units: Units = Units.KELVIN
    interval: float = 120.0
    backoff_interval: float = 180.0
    port: int = 8081
    location: Optional[str] = None
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 10.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_ENV_KEYS = {
    "OWM_COORDS": "coords",
    "OWM_API_KEY": "api_key",
    "OWM_UNITS": "units",
    "OWM_INTERVAL": "interval",
    "OWM_BACKOFF_INTERVAL": "backoff_interval",
    "OWM_PORT": "port",
    "OWM_LOCATION": "location",
    "OWM_ENDPOINT": "endpoint",
    "OWM_TIMEOUT": "timeout",
}


def _as_number(name: str, value: Any, kind: type) -> Any:
    try:
        number = kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid {name}: {value!r}") from None
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


def load_config(
    *,
    config_path: str | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Resolve the exporter settings.

    Later sources win: YAML file, then ``OWM_*`` environment variables, then
    ``overrides`` (typically parsed command line options, ``None`` values are
    skipped).
    """

    env = dict(os.environ if env is None else env)
    data: Dict[str, Any] = {}

    explicit_path = config_path or env.get("OWM_CONFIG_PATH")
    if explicit_path:
        data = _load_yaml(Path(explicit_path))

    for env_key, name in _ENV_KEYS.items():
        value = env.get(env_key)
        if value:
            data[name] = value

    logging_data = dict(data.get("logging") or {})
    level_override = env.get("OWM_LOG_LEVEL")
    if level_override:
        logging_data["level"] = level_override
    json_override = _bool_from_env(env.get("OWM_LOG_JSON"))
    if json_override is not None:
        logging_data["json"] = json_override

    for name, value in (overrides or {}).items():
        if value is not None:
            data[name] = value

    coords = data.get("coords")
    if coords is None:
        raise ConfigError("coordinates are required (OWM_COORDS or the coords argument)")
    if isinstance(coords, Mapping):
        coords = _coords_from_mapping(coords)
    elif not isinstance(coords, Coordinates):
        coords = Coordinates.parse(str(coords))

    api_key = data.get("api_key")
    if not api_key:
        raise ConfigError("an api key is required (OWM_API_KEY or --api-key)")

    units = data.get("units", Units.KELVIN)
    if not isinstance(units, Units):
        units = Units.parse(str(units))

    port = _as_number("port", data.get("port", 8081), int)
    if port > 65535:
        raise ConfigError(f"port out of range: {port}")

    location = data.get("location")

    return AppConfig(
        coords=coords,
        api_key=str(api_key),
        units=units,
        interval=_as_number("interval", data.get("interval", 120.0), float),
        backoff_interval=_as_number("backoff_interval", data.get("backoff_interval", 180.0), float),
        port=port,
        location=str(location) if location else None,
        endpoint=str(data.get("endpoint", DEFAULT_ENDPOINT)),
        timeout=_as_number("timeout", data.get("timeout", 10.0), float),
        logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
    )
