from __future__ import annotations

from typing import List, Optional, Tuple

import httpx
from pydantic import ValidationError

from .config import DEFAULT_ENDPOINT, Coordinates, Units
from .logging import get_logger
from .models import Reading

logger = get_logger(__name__)


DEFAULT_USER_AGENT = "owm-exporter/0.1 (+https://openweathermap.org/current)"


class ProviderError(Exception):
    """A poll that did not produce a reading.

    ``status`` carries the HTTP status code when the provider answered with an
    error response, and is ``None`` for transport and parse failures.
    """

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


def build_query(coords: Coordinates, api_key: str, units: Units) -> List[Tuple[str, str]]:
    query = [
        ("lat", str(coords.lat)),
        ("lon", str(coords.lon)),
        ("appid", api_key),
    ]
    if units.api_param is not None:
        query.append(("units", units.api_param))
    return query


def build_client(timeout: float = 10.0) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, headers={"User-Agent": DEFAULT_USER_AGENT})


class WeatherClient:
    """Fetches current weather readings from OpenWeatherMap.

    One request per call and no retries: the poller's next cycle is the retry.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = client is None
        self.client = client or build_client(timeout)
        self.endpoint = endpoint

    async def fetch_reading(self, coords: Coordinates, api_key: str, units: Units) -> Reading:
        params = build_query(coords, api_key, units)
        logger.debug("http.fetch", url=self.endpoint, lat=coords.lat, lon=coords.lon, units=str(units))

        try:
            response = await self.client.get(self.endpoint, params=params)
        except httpx.RequestError as exc:
            raise ProviderError(f"request failed: {exc!r}") from exc

        if not response.is_success:
            raise ProviderError(
                f"provider returned HTTP {response.status_code}",
                status=response.status_code,
            )

        try:
            return Reading.model_validate_json(response.content)
        except ValidationError as exc:
            raise ProviderError(f"malformed response body: {exc}") from exc

    async def aclose(self) -> None:
        """Close the underlying client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
