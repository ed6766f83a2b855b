from __future__ import annotations

import asyncio

from .cache import ConcurrentWriteError, OutcomeCell
from .config import Coordinates, Units
from .http_client import ProviderError, WeatherClient
from .logging import get_logger
from .models import Failed, Ready

logger = get_logger(__name__)


class Poller:
    """Background fetch/store loop keeping an :class:`OutcomeCell` current.

    Each cycle makes a single request and writes exactly one outcome. After a
    success it waits ``interval`` seconds, after a failure ``backoff_interval``.
    """

    def __init__(
        self,
        cell: OutcomeCell,
        client: WeatherClient,
        *,
        coords: Coordinates,
        api_key: str,
        units: Units,
        interval: float,
        backoff_interval: float,
    ) -> None:
        self.cell = cell
        self.client = client
        self.coords = coords
        self.api_key = api_key
        self.units = units
        self.interval = interval
        self.backoff_interval = backoff_interval

    async def poll_once(self) -> float:
        """Run one fetch cycle and return the cooldown before the next one."""
        try:
            reading = await self.client.fetch_reading(self.coords, self.api_key, self.units)
        except ProviderError as exc:
            logger.error("poll.failed", status=exc.status, error=str(exc))
            self.cell.write(Failed(status=exc.status))
            return self.backoff_interval

        logger.info("poll.reading", **reading.main.model_dump())
        logger.debug("poll.reading.full", reading=reading.model_dump(by_alias=True))
        self.cell.write(Ready(reading=reading))
        return self.interval

    async def run(self, stop: asyncio.Event) -> None:
        """Poll until ``stop`` is set.

        A stop during cooldown ends the loop at once. A stop during a fetch
        takes effect once that fetch's outcome has been written. Unexpected
        errors are logged and recorded as ``Failed`` so the loop keeps going.
        """
        logger.info(
            "poller.start",
            lat=self.coords.lat,
            lon=self.coords.lon,
            units=str(self.units),
            interval=self.interval,
            backoff_interval=self.backoff_interval,
        )
        while not stop.is_set():
            try:
                delay = await self.poll_once()
            except ConcurrentWriteError:
                raise
            except Exception:
                logger.exception("poll.crashed")
                self.cell.write(Failed(status=None))
                delay = self.backoff_interval
            try:
                await asyncio.wait_for(stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                continue
        logger.info("poller.stop")
