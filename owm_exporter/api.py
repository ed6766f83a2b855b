from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from owm_exporter.cache import OutcomeCell
from owm_exporter.config import AppConfig
from owm_exporter.http_client import WeatherClient
from owm_exporter.logging import get_logger
from owm_exporter.metrics import render_metrics
from owm_exporter.poller import Poller
from owm_exporter.views import outcome_to_json

logger = get_logger(__name__)

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4"


def create_app(
    config: AppConfig,
    *,
    cell: Optional[OutcomeCell] = None,
    client: Optional[httpx.AsyncClient] = None,
    start_poller: bool = True,
) -> FastAPI:
    """Build the exporter app around ``cell``.

    With ``start_poller`` the lifespan runs a :class:`Poller` in the
    background and stops it on shutdown. An injected ``client`` is left open.
    """

    cell = cell if cell is not None else OutcomeCell()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not start_poller:
            yield
            return

        weather = WeatherClient(client, endpoint=config.endpoint, timeout=config.timeout)
        poller = Poller(
            cell,
            weather,
            coords=config.coords,
            api_key=config.api_key,
            units=config.units,
            interval=config.interval,
            backoff_interval=config.backoff_interval,
        )
        stop = asyncio.Event()
        task = asyncio.create_task(poller.run(stop))
        logger.info("app.startup", port=config.port, location=config.location)
        try:
            yield
        finally:
            logger.info("app.shutdown")
            stop.set()
            await task
            await weather.aclose()

    app = FastAPI(title="OpenWeatherMap Exporter", lifespan=lifespan)
    app.state.cell = cell
    app.state.config = config

    @app.get("/json")
    def get_json() -> JSONResponse:
        return JSONResponse(outcome_to_json(cell.read()))

    @app.get("/metrics", response_class=PlainTextResponse)
    def get_metrics() -> PlainTextResponse:
        body = render_metrics(cell.read(), config.units, config.location)
        return PlainTextResponse(body, media_type=METRICS_CONTENT_TYPE)

    return app
