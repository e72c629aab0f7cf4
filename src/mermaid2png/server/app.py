"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mermaid2png.config.schema import ServiceSettings
from mermaid2png.core import Mermaid2Png
from mermaid2png.server.routes import router

logger = logging.getLogger(__name__)


def create_app(
    settings: ServiceSettings | None = None,
    service: Mermaid2Png | None = None,
) -> FastAPI:
    """Build the app around one converter service.

    The cache index is rebuilt from disk at startup and swept periodically
    while the app runs.
    """
    service = service or Mermaid2Png(settings)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await asyncio.to_thread(service.initialize)
        sweeper = asyncio.create_task(_sweep_periodically(service))
        try:
            yield
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper

    app = FastAPI(title="mermaid2png", lifespan=lifespan)
    app.state.service = service
    app.include_router(router)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    return app


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"errors": jsonable_encoder(exc.errors())})


async def _sweep_periodically(service: Mermaid2Png) -> None:
    interval = service.settings.cache_sweep_interval_seconds
    while True:
        await asyncio.sleep(interval)
        if not service.cache.enabled:
            continue
        removed = await asyncio.to_thread(service.cache.store_backend.sweep)
        if removed:
            logger.info("Periodic sweep removed %d cache items", removed)
