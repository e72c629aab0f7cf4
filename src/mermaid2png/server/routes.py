"""Conversion, health and cache-inspection endpoints."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from mermaid2png.core import Mermaid2Png
from mermaid2png.errors.exceptions import RenderError
from mermaid2png.server.models import ConvertRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _service(request: Request) -> Mermaid2Png:
    return request.app.state.service


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/convert/image")
async def convert_image(body: ConvertRequest, request: Request) -> Response:
    service = _service(request)
    options = body.render_options()
    logger.debug(
        "Convert request: %sx%s, scale %s, %d chars",
        body.width or "default",
        body.height or "default",
        options.scale_factor or "default",
        len(body.mermaid_syntax),
    )

    try:
        result = await service.convert_async(
            body.mermaid_syntax,
            width=options.width,
            height=options.height,
            scale_factor=options.scale_factor,
        )
    except RenderError as e:
        logger.error(
            "Error converting image: %s (renderer: %s, %d chars, requested %sx%s)",
            e.message,
            e.renderer or "-",
            len(body.mermaid_syntax),
            body.width or "default",
            body.height or "default",
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to convert Mermaid syntax to image"},
        )

    if body.is_wide:
        logger.info("Used enhanced rendering for wide aspect ratio (%sx%s)", body.width, body.height)

    return Response(
        content=result.image,
        media_type="image/png",
        headers={
            "X-Diagram-Type": result.diagram_type.value,
            "X-Rendering-Options": json.dumps(options.describe()),
            "X-Cache": "HIT" if result.cached else "MISS",
        },
    )


@router.get("/cache/stats")
async def cache_stats(request: Request) -> dict:
    stats = _service(request).cache.stats()
    return {**stats.model_dump(), "hit_rate": stats.hit_rate}
