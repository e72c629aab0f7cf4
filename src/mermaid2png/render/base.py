"""Renderer protocol and PNG output validation."""

from __future__ import annotations

import io
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from mermaid2png.errors.exceptions import RenderError
from mermaid2png.types import DimensionPlan


class Renderer(Protocol):
    """Turns (normalized) diagram text into PNG bytes at a planned geometry."""

    name: str

    async def render(self, mermaid_syntax: str, plan: DimensionPlan) -> bytes: ...


def validate_png(data: bytes, renderer: str) -> bytes:
    """Return ``data`` unchanged if it decodes as a PNG, else raise RenderError."""
    if not data:
        raise RenderError("Renderer produced an empty file", renderer=renderer)
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise RenderError(f"Renderer output is not a valid image: {e}", renderer=renderer) from e
    if fmt != "PNG":
        raise RenderError(f"Renderer produced {fmt}, expected PNG", renderer=renderer)
    return data
