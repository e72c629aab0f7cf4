"""Request models for the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from mermaid2png.types import RenderOptions

_WIDE_REQUEST_RATIO = 2.5
_WIDE_REQUEST_SCALE = 2.5


class ConvertRequest(BaseModel):
    """Body of ``POST /convert/image``. Numeric strings are coerced."""

    model_config = ConfigDict(populate_by_name=True)

    mermaid_syntax: str = Field(alias="mermaidSyntax", min_length=1)
    width: int | None = Field(default=None, ge=100, le=10000)
    height: int | None = Field(default=None, ge=100, le=10000)
    scale_factor: float | None = Field(default=None, alias="scaleFactor", gt=0)

    @property
    def is_wide(self) -> bool:
        return bool(self.width and self.height and self.width / self.height > _WIDE_REQUEST_RATIO)

    def render_options(self) -> RenderOptions:
        """Render options, with a higher scale hint for explicitly wide requests."""
        scale = self.scale_factor
        if scale is None and self.is_wide:
            scale = _WIDE_REQUEST_SCALE
        return RenderOptions(width=self.width, height=self.height, scale_factor=scale)
