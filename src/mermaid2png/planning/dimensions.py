"""Target raster size and scale factor for a diagram."""

from __future__ import annotations

import logging

from pydantic import BaseModel, model_validator

from mermaid2png.errors.exceptions import InvalidConfigurationError
from mermaid2png.planning.metrics import measure
from mermaid2png.planning.rules import (
    TALL_ASPECT_THRESHOLD,
    TALL_SCALE_STEP,
    first_matching_rule,
    scale_for,
)
from mermaid2png.types import DimensionPlan

logger = logging.getLogger(__name__)


class PlannerLimits(BaseModel):
    """Defaults and hard bounds for planned geometry."""

    default_width: int = 1920
    default_height: int = 1080
    default_scale: float = 2.0
    min_width: int = 800
    max_width: int = 8000
    min_height: int = 400
    max_height: int = 8000
    min_scale: float = 1.0
    max_scale: float = 3.0

    @model_validator(mode="after")
    def _check_bounds(self) -> PlannerLimits:
        for name, value in self:
            if value <= 0:
                raise InvalidConfigurationError(f"{name} must be positive, got {value}", field=name)
        for low, high in (
            ("min_width", "max_width"),
            ("min_height", "max_height"),
            ("min_scale", "max_scale"),
        ):
            if getattr(self, low) > getattr(self, high):
                raise InvalidConfigurationError(
                    f"{low} ({getattr(self, low)}) exceeds {high} ({getattr(self, high)})",
                    field=low,
                )
        return self


class DimensionPlanner:
    """Pure heuristics over diagram text: no I/O, never raises for any input."""

    def __init__(self, limits: PlannerLimits | None = None) -> None:
        self._limits = limits or PlannerLimits()

    @property
    def limits(self) -> PlannerLimits:
        return self._limits

    def plan(
        self,
        mermaid_syntax: str | None,
        width: int | None = None,
        height: int | None = None,
        scale_factor: float | None = None,
    ) -> DimensionPlan:
        """Compute width, height and scale factor for a render.

        Requested dimensions are a starting point that sizing rules may only
        enlarge; the result is always clamped to the configured bounds. A
        requested scale factor replaces the computed one.
        """
        limits = self._limits
        w: float = width or limits.default_width
        h: float = height or limits.default_height

        metrics = measure(mermaid_syntax)
        rule = first_matching_rule(metrics)
        if rule is not None:
            w, h = rule.apply(w, h)

        final_w = int(round(_clamp(w, limits.min_width, limits.max_width)))
        final_h = int(round(_clamp(h, limits.min_height, limits.max_height)))

        if scale_factor:
            scale = scale_factor
        else:
            scale = scale_for(metrics, limits.default_scale)
            if final_h >= TALL_ASPECT_THRESHOLD * final_w:
                scale += TALL_SCALE_STEP
        scale = _clamp(scale, limits.min_scale, limits.max_scale)

        logger.debug(
            "Planned %s diagram at %dx%d scale %.2f (rule: %s)",
            metrics.diagram_type.value,
            final_w,
            final_h,
            scale,
            rule.name if rule else "none",
        )
        return DimensionPlan(
            width=final_w,
            height=final_h,
            scale_factor=scale,
            diagram_type=metrics.diagram_type,
            rule=rule.name if rule else None,
        )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
