"""Shared Pydantic models for mermaid2png."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# ── Enums ──


class DiagramType(StrEnum):
    FLOWCHART = "flowchart"
    SEQUENCE = "sequence"
    CLASS = "class"
    STATE = "state"
    GANTT = "gantt"
    PIE = "pie"
    ER = "er"
    JOURNEY = "journey"
    GITGRAPH = "gitgraph"
    MINDMAP = "mindmap"
    TIMELINE = "timeline"
    QUADRANT = "quadrant"
    UNKNOWN = "unknown"


class Orientation(StrEnum):
    WIDE = "wide"
    TALL = "tall"


# ── Render models ──


class RenderOptions(BaseModel):
    """Caller-requested render options. Absent values mean "let the planner decide"."""

    width: int | None = None
    height: int | None = None
    scale_factor: float | None = None

    def describe(self) -> dict[str, int | float | str]:
        """Options as reported back to HTTP clients, with absent values spelled out."""
        return {
            "width": self.width or "default",
            "height": self.height or "default",
            "scaleFactor": self.scale_factor or "default",
        }


class DimensionPlan(BaseModel):
    """Final raster geometry for one render."""

    width: int
    height: int
    scale_factor: float
    diagram_type: DiagramType = DiagramType.UNKNOWN
    rule: str | None = None

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class RenderResult(BaseModel):
    """Outcome of a render request, cached or fresh."""

    image: bytes
    cached: bool = False
    diagram_type: DiagramType = DiagramType.UNKNOWN
    plan: DimensionPlan | None = None
    renderer: str | None = None
    options: RenderOptions = Field(default_factory=RenderOptions)

    @property
    def size_bytes(self) -> int:
        return len(self.image)
