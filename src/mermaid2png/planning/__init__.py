"""Dimension planning: raster geometry heuristics per diagram family."""

from mermaid2png.planning.dimensions import DimensionPlanner, PlannerLimits
from mermaid2png.planning.metrics import DiagramMetrics, measure

__all__ = ["DimensionPlanner", "PlannerLimits", "DiagramMetrics", "measure"]
