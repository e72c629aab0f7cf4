"""Ordered sizing rules. The first matching rule for a diagram family wins."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from mermaid2png.planning.metrics import DiagramMetrics
from mermaid2png.types import DiagramType


class Anchor(StrEnum):
    """Which dimension the rule raises to its minimum; the other follows the ratio."""

    WIDTH = "width"
    HEIGHT = "height"


@dataclass(frozen=True)
class SizingRule:
    name: str
    family: DiagramType
    predicate: Callable[[DiagramMetrics], bool]
    ratio: float  # width / height
    anchor: Anchor
    minimum: int

    def matches(self, metrics: DiagramMetrics) -> bool:
        return metrics.diagram_type == self.family and self.predicate(metrics)

    def apply(self, width: float, height: float) -> tuple[float, float]:
        if self.anchor == Anchor.WIDTH:
            width = max(width, self.minimum)
            return width, width / self.ratio
        height = max(height, self.minimum)
        return height * self.ratio, height


@dataclass(frozen=True)
class ScaleTier:
    name: str
    predicate: Callable[[DiagramMetrics], bool]
    scale: float


SIZING_RULES: tuple[SizingRule, ...] = (
    SizingRule(
        name="flowchart_wide_complex",
        family=DiagramType.FLOWCHART,
        predicate=lambda m: m.is_wide and m.nodes > 15,
        ratio=4 / 1,
        anchor=Anchor.WIDTH,
        minimum=3840,
    ),
    SizingRule(
        name="flowchart_wide_moderate",
        family=DiagramType.FLOWCHART,
        predicate=lambda m: m.is_wide and m.nodes > 8,
        ratio=3 / 1,
        anchor=Anchor.WIDTH,
        minimum=2560,
    ),
    SizingRule(
        name="flowchart_tall_complex",
        family=DiagramType.FLOWCHART,
        predicate=lambda m: not m.is_wide and m.nodes > 15,
        ratio=9 / 16,
        anchor=Anchor.HEIGHT,
        minimum=2160,
    ),
    SizingRule(
        name="gantt_many_tasks",
        family=DiagramType.GANTT,
        predicate=lambda m: m.tasks > 20,
        ratio=4 / 3,
        anchor=Anchor.WIDTH,
        minimum=2560,
    ),
    SizingRule(
        name="gantt_timeline",
        family=DiagramType.GANTT,
        predicate=lambda m: True,
        ratio=3 / 1,
        anchor=Anchor.WIDTH,
        minimum=3200,
    ),
    SizingRule(
        name="sequence_many_actors",
        family=DiagramType.SEQUENCE,
        predicate=lambda m: m.actors > 5,
        ratio=2 / 1,
        anchor=Anchor.WIDTH,
        minimum=2560,
    ),
    SizingRule(
        name="sequence_long_exchange",
        family=DiagramType.SEQUENCE,
        predicate=lambda m: m.actors <= 3 and m.messages > 20,
        ratio=3 / 4,
        anchor=Anchor.HEIGHT,
        minimum=2160,
    ),
)

# Highest tier first.
SCALE_TIERS: tuple[ScaleTier, ...] = (
    ScaleTier(
        name="very_complex",
        predicate=lambda m: m.nodes > 30 or m.connections > 40,
        scale=3.0,
    ),
    ScaleTier(
        name="complex",
        predicate=lambda m: m.nodes > 15 or m.connections > 20,
        scale=2.5,
    ),
)

TALL_ASPECT_THRESHOLD = 3.0  # height / width
TALL_SCALE_STEP = 0.5


def first_matching_rule(
    metrics: DiagramMetrics,
    rules: tuple[SizingRule, ...] = SIZING_RULES,
) -> SizingRule | None:
    for rule in rules:
        if rule.matches(metrics):
            return rule
    return None


def scale_for(
    metrics: DiagramMetrics,
    default: float,
    tiers: tuple[ScaleTier, ...] = SCALE_TIERS,
) -> float:
    for tier in tiers:
        if tier.predicate(metrics):
            return tier.scale
    return default
