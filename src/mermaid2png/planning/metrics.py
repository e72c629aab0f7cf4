"""Structural metrics extracted from raw diagram text."""

from __future__ import annotations

import re
from dataclasses import dataclass

from mermaid2png.diagram.detect import detect_diagram_type
from mermaid2png.types import DiagramType, Orientation

_SQUARE_NODE = re.compile(r"\[.*?\]")
_ROUND_NODE = re.compile(r"\(.*?\)")
_GANTT_DIRECTIVES = (
    "gantt",
    "title",
    "dateFormat",
    "axisFormat",
    "tickInterval",
    "excludes",
    "includes",
    "todayMarker",
    "section",
)


@dataclass(frozen=True)
class DiagramMetrics:
    """Counts the dimension heuristics key off.

    Orientation is a raw substring test for ``LR``/``RL`` anywhere in the
    text, so a label containing those letters also reads as wide.
    """

    diagram_type: DiagramType
    orientation: Orientation = Orientation.TALL
    nodes: int = 0
    connections: int = 0
    actors: int = 0
    messages: int = 0
    tasks: int = 0

    @property
    def is_wide(self) -> bool:
        return self.orientation == Orientation.WIDE


def measure(mermaid_syntax: str | None) -> DiagramMetrics:
    """Compute per-family metrics. Unrecognized text yields zero counts."""
    text = mermaid_syntax or ""
    diagram_type = detect_diagram_type(text)
    lines = text.split("\n")

    if diagram_type == DiagramType.FLOWCHART:
        return _measure_flowchart(text, lines)
    if diagram_type == DiagramType.GANTT:
        return DiagramMetrics(diagram_type=diagram_type, tasks=_count_gantt_tasks(lines))
    if diagram_type == DiagramType.SEQUENCE:
        actors = sum(1 for line in lines if "participant" in line or "actor" in line)
        messages = sum(1 for line in lines if "->" in line)
        return DiagramMetrics(diagram_type=diagram_type, actors=actors, messages=messages)
    return DiagramMetrics(diagram_type=diagram_type)


def _measure_flowchart(text: str, lines: list[str]) -> DiagramMetrics:
    wide = "LR" in text or "RL" in text
    nodes = 0
    connections = 0
    for line in lines:
        if "-->" in line or "---" in line:
            connections += 1
        if _SQUARE_NODE.search(line):
            nodes += 1
        if _ROUND_NODE.search(line):
            nodes += 1
    return DiagramMetrics(
        diagram_type=DiagramType.FLOWCHART,
        orientation=Orientation.WIDE if wide else Orientation.TALL,
        nodes=nodes,
        connections=connections,
    )


def _count_gantt_tasks(lines: list[str]) -> int:
    count = 0
    for line in lines:
        stripped = line.strip()
        if ":" not in stripped or stripped.startswith(_GANTT_DIRECTIVES):
            continue
        count += 1
    return count
