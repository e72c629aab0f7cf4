"""Diagram type detection from the leading keyword."""

from __future__ import annotations

from mermaid2png.types import DiagramType

# Checked in order against the trimmed text.
_KEYWORDS: list[tuple[str, DiagramType]] = [
    ("flowchart", DiagramType.FLOWCHART),
    ("graph", DiagramType.FLOWCHART),
    ("sequenceDiagram", DiagramType.SEQUENCE),
    ("classDiagram", DiagramType.CLASS),
    ("stateDiagram", DiagramType.STATE),
    ("gantt", DiagramType.GANTT),
    ("pie", DiagramType.PIE),
    ("erDiagram", DiagramType.ER),
    ("journey", DiagramType.JOURNEY),
    ("gitGraph", DiagramType.GITGRAPH),
    ("mindmap", DiagramType.MINDMAP),
    ("timeline", DiagramType.TIMELINE),
    ("quadrantChart", DiagramType.QUADRANT),
]


def detect_diagram_type(mermaid_syntax: str | None) -> DiagramType:
    """Classify a diagram by its leading keyword. Unrecognized text is UNKNOWN."""
    if not mermaid_syntax:
        return DiagramType.UNKNOWN
    stripped = mermaid_syntax.strip()
    for keyword, diagram_type in _KEYWORDS:
        if stripped.startswith(keyword):
            return diagram_type
    return DiagramType.UNKNOWN
