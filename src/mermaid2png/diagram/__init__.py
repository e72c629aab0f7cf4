"""Diagram text inspection and renderer-quirk normalization."""

from mermaid2png.diagram.detect import detect_diagram_type
from mermaid2png.diagram.syntax import normalize_syntax

__all__ = ["detect_diagram_type", "normalize_syntax"]
