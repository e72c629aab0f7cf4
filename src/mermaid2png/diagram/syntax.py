"""Syntax normalization applied to diagram text before it reaches a renderer.

These patches work around known mermaid-cli quirks. They are applied to the
text written to the renderer's input file only; cache keys are always
computed from the caller's original text.
"""

from __future__ import annotations

import re

_GANTT_DATE_FORMAT = "    dateFormat  YYYY-MM-DD"
_GANTT_HEADER_KEYWORDS = ("gantt", "title", "dateFormat")
_INDENT = "    "

_FLOWCHART_INIT = """%%{{init: {{
  'flowchart': {{
    'curve': 'basis',
    'diagramPadding': 10,
    'nodeSpacing': {node_spacing},
    'rankSpacing': {rank_spacing},
    'padding': 15
  }},
  'themeVariables': {{
    'fontSize': 14,
    'fontFamily': 'Arial, sans-serif'
  }},
  'useMaxWidth': false,
  'highResolution': true,
  'renderOptimize': true
}}}}%%
"""


def normalize_syntax(mermaid_syntax: str | None) -> str:
    """Clean up common whitespace and escaping problems, then apply per-type fixes."""
    if not mermaid_syntax:
        return ""

    cleaned = mermaid_syntax.replace("\\n", "\n")
    cleaned = re.sub(r"\s+:", " :", cleaned)
    cleaned = re.sub(r",\s+", ", ", cleaned)
    cleaned = re.sub(r"(\d{4})-(\d{2})-+(\d{2})", r"\1-\2-\3", cleaned)
    cleaned = re.sub(r"(\w+)\s+,\s+(\w+)", r"\1, \2", cleaned)

    stripped = cleaned.strip()
    if stripped.startswith("gantt"):
        cleaned = fix_gantt_syntax(cleaned)
    if stripped.startswith("classDiagram"):
        cleaned = fix_class_arrows(cleaned)
    if stripped.startswith("flowchart"):
        cleaned = add_flowchart_init(cleaned)
    return cleaned


def fix_gantt_syntax(gantt_code: str) -> str:
    """Repair gantt headers, section/after spacing, and task indentation."""
    fixed = gantt_code.strip()

    if "dateFormat" not in fixed:
        fixed = re.sub(
            r"gantt([\s\S]*?)(\n\s*section|\Z)",
            lambda m: f"gantt{m.group(1)}\n{_GANTT_DATE_FORMAT}{m.group(2)}",
            fixed,
            count=1,
        )

    fixed = re.sub(r"section(\w+)", r"section \1", fixed)
    fixed = re.sub(r":(\w+),", r": \1, ", fixed)
    fixed = re.sub(r"after(\w+)", r"after \1", fixed)
    fixed = re.sub(r"after\s+([^,]+),\s*after\s+([^,]+)", r"after \1 & \2", fixed)

    lines = fixed.split("\n")
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("section"):
            lines[i] = stripped
        elif not stripped.startswith(_GANTT_HEADER_KEYWORDS):
            if stripped and not line.startswith(_INDENT):
                lines[i] = _INDENT + stripped
    return "\n".join(lines)


def fix_class_arrows(class_code: str) -> str:
    """Pad class-diagram arrows with spaces."""
    fixed = class_code.replace("-->", " --> ")
    return fixed.replace("<--", " <-- ")


def add_flowchart_init(flowchart_code: str) -> str:
    """Prepend an init directive tuned for the flowchart's likely shape.

    Left untouched when the author already supplied an init directive.
    """
    if "%%{init:" in flowchart_code:
        return flowchart_code

    connections = 0
    level_indicator = 0
    for line in flowchart_code.split("\n"):
        if "-->" in line or "---" in line:
            connections += 1
        if "TD" in line or "LR" in line:
            level_indicator = 2 if "LR" in line else 1

    wide = level_indicator == 2 or connections > 10
    header = _FLOWCHART_INIT.format(
        node_spacing=40 if wide else 60,
        rank_spacing=60 if wide else 80,
    )
    return header + flowchart_code
