"""Tests for diagram metrics and the sizing rule table."""

from mermaid2png.planning.metrics import DiagramMetrics, measure
from mermaid2png.planning.rules import (
    SCALE_TIERS,
    SIZING_RULES,
    Anchor,
    SizingRule,
    first_matching_rule,
    scale_for,
)
from mermaid2png.types import DiagramType, Orientation


class TestMeasure:
    def test_flowchart_counts(self):
        text = "graph TD\n  A[Start] --> B(Round)\n  B --- C\n  C --> D"
        m = measure(text)
        assert m.diagram_type == DiagramType.FLOWCHART
        assert m.orientation == Orientation.TALL
        assert m.connections == 3
        assert m.nodes == 2

    def test_node_shapes_counted_once_per_line(self):
        m = measure("graph TD\n  A[a] --> B[b] --> C[c]")
        assert m.nodes == 1

    def test_lr_is_wide(self):
        assert measure("flowchart LR\n  A --> B").is_wide
        assert measure("flowchart RL\n  A --> B").is_wide
        assert not measure("flowchart TB\n  A --> B").is_wide

    def test_gantt_tasks_skip_directives(self):
        text = (
            "gantt\n"
            "    title Plan: Q1\n"
            "    dateFormat YYYY-MM-DD\n"
            "    section Build\n"
            "    Design :a1, 2024-01-01, 3d\n"
            "    Code   :a2, after a1, 5d\n"
        )
        m = measure(text)
        assert m.diagram_type == DiagramType.GANTT
        assert m.tasks == 2

    def test_sequence_counts(self):
        text = (
            "sequenceDiagram\n"
            "  participant A\n"
            "  actor B\n"
            "  A->>B: hello\n"
            "  B-->>A: hi\n"
        )
        m = measure(text)
        assert m.actors == 2
        assert m.messages == 2

    def test_other_types_have_zero_counts(self):
        m = measure("pie\n  \"Dogs\" : 3")
        assert m == DiagramMetrics(diagram_type=DiagramType.PIE)

    def test_empty(self):
        assert measure("").diagram_type == DiagramType.UNKNOWN
        assert measure(None).nodes == 0


class TestRules:
    def test_rule_order_within_family(self):
        wide = DiagramMetrics(DiagramType.FLOWCHART, Orientation.WIDE, nodes=20)
        assert first_matching_rule(wide).name == "flowchart_wide_complex"

    def test_rules_do_not_cross_families(self):
        seq = DiagramMetrics(DiagramType.SEQUENCE, nodes=50, tasks=50)
        assert first_matching_rule(seq) is None

    def test_gantt_always_matches(self):
        assert first_matching_rule(DiagramMetrics(DiagramType.GANTT)).name == "gantt_timeline"

    def test_rule_names_unique(self):
        names = [r.name for r in SIZING_RULES]
        assert len(names) == len(set(names))

    def test_width_anchor_never_shrinks(self):
        rule = SizingRule("r", DiagramType.FLOWCHART, lambda m: True, 2.0, Anchor.WIDTH, 1000)
        assert rule.apply(3000, 100) == (3000, 1500)
        assert rule.apply(500, 100) == (1000, 500)

    def test_height_anchor(self):
        rule = SizingRule("r", DiagramType.FLOWCHART, lambda m: True, 0.5, Anchor.HEIGHT, 1000)
        assert rule.apply(100, 400) == (500, 1000)


class TestScaleTiers:
    def test_tiers_highest_first(self):
        assert [t.scale for t in SCALE_TIERS] == sorted((t.scale for t in SCALE_TIERS), reverse=True)

    def test_connections_drive_scale(self):
        assert scale_for(DiagramMetrics(DiagramType.FLOWCHART, connections=41), 2.0) == 3.0
        assert scale_for(DiagramMetrics(DiagramType.FLOWCHART, connections=21), 2.0) == 2.5
        assert scale_for(DiagramMetrics(DiagramType.FLOWCHART, connections=20), 2.0) == 2.0
