"""Tests for edge classification and edge styles."""

from __future__ import annotations

import pytest

from classmap.core.graph.model import EdgeKind, Pair, RelationshipEdge
from classmap.core.relations.classifier import (
    EDGE_STYLES,
    EdgeStyle,
    classify_edge,
    classify_edges,
    edge_style,
)
from classmap.core.relations.normalize import normalize_relationships


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestClassifyEdge:
    def test_plain_parent_is_inheritance(self) -> None:
        assert classify_edge(Pair("Dog", "Animal"), []) is EdgeKind.INHERITANCE

    def test_same_orientation_directed_association(self) -> None:
        kind = classify_edge(Pair("A", "B"), [Pair("A", "B")])
        assert kind is EdgeKind.DIRECTED_ASSOCIATION

    def test_reverse_directed_is_association(self) -> None:
        kind = classify_edge(Pair("A", "B"), [Pair("B", "A")])
        assert kind is EdgeKind.ASSOCIATION

    @pytest.mark.parametrize("pair", [Pair("A", "B"), Pair("B", "A")])
    def test_unordered_matches_both_orientations(self, pair: Pair) -> None:
        kind = classify_edge(pair, [Pair("A", "B", directed=False)])
        assert kind is EdgeKind.ASSOCIATION

    def test_directed_wins_over_reverse(self) -> None:
        kind = classify_edge(Pair("A", "B"), [Pair("B", "A"), Pair("A", "B")])
        assert kind is EdgeKind.DIRECTED_ASSOCIATION

    def test_unrelated_association_does_not_apply(self) -> None:
        kind = classify_edge(Pair("A", "B"), [Pair("A", "C")])
        assert kind is EdgeKind.INHERITANCE


# ---------------------------------------------------------------------------
# classify_edges
# ---------------------------------------------------------------------------


class TestClassifyEdges:
    def test_parent_also_listed_as_association_is_directed_association(self) -> None:
        rel = normalize_relationships(parents=[("A", "B")], associations=[("A", "B")])
        assert classify_edges(rel) == (RelationshipEdge("A", "B", EdgeKind.DIRECTED_ASSOCIATION),)

    def test_undirected_association_with_both_parent_orientations(self) -> None:
        rel = normalize_relationships(
            parents=[("A", "B"), ("B", "A")],
            associations=[{"A", "B"}],
        )
        kinds = {edge.key: edge.kind for edge in classify_edges(rel)}
        assert kinds == {("A", "B"): EdgeKind.ASSOCIATION, ("B", "A"): EdgeKind.ASSOCIATION}

    def test_association_only_edge(self) -> None:
        rel = normalize_relationships(associations=[("Driver", "Car")])
        assert classify_edges(rel) == (
            RelationshipEdge("Driver", "Car", EdgeKind.DIRECTED_ASSOCIATION),
        )

    def test_union_in_first_appearance_order(self) -> None:
        rel = normalize_relationships(
            parents=[("Dog", "Animal"), ("Cat", "Animal")],
            associations=[("Owner", "Dog")],
        )
        assert [edge.key for edge in classify_edges(rel)] == [
            ("Dog", "Animal"),
            ("Cat", "Animal"),
            ("Owner", "Dog"),
        ]

    def test_duplicate_parents_collapse(self) -> None:
        rel = normalize_relationships(parents=[("A", "B"), ("A", "B")])
        assert len(classify_edges(rel)) == 1

    def test_aggregations_appended_last(self) -> None:
        rel = normalize_relationships(
            aggregations=[("Wheel", "Car")],
            parents=[("Car", "Vehicle")],
        )
        edges = classify_edges(rel)
        assert edges[-1] == RelationshipEdge("Wheel", "Car", EdgeKind.AGGREGATION)
        assert edges[0].kind is EdgeKind.INHERITANCE

    def test_aggregation_and_parent_emit_two_edges(self) -> None:
        rel = normalize_relationships(parents=[("A", "B")], aggregations=[("A", "B")])
        assert [edge.kind for edge in classify_edges(rel)] == [
            EdgeKind.INHERITANCE,
            EdgeKind.AGGREGATION,
        ]

    def test_aggregations_deduplicated_among_themselves(self) -> None:
        rel = normalize_relationships(aggregations=[("A", "B"), "A -> B"])
        assert len(classify_edges(rel)) == 1

    def test_deterministic(self) -> None:
        rel = normalize_relationships(
            parents=[("A", "B"), ("C", "B")],
            associations=[{"A", "C"}],
            aggregations=[("D", "A")],
        )
        assert classify_edges(rel) == classify_edges(rel)


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------


class TestEdgeStyles:
    def test_every_kind_has_a_style(self) -> None:
        assert set(EDGE_STYLES) == set(EdgeKind)

    @pytest.mark.parametrize(
        ("kind", "arrowhead"),
        [
            (EdgeKind.INHERITANCE, "empty"),
            (EdgeKind.ASSOCIATION, "none"),
            (EdgeKind.DIRECTED_ASSOCIATION, "vee"),
            (EdgeKind.AGGREGATION, "odiamond"),
        ],
    )
    def test_arrowheads(self, kind: EdgeKind, arrowhead: str) -> None:
        assert edge_style(RelationshipEdge("A", "B", kind)).arrowhead == arrowhead

    def test_as_attributes(self) -> None:
        assert EdgeStyle(arrowhead="vee").as_attributes() == {"arrowhead": "vee", "style": "solid"}
