"""Edge classification for classmap.

Inheritance and association pairs are merged into one edge list and each
edge gets exactly one :class:`EdgeKind` by a fixed precedence:

1. the edge, in its given orientation, is a directed association;
2. the reverse orientation is an association (an unordered pair, or the
   reverse directed pair), which makes it a plain association;
3. otherwise it is inheritance.

Listing a parent/child pair under associations as well is therefore enough
to render it as an association.  Aggregation pairs skip the precedence
chain and are appended afterwards, so a pair given both as aggregation and
as inheritance/association yields two edges.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from classmap.core.graph.model import EdgeKind, Pair, RelationshipEdge
from classmap.core.relations.normalize import Relationships

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class EdgeStyle:
    """Rendering rule for one edge kind, in Graphviz arrow vocabulary.

    Arrowheads are drawn at the edge target: the parent for inheritance and
    the whole for aggregation.
    """

    arrowhead: str
    line: str = "solid"

    def as_attributes(self) -> dict[str, str]:
        return {"arrowhead": self.arrowhead, "style": self.line}

EDGE_STYLES: dict[EdgeKind, EdgeStyle] = {
    EdgeKind.INHERITANCE: EdgeStyle(arrowhead="empty"),
    EdgeKind.ASSOCIATION: EdgeStyle(arrowhead="none"),
    EdgeKind.DIRECTED_ASSOCIATION: EdgeStyle(arrowhead="vee"),
    EdgeKind.AGGREGATION: EdgeStyle(arrowhead="odiamond"),
}

def edge_style(edge: RelationshipEdge) -> EdgeStyle:
    """Return the :data:`EDGE_STYLES` entry for *edge*'s kind."""
    return EDGE_STYLES[edge.kind]

class _AssociationIndex:
    """Orientation lookups over a set of association pairs."""

    __slots__ = ("_directed", "_unordered")

    def __init__(self, associations: Iterable[Pair]) -> None:
        self._directed: set[tuple[str, str]] = set()
        self._unordered: set[frozenset[str]] = set()
        for pair in associations:
            if pair.directed:
                self._directed.add(pair.key)
            else:
                self._unordered.add(frozenset(pair.key))

    def is_directed(self, source: str, target: str) -> bool:
        return (source, target) in self._directed

    def has_reverse(self, source: str, target: str) -> bool:
        return (target, source) in self._directed or frozenset((source, target)) in self._unordered

def _classify(pair: Pair, index: _AssociationIndex) -> EdgeKind:
    if index.is_directed(pair.source, pair.target):
        return EdgeKind.DIRECTED_ASSOCIATION
    if index.has_reverse(pair.source, pair.target):
        return EdgeKind.ASSOCIATION
    return EdgeKind.INHERITANCE

def classify_edge(pair: Pair, associations: Iterable[Pair]) -> EdgeKind:
    """Return the kind of the inheritance/association edge *pair*."""
    return _classify(pair, _AssociationIndex(associations))

def _unique(pairs: Iterable[Pair]) -> list[Pair]:
    seen: set[tuple[str, str]] = set()
    unique: list[Pair] = []
    for pair in pairs:
        if pair.key not in seen:
            seen.add(pair.key)
            unique.append(pair)
    return unique

def classify_edges(relationships: Relationships) -> tuple[RelationshipEdge, ...]:
    """Classify every edge of *relationships*.

    Returns the union of parent and association edges (deduplicated by
    orientation, first appearance wins) followed by the aggregation edges.
    """
    index = _AssociationIndex(relationships.associations)

    edges = [
        RelationshipEdge(pair.source, pair.target, _classify(pair, index))
        for pair in _unique((*relationships.parents, *relationships.associations))
    ]
    edges.extend(
        RelationshipEdge(pair.source, pair.target, EdgeKind.AGGREGATION)
        for pair in _unique(relationships.aggregations)
    )

    logger.debug(
        "Classified %d edges: %s",
        len(edges),
        ", ".join(
            f"{kind.value}={sum(1 for e in edges if e.kind is kind)}" for kind in EdgeKind
        ),
    )
    return tuple(edges)
