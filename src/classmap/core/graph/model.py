"""Relationship data model for classmap.

Defines the value types shared by the graph and PlantUML output paths:
relationship pairs as supplied by callers, classified edges, discovered
class symbols, and the immutable :class:`RelationshipModel` aggregate.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

class EdgeKind(Enum):
    """Visual relationship kinds an edge can be classified as."""

    INHERITANCE = "inheritance"
    ASSOCIATION = "association"
    DIRECTED_ASSOCIATION = "directed_association"
    AGGREGATION = "aggregation"

@dataclass(frozen=True)
class Pair:
    """A relationship between two classes as declared by the caller.

    Ordered pairs (``directed=True``) read ``source -> target``.  Unordered
    pairs are bidirectional and match either orientation.
    """

    source: str
    target: str
    directed: bool = True

    @property
    def key(self) -> tuple[str, str]:
        """Return the ``(source, target)`` orientation of this pair."""
        return (self.source, self.target)

    def reversed(self) -> Pair:
        return Pair(self.target, self.source, self.directed)

    def __str__(self) -> str:
        arrow = "->" if self.directed else "--"
        return f"{self.source} {arrow} {self.target}"

@dataclass(frozen=True)
class RelationshipEdge:
    """A directed graph edge tagged with exactly one :class:`EdgeKind`."""

    source: str
    target: str
    kind: EdgeKind

    @property
    def key(self) -> tuple[str, str]:
        return (self.source, self.target)

@dataclass(frozen=True)
class ClassSymbol:
    """A class discovered from the relationship inputs."""

    name: str
    is_abstract: bool = False
    abstract_methods: tuple[str, ...] = ()
    regular_methods: tuple[str, ...] = ()

    @property
    def methods(self) -> tuple[str, ...]:
        """All methods, abstract ones first."""
        return self.abstract_methods + self.regular_methods

@dataclass(frozen=True)
class RelationshipModel:
    """Normalized, classified view of one set of relationship options.

    ``classes`` is ordered by first appearance and contains every edge
    endpoint and methods-map key exactly once.  ``edges`` holds the
    inheritance/association edges followed by the aggregation edges.
    """

    classes: tuple[ClassSymbol, ...] = ()
    edges: tuple[RelationshipEdge, ...] = ()

    parents: tuple[Pair, ...] = ()
    associations: tuple[Pair, ...] = ()
    aggregations: tuple[Pair, ...] = ()
    abstract_methods: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    regular_methods: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    abstract_classes: frozenset[str] = frozenset()

    @property
    def class_names(self) -> tuple[str, ...]:
        return tuple(symbol.name for symbol in self.classes)

    def get_class(self, name: str) -> ClassSymbol | None:
        """Return the symbol called *name*, or ``None`` if it was not discovered."""
        for symbol in self.classes:
            if symbol.name == name:
                return symbol
        return None

    def edges_of_kind(self, kind: EdgeKind) -> list[RelationshipEdge]:
        """Return the classified edges whose kind matches *kind*."""
        return [edge for edge in self.edges if edge.kind is kind]

    def parents_of(self, name: str) -> list[str]:
        """Return the declared parents of *name* in declaration order."""
        return [pair.target for pair in self.parents if pair.source == name]
