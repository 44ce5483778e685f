"""Graph assembly for classmap.

Pairs every discovered class with its rendered label and every classified
edge with its style, then hands both to a graph constructor.  The built-in
constructors produce a directed :class:`igraph.Graph` laid out in two or
three dimensions; any callable with the same signature can be injected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any, Protocol

import igraph as ig

from classmap.config.options import DiagramOptions
from classmap.core.errors import ConfigurationError
from classmap.core.graph.model import RelationshipEdge, RelationshipModel
from classmap.core.relations.builder import model_from_options
from classmap.core.relations.classifier import EdgeStyle, edge_style
from classmap.core.relations.heritage import MethodReferenceLookup
from classmap.core.render.labels import ClassLabel, render_class_label

logger = logging.getLogger(__name__)

class Dimensionality(Enum):
    """Supported graph constructor choices."""

    TWO_D = "2d"
    THREE_D = "3d"

    @property
    def dim(self) -> int:
        return 3 if self is Dimensionality.THREE_D else 2

    @classmethod
    def parse(cls, value: Any) -> Dimensionality:
        """Parse ``2``, ``3``, ``"2d"``, ``"3D"`` or a member.

        Raises:
            ConfigurationError: If *value* names no supported choice.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            text = f"{value}d"
        elif isinstance(value, str):
            text = value.strip().lower()
        else:
            text = None

        for member in cls:
            if member.value == text:
                return member
        raise ConfigurationError(
            f"Unsupported graph dimensionality {value!r}; expected one of "
            + ", ".join(repr(m.value) for m in cls)
        )

class GraphConstructor(Protocol):
    def __call__(
        self,
        vertices: Sequence[str],
        edges: Sequence[RelationshipEdge],
        *,
        vertex_labels: Mapping[str, ClassLabel],
        edge_style: Callable[[RelationshipEdge], EdgeStyle],
    ) -> Any: ...

def _construct(
    vertices: Sequence[str],
    edges: Sequence[RelationshipEdge],
    vertex_labels: Mapping[str, ClassLabel],
    style_of: Callable[[RelationshipEdge], EdgeStyle],
    dim: int,
) -> ig.Graph:
    graph = ig.Graph(directed=True)
    graph["dim"] = dim

    if not vertices:
        return graph

    graph.add_vertices(
        list(vertices),
        attributes={
            "label": [vertex_labels[name].to_html() for name in vertices],
            "is_abstract": [vertex_labels[name].name.italic for name in vertices],
        },
    )

    if edges:
        styles = [style_of(edge) for edge in edges]
        graph.add_edges(
            [(edge.source, edge.target) for edge in edges],
            attributes={
                "kind": [edge.kind.value for edge in edges],
                "arrowhead": [style.arrowhead for style in styles],
                "style": [style.line for style in styles],
            },
        )

    layout = graph.layout_fruchterman_reingold(dim=dim)
    for axis, attr in enumerate(("x", "y", "z")[:dim]):
        graph.vs[attr] = [coords[axis] for coords in layout.coords]

    return graph

def graph_2d(
    vertices: Sequence[str],
    edges: Sequence[RelationshipEdge],
    *,
    vertex_labels: Mapping[str, ClassLabel],
    edge_style: Callable[[RelationshipEdge], EdgeStyle],
) -> ig.Graph:
    """Directed graph with a 2-D force-directed layout (``x``, ``y``)."""
    return _construct(vertices, edges, vertex_labels, edge_style, dim=2)

def graph_3d(
    vertices: Sequence[str],
    edges: Sequence[RelationshipEdge],
    *,
    vertex_labels: Mapping[str, ClassLabel],
    edge_style: Callable[[RelationshipEdge], EdgeStyle],
) -> ig.Graph:
    """Directed graph with a 3-D force-directed layout (``x``, ``y``, ``z``)."""
    return _construct(vertices, edges, vertex_labels, edge_style, dim=3)

GRAPH_CONSTRUCTORS: dict[Dimensionality, GraphConstructor] = {
    Dimensionality.TWO_D: graph_2d,
    Dimensionality.THREE_D: graph_3d,
}

def resolve_constructor(choice: Any = Dimensionality.TWO_D) -> GraphConstructor:
    """Return the constructor for *choice*, falling back to 2-D when unsupported."""
    try:
        dimensionality = Dimensionality.parse(choice)
    except ConfigurationError as exc:
        logger.warning("%s; falling back to 2d", exc)
        dimensionality = Dimensionality.TWO_D
    return GRAPH_CONSTRUCTORS[dimensionality]

def assemble_graph(
    model: RelationshipModel,
    *,
    show_explanatory_column: bool = True,
    dimensionality: Any = Dimensionality.TWO_D,
    constructor: GraphConstructor | None = None,
) -> Any:
    """Assemble the drawable graph for *model*.

    Args:
        model: The classified relationship model.
        show_explanatory_column: Whether labels show the caption column.
        dimensionality: Constructor choice, ignored when *constructor* is given.
        constructor: Optional injected graph constructor.

    Returns:
        Whatever the constructor returns; an :class:`igraph.Graph` for the
        built-in ones.
    """
    if constructor is None:
        constructor = resolve_constructor(dimensionality)

    labels = {
        symbol.name: render_class_label(symbol, show_explanatory_column)
        for symbol in model.classes
    }
    graph = constructor(
        model.class_names,
        model.edges,
        vertex_labels=labels,
        edge_style=edge_style,
    )
    logger.debug("Assembled graph with %d vertices and %d edges", len(labels), len(model.edges))
    return graph

def build_graph(
    options: DiagramOptions,
    reference_lookup: MethodReferenceLookup | None = None,
    constructor: GraphConstructor | None = None,
) -> Any:
    """Build the graph for *options* in one call (model, labels, constructor)."""
    model = model_from_options(options, reference_lookup)
    return assemble_graph(
        model,
        show_explanatory_column=options.show_explanatory_column,
        dimensionality=options.graph_dimensionality,
        constructor=constructor,
    )
