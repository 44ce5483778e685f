"""Relationship model construction.

Runs the relationship phases in sequence and freezes the result:

    1. Reference-based inheritance discovery (only when a lookup is given)
    2. Class discovery
    3. Edge classification
    4. Class symbol assembly (abstractness + method lists)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from classmap.config.options import DiagramOptions
from classmap.core.graph.model import ClassSymbol, RelationshipModel
from classmap.core.relations.classifier import classify_edges
from classmap.core.relations.discovery import discover_classes
from classmap.core.relations.heritage import MethodReferenceLookup, with_discovered_parents
from classmap.core.relations.normalize import Relationships

logger = logging.getLogger(__name__)

def build_model(
    relationships: Relationships,
    abstract_classes: Iterable[str] = (),
    reference_lookup: MethodReferenceLookup | None = None,
    classes: Iterable[str] = (),
) -> RelationshipModel:
    """Build an immutable :class:`RelationshipModel` from validated inputs.

    Parameters
    ----------
    relationships:
        Output of :func:`~classmap.core.relations.normalize.normalize_relationships`
        (or a :class:`DiagramOptions`, which extends it).
    abstract_classes:
        Names of classes to mark abstract.  Names that never appear in the
        relationships are ignored.
    reference_lookup:
        Optional method-reference lookup used to derive extra parent edges.
    classes:
        Additional class names to include.  Only used together with
        *reference_lookup*, where they widen the set of scanned classes.

    Returns
    -------
    RelationshipModel
        The classified model with classes in discovery order.
    """
    extra: tuple[str, ...] = ()
    if reference_lookup is not None:
        extra = tuple(classes)
        relationships = with_discovered_parents(relationships, reference_lookup, extra)

    names = discover_classes(relationships, extra=extra)
    edges = classify_edges(relationships)
    abstract = frozenset(abstract_classes)

    abstract_methods = {name: tuple(methods) for name, methods in relationships.abstract_methods.items()}
    regular_methods = {name: tuple(methods) for name, methods in relationships.regular_methods.items()}

    symbols = tuple(
        ClassSymbol(
            name=name,
            is_abstract=name in abstract,
            abstract_methods=abstract_methods.get(name, ()),
            regular_methods=regular_methods.get(name, ()),
        )
        for name in names
    )

    logger.debug("Built relationship model: %d classes, %d edges", len(symbols), len(edges))
    return RelationshipModel(
        classes=symbols,
        edges=edges,
        parents=relationships.parents,
        associations=relationships.associations,
        aggregations=relationships.aggregations,
        abstract_methods=abstract_methods,
        regular_methods=regular_methods,
        abstract_classes=abstract,
    )

def model_from_options(
    options: DiagramOptions,
    reference_lookup: MethodReferenceLookup | None = None,
) -> RelationshipModel:
    """Build the model for *options*.

    An explicit *reference_lookup* takes precedence over the options'
    ``references`` table.
    """
    lookup = reference_lookup or options.reference_lookup()
    if lookup is None and options.classes:
        logger.warning(
            "Ignoring %d listed classes: 'classes' only applies with a reference lookup",
            len(options.classes),
        )
    return build_model(
        options,
        abstract_classes=options.abstract_classes,
        reference_lookup=lookup,
        classes=options.classes,
    )
