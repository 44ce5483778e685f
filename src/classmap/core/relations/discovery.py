"""Class discovery from normalized relationships."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from classmap.core.relations.normalize import Relationships

def _iter_names(relationships: Relationships) -> Iterator[str]:
    for bundle in (relationships.parents, relationships.associations, relationships.aggregations):
        for pair in bundle:
            yield pair.source
            yield pair.target
    yield from relationships.abstract_methods
    yield from relationships.regular_methods

def discover_classes(
    relationships: Relationships,
    extra: Iterable[str] = (),
) -> tuple[str, ...]:
    """Return every participating class exactly once, in first-appearance order.

    Order: parent pairs (source then target), associations, aggregations,
    abstract-methods keys, regular-methods keys, then *extra* names.
    """
    seen: dict[str, None] = {}
    for name in _iter_names(relationships):
        seen.setdefault(name, None)
    for name in extra:
        seen.setdefault(name, None)
    return tuple(seen)
