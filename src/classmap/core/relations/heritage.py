"""Reference-based inheritance discovery.

When a caller only names classes and relies on introspection instead of
explicit parent pairs, inheritance edges are derived from an injected
:data:`MethodReferenceLookup`: ``A -> B`` is declared for every pair of
distinct classes where the method table of ``A`` references ``B``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence

from classmap.core.graph.model import Pair
from classmap.core.relations.discovery import discover_classes
from classmap.core.relations.normalize import Relationships

logger = logging.getLogger(__name__)

MethodReferenceLookup = Callable[[str], Iterable[str]]

def mapping_lookup(references: Mapping[str, Iterable[str]]) -> MethodReferenceLookup:
    """Build a lookup from a ``{class: [referenced classes]}`` table.

    Classes missing from *references* reference nothing.
    """
    table = {name: tuple(targets) for name, targets in references.items()}

    def lookup(name: str) -> Iterable[str]:
        return table.get(name, ())

    return lookup

def discover_inheritance(
    classes: Sequence[str],
    lookup: MethodReferenceLookup,
) -> list[Pair]:
    """Scan every ordered pair of distinct *classes* for forwarded references.

    *lookup* is called once per class and treated as a pure function.  No
    cycle detection is performed: mutual references yield edges both ways.

    Returns:
        The discovered ``child -> parent`` pairs in scan order.
    """
    references = {name: frozenset(lookup(name)) for name in classes}

    discovered: list[Pair] = []
    for source in classes:
        for target in classes:
            if source != target and target in references[source]:
                discovered.append(Pair(source, target))

    logger.debug(
        "Discovered %d inheritance edges across %d classes", len(discovered), len(classes)
    )
    return discovered

def with_discovered_parents(
    relationships: Relationships,
    lookup: MethodReferenceLookup,
    classes: Iterable[str] = (),
) -> Relationships:
    """Return *relationships* with reference-discovered parents appended.

    The scan covers *classes* plus every class already mentioned by
    *relationships*.  Discovered pairs that duplicate a declared parent are
    skipped.
    """
    candidates = discover_classes(relationships, extra=classes)
    declared = {pair.key for pair in relationships.parents}
    extra = [pair for pair in discover_inheritance(candidates, lookup) if pair.key not in declared]
    if not extra:
        return relationships
    return relationships.model_copy(update={"parents": relationships.parents + tuple(extra)})
