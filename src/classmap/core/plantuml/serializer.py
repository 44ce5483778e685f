"""Deterministic PlantUML class-diagram text.

One block per discovered class, in discovery order::

    abstract class Shape {
     {abstract} area
     describe
    }
    Shape --> Drawable

Only inheritance is serialized.  Associations and aggregations are accepted
so the text path takes the same inputs as the graph path, but PlantUML
output does not show them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from classmap.config.options import DiagramOptions, make_options
from classmap.core.relations.discovery import discover_classes
from classmap.core.relations.heritage import MethodReferenceLookup, with_discovered_parents
from classmap.core.relations.normalize import Relationships

logger = logging.getLogger(__name__)

START_MARKER = "@startuml"
END_MARKER = "@enduml"

def _render_class(
    name: str,
    abstract_methods: Sequence[str],
    regular_methods: Sequence[str],
    parents: Sequence[str],
    is_abstract: bool,
) -> list[str]:
    keyword = "abstract class" if is_abstract else "class"
    lines = [f"{keyword} {name} {{"]
    lines.extend(f" {{abstract}} {method}" for method in abstract_methods)
    lines.extend(f" {method}" for method in regular_methods)
    lines.append("}")
    lines.extend(f"{name} --> {parent}" for parent in parents)
    return lines

def _parents_by_class(relationships: Relationships) -> dict[str, list[str]]:
    parents: dict[str, list[str]] = {}
    for pair in relationships.parents:
        parents.setdefault(pair.source, []).append(pair.target)
    return parents

def serialize_plantuml(
    relationships: Relationships,
    abstract_classes: Iterable[str] = (),
    classes: Iterable[str] = (),
) -> str:
    """Serialize *relationships* as a ``@startuml`` … ``@enduml`` class diagram.

    *classes* are extra names appended after the discovered ones.  Identical
    inputs always produce byte-identical text.
    """
    abstract = frozenset(abstract_classes)
    parents = _parents_by_class(relationships)

    blocks = [
        "\n".join(
            _render_class(
                name,
                relationships.abstract_methods.get(name, ()),
                relationships.regular_methods.get(name, ()),
                parents.get(name, ()),
                is_abstract=name in abstract,
            )
        )
        for name in discover_classes(relationships, extra=classes)
    ]
    body = "\n\n".join(blocks).strip()

    logger.debug("Serialized %d classes to PlantUML (%d chars)", len(blocks), len(body))
    if not body:
        return f"{START_MARKER}\n{END_MARKER}"
    return f"{START_MARKER}\n{body}\n{END_MARKER}"

def plantuml_for_options(
    options: DiagramOptions,
    reference_lookup: MethodReferenceLookup | None = None,
) -> str:
    """Serialize validated *options*, applying reference discovery when configured.

    An explicit *reference_lookup* takes precedence over ``options.references``.
    Presentation options (explanatory column, dimensionality) are ignored.
    """
    lookup = reference_lookup or options.reference_lookup()
    if lookup is None:
        return serialize_plantuml(options, options.abstract_classes)

    relationships = with_discovered_parents(options, lookup, options.classes)
    return serialize_plantuml(relationships, options.abstract_classes, classes=options.classes)

def generate_plantuml(
    reference_lookup: MethodReferenceLookup | None = None,
    **options: Any,
) -> str:
    """Validate keyword *options* and serialize them.

    Accepts the same keywords as :class:`~classmap.config.options.DiagramOptions`.

    Raises:
        ValidationError: If the options are malformed; no text is produced.
    """
    return plantuml_for_options(make_options(**options), reference_lookup)
