"""Diagram options: the full configuration surface and its file loader."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import Field

from classmap.core.errors import ConfigurationError
from classmap.core.relations.heritage import MethodReferenceLookup, mapping_lookup
from classmap.core.relations.normalize import Name, Relationships, validate_model

logger = logging.getLogger(__name__)

class DiagramOptions(Relationships):
    """Relationship inputs plus presentation options.

    ``graph_dimensionality`` is untyped: unrecognized values
    are not a validation failure, the graph assembler falls back to 2-D.
    ``classes`` and ``references`` feed reference-based inheritance
    discovery.
    """

    abstract_classes: frozenset[Name] = frozenset()
    show_explanatory_column: bool = True
    graph_dimensionality: Any = "2d"
    classes: tuple[Name, ...] = ()
    references: dict[Name, list[Name]] | None = Field(default=None)

    def reference_lookup(self) -> MethodReferenceLookup | None:
        """Return a lookup over ``references``, or ``None`` when none were given."""
        if self.references is None:
            return None
        return mapping_lookup(self.references)

def make_options(**values: Any) -> DiagramOptions:
    """Validate keyword options into :class:`DiagramOptions`.

    Raises:
        ValidationError: If any option has the wrong shape or is unknown.
    """
    return validate_model(DiagramOptions, values)

def load_options(path: str | Path) -> DiagramOptions:
    """Read a JSON options file.

    Raises:
        ConfigurationError: If the file is missing or is not valid JSON.
        ValidationError: If the JSON does not match the options schema.
    """
    options_path = Path(path)
    if not options_path.is_file():
        raise ConfigurationError(f"Options file not found: {options_path}")

    try:
        data = json.loads(options_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Options file {options_path} is not valid JSON: {exc}") from exc

    logger.debug("Loaded options from %s", options_path)
    return validate_model(DiagramOptions, data)
