"""Relationship normalizer.

Validates the five relationship inputs (parents, abstract methods, regular
methods, associations, aggregations) against a structural schema and
returns them in canonical form.  Pairs may be written as 2-item tuples or
lists, as ``Pair`` instances, as 2-element sets (unordered), or as arrow
strings such as ``"Dog -> Animal"`` (ordered) and ``"Car -- Road"``
(unordered).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Annotated, Any, NoReturn, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from classmap.core.errors import ValidationError
from classmap.core.graph.model import Pair

logger = logging.getLogger(__name__)

Name = Annotated[str, Field(min_length=1)]

_ARROW_RE = re.compile(r"(->|--)")

_ARROW_CHARS = frozenset("-<>")

def parse_arrow(text: str) -> Pair:
    """Parse ``"A -> B"`` (ordered) or ``"A -- B"`` (unordered) into a :class:`Pair`.

    The string must hold exactly one arrow, and neither class name may
    contain ``-``, ``<`` or ``>``.
    """
    parts = _ARROW_RE.split(text)
    if len(parts) != 3:
        raise ValueError(f"expected exactly one '->' or '--' in {text!r}")
    source, arrow, target = (part.strip() for part in parts)
    for name in (source, target):
        if not name or _ARROW_CHARS.intersection(name):
            raise ValueError(f"expected 'A -> B' or 'A -- B', got {text!r}")
    return Pair(source, target, directed=arrow == "->")

def _check_name(value: Any, raw: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"class names must be non-empty strings, got {raw!r}")
    return value

def coerce_pair(value: Any, *, allow_unordered: bool = True) -> Pair:
    """Convert one raw pair entry into a :class:`Pair`.

    Raises:
        ValueError: If *value* is not a pair of class names, or is unordered
            while *allow_unordered* is ``False``.
    """
    if isinstance(value, Pair):
        pair = Pair(_check_name(value.source, value), _check_name(value.target, value), value.directed)
    elif isinstance(value, str):
        pair = parse_arrow(value)
    elif isinstance(value, (set, frozenset)):
        if len(value) != 2:
            raise ValueError(
                f"unordered pairs need exactly two distinct class names, got {value!r}"
            )
        # Sets have no stable order; sort so edge orientation is reproducible.
        first, second = sorted(_check_name(item, value) for item in value)
        pair = Pair(first, second, directed=False)
    elif isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise ValueError(f"expected a pair of class names, got {len(value)} items: {value!r}")
        pair = Pair(_check_name(value[0], value), _check_name(value[1], value))
    else:
        raise ValueError(f"expected a pair of class names, got {value!r}")

    if not pair.directed and not allow_unordered:
        raise ValueError(f"expected an ordered pair, got unordered {str(pair)!r}")
    return pair

def _coerce_pairs(value: Any, *, allow_unordered: bool) -> list[Pair]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise ValueError(f"expected a sequence of pairs, got {type(value).__name__}")
    return [coerce_pair(item, allow_unordered=allow_unordered) for item in value]

class Relationships(BaseModel):
    """The five relationship inputs in canonical form."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    parents: tuple[Pair, ...] = ()
    abstract_methods: dict[Name, list[Name]] = Field(default_factory=dict)
    regular_methods: dict[Name, list[Name]] = Field(default_factory=dict)
    associations: tuple[Pair, ...] = ()
    aggregations: tuple[Pair, ...] = ()

    @field_validator("parents", mode="before")
    @classmethod
    def _ordered_pairs(cls, value: Any) -> list[Pair]:
        return _coerce_pairs(value, allow_unordered=False)

    @field_validator("associations", "aggregations", mode="before")
    @classmethod
    def _any_pairs(cls, value: Any) -> list[Pair]:
        return _coerce_pairs(value, allow_unordered=True)

    @field_validator("abstract_methods", "regular_methods", mode="before")
    @classmethod
    def _methods_map(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError(f"expected a mapping of class name to method names, got {type(value).__name__}")
        for name, methods in value.items():
            if isinstance(methods, str):
                raise ValueError(f"methods of {name!r} must be a list of names, not a string")
        return value

ModelT = TypeVar("ModelT", bound=BaseModel)

def _raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    first = exc.errors()[0]
    loc = first.get("loc", ())
    field = str(loc[0]) if loc else "options"
    detail = first.get("msg", str(exc))
    if len(loc) > 1:
        detail = f"{detail} (at {'.'.join(str(part) for part in loc[1:])})"
    raise ValidationError(field, detail) from exc

def validate_model(model_cls: type[ModelT], data: Any) -> ModelT:
    """Validate *data* into *model_cls*, raising :class:`ValidationError` on mismatch."""
    if not isinstance(data, Mapping):
        raise ValidationError("options", f"expected a mapping, got {type(data).__name__}")
    try:
        return model_cls.model_validate(dict(data))
    except PydanticValidationError as exc:
        _raise_validation_error(exc)

def normalize_relationships(
    parents: Iterable[Any] | None = None,
    abstract_methods: Mapping[str, Iterable[str]] | None = None,
    regular_methods: Mapping[str, Iterable[str]] | None = None,
    associations: Iterable[Any] | None = None,
    aggregations: Iterable[Any] | None = None,
) -> Relationships:
    """Validate and canonicalize the five relationship inputs.

    Every input is optional and defaults to empty.  Valid inputs pass
    through in their original order.

    Raises:
        ValidationError: If any input has the wrong shape.  ``exc.field``
            names the offending input.
    """
    raw = {
        "parents": parents,
        "abstract_methods": abstract_methods,
        "regular_methods": regular_methods,
        "associations": associations,
        "aggregations": aggregations,
    }
    relationships = validate_model(
        Relationships, {key: value for key, value in raw.items() if value is not None}
    )
    logger.debug(
        "Normalized %d parents, %d associations, %d aggregations",
        len(relationships.parents),
        len(relationships.associations),
        len(relationships.aggregations),
    )
    return relationships
