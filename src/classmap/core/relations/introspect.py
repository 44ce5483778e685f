"""Relationship options from live Python classes.

An alternate input source: instead of writing parent pairs and method lists
by hand, derive them from class objects.  Only relationships between the
given classes are kept, so ``object`` and third-party bases drop out.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from typing import Any

from classmap.config.options import DiagramOptions, make_options
from classmap.core.errors import ValidationError
from classmap.core.relations.heritage import MethodReferenceLookup

def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__") and name != "__init__"

def own_methods(cls: type) -> list[str]:
    """Return the names of callables defined directly in *cls*, in definition order."""
    names: list[str] = []
    for name, value in vars(cls).items():
        if _is_dunder(name):
            continue
        if isinstance(value, (staticmethod, classmethod)):
            value = value.__func__
        if inspect.isfunction(value):
            names.append(name)
    return names

def options_from_classes(*classes: type, **options: Any) -> DiagramOptions:
    """Build :class:`DiagramOptions` describing *classes*.

    * parents: each class's direct bases that are among *classes*
    * abstract methods: own methods listed in ``__abstractmethods__``
    * regular methods: the remaining own methods (every class gets an entry,
      so classes without relationships are still discovered)
    * abstract classes: those for which :func:`inspect.isabstract` is true

    Extra keyword *options* (e.g. ``show_explanatory_column``) are passed
    through.

    Raises:
        ValidationError: If two different classes share a ``__name__``.
    """
    names: dict[type, str] = {}
    owners: dict[str, type] = {}
    for cls in classes:
        other = owners.setdefault(cls.__name__, cls)
        if other is not cls:
            raise ValidationError(
                "classes",
                f"{other.__module__}.{other.__qualname__} and {cls.__module__}.{cls.__qualname__} "
                f"share the name {cls.__name__!r}",
            )
        names[cls] = cls.__name__

    parents: list[tuple[str, str]] = []
    abstract_methods: dict[str, list[str]] = {}
    regular_methods: dict[str, list[str]] = {}
    abstract_classes: list[str] = []

    for cls in classes:
        name = names[cls]
        parents.extend((name, names[base]) for base in cls.__bases__ if base in names)

        declared_abstract = getattr(cls, "__abstractmethods__", frozenset())
        methods = own_methods(cls)
        abstract = [method for method in methods if method in declared_abstract]
        if abstract:
            abstract_methods[name] = abstract
        regular_methods[name] = [method for method in methods if method not in declared_abstract]

        if inspect.isabstract(cls):
            abstract_classes.append(name)

    return make_options(
        parents=parents,
        abstract_methods=abstract_methods,
        regular_methods=regular_methods,
        abstract_classes=abstract_classes,
        **options,
    )

def bases_lookup(classes: Iterable[type]) -> MethodReferenceLookup:
    """Reference lookup answering each class name with its direct base names."""
    table = {cls.__name__: tuple(base.__name__ for base in cls.__bases__) for cls in classes}

    def lookup(name: str) -> Iterable[str]:
        return table.get(name, ())

    return lookup
