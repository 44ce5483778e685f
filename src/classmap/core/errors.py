"""Exception hierarchy for classmap.

Validation problems abort a build before any graph or text is produced.
Configuration problems are raised for unusable option values; some callers
(graph dimensionality) catch them and fall back to a default.  Collaborator
problems come from the external PlantUML renderer and are normally carried
inside a failed :class:`~classmap.core.plantuml.renderer.RenderResult`
rather than raised.
"""

from __future__ import annotations

class ClassmapError(Exception):
    """Base class for all classmap errors."""

class ValidationError(ClassmapError, ValueError):
    """A relationship input does not have the expected shape.

    Attributes:
        field: Name of the offending input (e.g. ``"parents"``).
        detail: Human-readable description of the mismatch.
    """

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        self.detail = detail
        super().__init__(f"Invalid {field!r}: {detail}")

class ConfigurationError(ClassmapError, ValueError):
    """An option value is unsupported or the options source is unreadable."""

class CollaboratorError(ClassmapError, RuntimeError):
    """The external PlantUML renderer failed to produce an image."""
