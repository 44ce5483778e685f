"""PlantUML renderer settings resolved from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from classmap.core.errors import ConfigurationError

DEFAULT_SERVER_URL = "https://www.plantuml.com/plantuml"
DEFAULT_TIMEOUT = 30.0

@dataclass(frozen=True)
class RendererSettings:
    """Where and how to reach the PlantUML renderer.

    When ``executable`` is set the local program is used; otherwise the
    web server at ``server_url``.
    """

    server_url: str = DEFAULT_SERVER_URL
    executable: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> RendererSettings:
        """Read ``PLANTUML_SERVER_URL``, ``PLANTUML_EXECUTABLE`` and ``PLANTUML_TIMEOUT``."""
        raw_timeout = os.environ.get("PLANTUML_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise ConfigurationError(f"PLANTUML_TIMEOUT must be a number, got {raw_timeout!r}") from exc

        return cls(
            server_url=os.environ.get("PLANTUML_SERVER_URL") or DEFAULT_SERVER_URL,
            executable=os.environ.get("PLANTUML_EXECUTABLE") or None,
            timeout=timeout,
        )
