"""PlantUML text -> image bytes through an external renderer.

Two transports, chosen up front and never mixed:

Local:  ``plantuml -t<fmt> -pipe`` with the diagram on stdin.
Server: ``GET {server}/{fmt}/{encoded}`` where *encoded* is the diagram
        compressed with raw deflate and written in PlantUML's URL alphabet.

Failures do not raise.  They come back as a :class:`RenderResult` whose
``error`` is a :class:`CollaboratorError`, together with the attempted
request and whatever the renderer answered, so integration problems can be
debugged.  Nothing is retried.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import zlib
from dataclasses import dataclass, field
from typing import Any

import httpx

from classmap.config.settings import RendererSettings
from classmap.core.errors import CollaboratorError

logger = logging.getLogger(__name__)

_PLANTUML_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"

_TEXT_FORMATS = frozenset({"txt", "utxt"})

@dataclass(frozen=True)
class RenderRequest:
    """What was sent to the renderer."""

    transport: str  # "server" or "executable"
    target: str  # URL or command line
    fmt: str
    source: str

@dataclass
class RenderResult:
    """Outcome of one render attempt."""

    request: RenderRequest
    data: bytes = b""
    content_type: str = ""
    status: int | None = None
    raw_response: bytes = b""
    error: CollaboratorError | None = None
    details: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> bytes:
        """Return the image bytes, or raise the recorded :class:`CollaboratorError`."""
        if self.error is not None:
            raise self.error
        return self.data

def _encode3bytes(b1: int, b2: int, b3: int) -> str:
    c1 = b1 >> 2
    c2 = ((b1 & 0x3) << 4) | (b2 >> 4)
    c3 = ((b2 & 0xF) << 2) | (b3 >> 6)
    c4 = b3 & 0x3F
    return "".join(_PLANTUML_ALPHABET[c & 0x3F] for c in (c1, c2, c3, c4))

def encode_plantuml(text: str) -> str:
    """Encode PlantUML *text* for embedding in a server URL."""
    data = zlib.compress(text.encode("utf-8"))[2:-4]  # strip zlib header/checksum

    chunks = []
    for i in range(0, len(data), 3):
        b1 = data[i]
        b2 = data[i + 1] if i + 1 < len(data) else 0
        b3 = data[i + 2] if i + 2 < len(data) else 0
        chunks.append(_encode3bytes(b1, b2, b3))
    return "".join(chunks)

def _failure(request: RenderRequest, message: str, **kwargs: Any) -> RenderResult:
    logger.warning("PlantUML %s render failed: %s", request.transport, message)
    return RenderResult(request=request, error=CollaboratorError(message), **kwargs)

def _looks_like_output(fmt: str, content_type: str) -> bool:
    if fmt in _TEXT_FORMATS:
        return content_type.startswith("text/")
    return content_type.startswith("image/")

def render_via_server(
    text: str,
    fmt: str = "svg",
    server_url: str | None = None,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> RenderResult:
    """Render *text* with a PlantUML web server.

    Args:
        text: PlantUML source (including ``@startuml``/``@enduml``).
        fmt: Output format tag understood by the server (``svg``, ``png``, ...).
        server_url: Server base URL; defaults to the public PlantUML server.
        timeout: Request timeout in seconds.
        client: Optional preconfigured :class:`httpx.Client`.
    """
    server = (server_url or RendererSettings().server_url).rstrip("/")
    url = f"{server}/{fmt}/{encode_plantuml(text)}"
    request = RenderRequest(transport="server", target=url, fmt=fmt, source=text)

    logger.debug("Rendering PlantUML via %s (url len=%d)", server, len(url))
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
                response = owned.get(url)
        else:
            response = client.get(url)
    except httpx.HTTPError as exc:
        return _failure(request, f"PlantUML server request failed: {exc}")

    content_type = response.headers.get("content-type", "")
    common: dict[str, Any] = {
        "status": response.status_code,
        "content_type": content_type,
        "raw_response": response.content,
    }

    if not response.is_success:
        return _failure(request, f"PlantUML server returned HTTP {response.status_code}", **common)
    if not _looks_like_output(fmt, content_type):
        return _failure(
            request,
            f"PlantUML server returned non-image content ({content_type or 'no content type'})",
            **common,
        )

    return RenderResult(request=request, data=response.content, **common)

def render_via_executable(
    text: str,
    fmt: str = "svg",
    executable: str = "plantuml",
    timeout: float = 60.0,
) -> RenderResult:
    """Render *text* with a local PlantUML executable (stdin -> stdout pipe)."""
    resolved = shutil.which(executable)
    cmd = [resolved or executable, f"-t{fmt}", "-pipe"]
    request = RenderRequest(transport="executable", target=" ".join(cmd), fmt=fmt, source=text)

    if resolved is None:
        return _failure(request, f"PlantUML executable not found: {executable}")

    try:
        completed = subprocess.run(
            cmd,
            input=text.encode("utf-8"),
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return _failure(request, f"PlantUML executable timed out after {timeout:g}s")
    except OSError as exc:
        return _failure(request, f"PlantUML executable could not be started: {exc}")

    stderr = completed.stderr.decode("utf-8", errors="replace").strip()
    details = {"stderr": stderr} if stderr else {}
    if completed.returncode != 0 or not completed.stdout:
        return _failure(
            request,
            f"PlantUML executable exited with code {completed.returncode}"
            + (f": {stderr[:300]}" if stderr else ""),
            status=completed.returncode,
            raw_response=completed.stdout,
            details=details,
        )

    return RenderResult(
        request=request,
        data=completed.stdout,
        status=completed.returncode,
        raw_response=completed.stdout,
        details=details,
    )

def render_plantuml(
    text: str,
    fmt: str = "svg",
    settings: RendererSettings | None = None,
) -> RenderResult:
    """Render *text* with the configured transport.

    The local executable is used when ``settings.executable`` is set,
    otherwise the server.  Settings default to :meth:`RendererSettings.from_env`.
    """
    settings = settings or RendererSettings.from_env()
    if settings.executable:
        return render_via_executable(text, fmt, settings.executable, settings.timeout)
    return render_via_server(text, fmt, settings.server_url, settings.timeout)
