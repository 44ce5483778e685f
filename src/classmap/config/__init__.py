"""classmap configuration: diagram options and renderer settings."""

from classmap.config.options import DiagramOptions, load_options, make_options
from classmap.config.settings import RendererSettings

__all__ = [
    "DiagramOptions",
    "RendererSettings",
    "load_options",
    "make_options",
]
