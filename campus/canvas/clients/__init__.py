"""High-level clients."""

from .canvas_client import CanvasClient

__all__ = ["CanvasClient"]
