"""Ports - interfaces for external dependencies."""

from .document import DocumentPort
from .image import DecoderPort, RendererPort
from .storage import StoragePort

__all__ = ["DecoderPort", "DocumentPort", "RendererPort", "StoragePort"]
