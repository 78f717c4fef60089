"""Domain layer - core thumbnailing logic."""

from .errors import (
    MissingThumbnailError,
    PreviewDecodeError,
    PreviewTooLargeError,
    ThumbnailError,
    TruncatedDocumentError,
    UnrecognizedDocumentError,
)
from .models import ColorSpace, PreviewImage, ThumbnailMetadata, ThumbnailResult

__all__ = [
    "ColorSpace",
    "MissingThumbnailError",
    "PreviewDecodeError",
    "PreviewImage",
    "PreviewTooLargeError",
    "ThumbnailError",
    "ThumbnailMetadata",
    "ThumbnailResult",
    "TruncatedDocumentError",
    "UnrecognizedDocumentError",
]
