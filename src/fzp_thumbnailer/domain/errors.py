"""Thumbnailing errors."""


class ThumbnailError(Exception):
    """Base class for failures that mean "no thumbnail available"."""


class UnrecognizedDocumentError(ThumbnailError):
    """Input is not a RIFF container with the fzp form type."""


class TruncatedDocumentError(ThumbnailError):
    """Input ended in the middle of a header."""


class MissingThumbnailError(ThumbnailError):
    """Document has no thmb chunk in the searched slots."""


class PreviewDecodeError(ThumbnailError):
    """Embedded preview could not be decoded."""


class PreviewTooLargeError(PreviewDecodeError):
    """Embedded preview exceeds the configured dimension limit."""
