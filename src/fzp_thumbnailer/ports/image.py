"""Image ports - interfaces for decoding and rendering previews."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from ..domain.models import PreviewImage, ThumbnailMetadata


class DecoderPort(ABC):
    """Interface for decoding an embedded preview."""

    @abstractmethod
    def decode(self, fp: BinaryIO) -> "PreviewImage":
        """Decode a preview stream into RGBA pixels."""
        pass


class RendererPort(ABC):
    """Interface for producing thumbnail files."""

    @abstractmethod
    def render(
        self, image: "PreviewImage", size: int, metadata: "ThumbnailMetadata"
    ) -> tuple[bytes, tuple[int, int]]:
        """Scale the preview to fit a square of `size` and encode it.

        Returns the encoded file and its dimensions.
        """
        pass

    @abstractmethod
    def render_failure(self, metadata: "ThumbnailMetadata") -> bytes:
        """Encode a failed-thumbnail marker for the document."""
        pass
