"""Domain services - orchestrate thumbnailing."""

import logging
import os
from pathlib import Path

from ..ports.document import DocumentPort
from ..ports.image import DecoderPort, RendererPort
from ..ports.storage import StoragePort
from .errors import ThumbnailError
from .models import ThumbnailMetadata, ThumbnailResult

logger = logging.getLogger(__name__)


class ThumbnailService:
    """Orchestrates the read, decode, render, write pipeline."""

    def __init__(
        self,
        document: DocumentPort,
        decoder: DecoderPort,
        renderer: RendererPort,
        storage: StoragePort,
        record_failures: bool = False,
    ) -> None:
        self.document = document
        self.decoder = decoder
        self.renderer = renderer
        self.storage = storage
        self.record_failures = record_failures

    def create(
        self,
        source: Path,
        size: int,
        output: Path | None = None,
        uri: str | None = None,
    ) -> ThumbnailResult:
        """Create a thumbnail for one document.

        Pipeline:
            1. Open the document and stat it (XDG needs mtime)
            2. Locate the embedded preview
            3. Decode it
            4. Scale and encode
            5. Write to `output`, or the cache location for `size`

        Errors are collected on the result. On failure a failure marker is
        written to the cache (if configured). A later success removes
        the marker again.
        """
        uri = uri or source.absolute().as_uri()
        result = ThumbnailResult(source=source, uri=uri)
        metadata: ThumbnailMetadata | None = None
        logger.info(f"Thumbnailing: {source.name} ({size}px)")

        try:
            with open(source, "rb") as f:
                st = os.fstat(f.fileno())
                metadata = ThumbnailMetadata(
                    uri=uri, mtime=int(st.st_mtime), size=st.st_size
                )
                preview = self.decoder.decode(self.document.open_thumbnail(f))

            data, (result.width, result.height) = self.renderer.render(
                preview, size, metadata
            )

            dest = output or self.storage.cache_path(uri, size)
            result.output_path = self.storage.write(dest, data)
            logger.info(
                f"Wrote {result.width}x{result.height} thumbnail: {result.output_path}"
            )
            self._clear_failure(uri)

        except (ThumbnailError, OSError) as e:
            logger.error(f"Thumbnailing failed for {source}: {e}")
            result.errors.append(str(e))
            result.output_path = None
            self._record_failure(metadata)

        return result

    def _record_failure(self, metadata: ThumbnailMetadata | None) -> None:
        """Write a failure marker if configured and the document was readable."""
        if not self.record_failures or metadata is None:
            return
        try:
            self.storage.write_failure(
                metadata.uri, self.renderer.render_failure(metadata)
            )
        except OSError as e:
            logger.warning(f"Failed to record failure: {e}")

    def _clear_failure(self, uri: str) -> None:
        """Drop a stale failure marker after a successful write."""
        if not self.record_failures:
            return
        try:
            self.storage.clear_failure(uri)
        except OSError as e:
            logger.warning(f"Failed to clear failure marker: {e}")
