"""fzp document adapters."""

from .riff import (
    ChunkHeader,
    ChunkReader,
    FzpDocumentAdapter,
    iter_chunks,
    read_thumbnail_chunk,
)

__all__ = [
    "ChunkHeader",
    "ChunkReader",
    "FzpDocumentAdapter",
    "iter_chunks",
    "read_thumbnail_chunk",
]
