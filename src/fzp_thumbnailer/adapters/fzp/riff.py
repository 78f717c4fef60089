"""Reader for the RIFF container used by fzp documents.

Layout::

    "RIFF" <u32 LE remaining size> "fzp " chunk*
    chunk := <4 byte id> <u32 LE payload size> payload

The preview lives in a ``thmb`` chunk. Only the first two chunks are
searched: the first slot may hold a ``LIST``/``INFO`` chunk, and the
thumbnailer runs many times in a short timespan, so it must not walk
the whole document.
"""

import io
import logging
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

from ...domain.errors import (
    MissingThumbnailError,
    TruncatedDocumentError,
    UnrecognizedDocumentError,
)
from ...ports.document import DocumentPort

logger = logging.getLogger(__name__)

RIFF_MAGIC = b"RIFF"
FORM_TYPE = b"fzp "
THUMBNAIL_ID = b"thmb"

RIFF_HEADER = struct.Struct("<4sI4s")
CHUNK_HEADER = struct.Struct("<4sI")


@dataclass(frozen=True)
class ChunkHeader:
    """Top-level chunk id, payload size and payload offset."""

    id: bytes
    size: int
    offset: int

    @property
    def name(self) -> str:
        return self.id.decode("latin-1")


class ChunkReader(io.RawIOBase):
    """Read-only window over ``length`` bytes of ``raw``.

    Position 0 is wherever ``raw`` was positioned at construction. Reads
    stop at the window end, seeks past the end clamp to it, and seeks
    before the start raise. The underlying stream is never closed.
    """

    def __init__(self, raw: BinaryIO, length: int) -> None:
        super().__init__()
        self._raw = raw
        self._length = length
        self._pos = 0

    @property
    def length(self) -> int:
        return self._length

    @property
    def remaining(self) -> int:
        return self._length - self._pos

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        n = min(len(buffer), self.remaining)
        if n <= 0:
            return 0
        data = self._raw.read(n)
        buffer[: len(data)] = data
        self._pos += len(data)
        return len(data)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._pos + offset
        elif whence == io.SEEK_END:
            target = self._length + min(offset, 0)
        else:
            raise ValueError(f"Invalid whence: {whence}")

        if target < 0:
            raise OSError("Seek before start of chunk")
        target = min(target, self._length)

        # Relative seek: the window's origin is unknown to raw
        self._raw.seek(target - self._pos, io.SEEK_CUR)
        self._pos = target
        return self._pos

    def tell(self) -> int:
        return self._pos


def _read_exact(fp: BinaryIO, size: int, what: str) -> bytes:
    data = fp.read(size)
    if len(data) != size:
        raise TruncatedDocumentError(f"Unexpected end of file reading {what}")
    return data


def read_riff_header(fp: BinaryIO) -> int:
    """Validate the container header.

    Returns the remaining file size declared by the header.
    """
    header = fp.read(RIFF_HEADER.size)
    if len(header) != RIFF_HEADER.size:
        raise UnrecognizedDocumentError("Unrecognized file type")
    magic, remaining, form = RIFF_HEADER.unpack(header)
    if magic != RIFF_MAGIC or form != FORM_TYPE:
        raise UnrecognizedDocumentError("Unrecognized file type")
    return remaining


def read_chunk_header(fp: BinaryIO) -> tuple[bytes, int]:
    """Read a chunk id and payload size."""
    chunk_id, size = CHUNK_HEADER.unpack(
        _read_exact(fp, CHUNK_HEADER.size, "chunk header")
    )
    return chunk_id, size


def read_thumbnail_chunk(fp: BinaryIO) -> ChunkReader:
    """Return a reader over the ``thmb`` payload of an fzp document."""
    # Bytes left in the container after the form type
    remaining = max(read_riff_header(fp) - len(FORM_TYPE), 0)

    chunk_id, size = read_chunk_header(fp)
    remaining = max(remaining - CHUNK_HEADER.size, 0)
    if chunk_id == THUMBNAIL_ID:
        logger.debug(f"Found thumbnail in first chunk ({size} bytes)")
        return ChunkReader(fp, min(size, remaining))

    # Skip the first chunk, then try the second slot
    fp.seek(size, io.SEEK_CUR)
    remaining = max(remaining - size, 0)

    chunk_id, size = read_chunk_header(fp)
    remaining = max(remaining - CHUNK_HEADER.size, 0)
    if chunk_id == THUMBNAIL_ID:
        logger.debug(f"Found thumbnail in second chunk ({size} bytes)")
        return ChunkReader(fp, min(size, remaining))

    raise MissingThumbnailError("Document does not contain a thumbnail")


def iter_chunks(fp: BinaryIO) -> Iterator[ChunkHeader]:
    """Yield every top-level chunk header in document order.

    Stops at the declared end of the container or the end of the file,
    whichever comes first.
    """
    remaining = read_riff_header(fp)
    # The declared size counts the form type
    end = RIFF_HEADER.size - len(FORM_TYPE) + remaining
    offset = RIFF_HEADER.size

    while offset + CHUNK_HEADER.size <= end:
        header = fp.read(CHUNK_HEADER.size)
        if len(header) != CHUNK_HEADER.size:
            return
        chunk_id, size = CHUNK_HEADER.unpack(header)
        offset += CHUNK_HEADER.size
        yield ChunkHeader(id=chunk_id, size=size, offset=offset)
        fp.seek(offset + size)
        offset += size


class FzpDocumentAdapter(DocumentPort):
    """Document implementation for RIFF fzp files."""

    def open_thumbnail(self, fp: BinaryIO) -> ChunkReader:
        return read_thumbnail_chunk(fp)
