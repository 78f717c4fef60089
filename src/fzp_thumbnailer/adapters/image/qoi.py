"""Preview decoder for QOI images using Pillow."""

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image

from ...domain.errors import PreviewDecodeError, PreviewTooLargeError
from ...domain.models import ColorSpace, PreviewImage
from ...ports.image import DecoderPort

logger = logging.getLogger(__name__)

QOI_MAGIC = b"qoif"
QOI_HEADER = struct.Struct(">4sIIBB")
MAX_INPUT_DIMENSION = 1024


@dataclass(frozen=True)
class QoiHeader:
    width: int
    height: int
    channels: int
    colorspace: ColorSpace


def read_qoi_header(fp: BinaryIO) -> QoiHeader:
    """Parse the 14-byte QOI header at the current position."""
    data = fp.read(QOI_HEADER.size)
    if len(data) != QOI_HEADER.size:
        raise PreviewDecodeError("Failed to parse thumbnail header: truncated")

    magic, width, height, channels, colorspace = QOI_HEADER.unpack(data)
    if magic != QOI_MAGIC:
        raise PreviewDecodeError("Failed to parse thumbnail header: not a QOI image")
    if channels not in (3, 4):
        raise PreviewDecodeError(
            f"Failed to parse thumbnail header: invalid channel count {channels}"
        )
    try:
        space = ColorSpace(colorspace)
    except ValueError:
        raise PreviewDecodeError(
            f"Failed to parse thumbnail header: invalid colorspace {colorspace}"
        ) from None

    return QoiHeader(width=width, height=height, channels=channels, colorspace=space)


class QoiDecoder(DecoderPort):
    """Decoder implementation for QOI previews.

    The header is checked against ``max_dimension`` before any pixel data
    is decoded.
    """

    def __init__(self, max_dimension: int = MAX_INPUT_DIMENSION) -> None:
        self.max_dimension = max_dimension

    def decode(self, fp: BinaryIO) -> PreviewImage:
        start = fp.tell()
        header = read_qoi_header(fp)
        logger.debug(
            f"Preview header: {header.width}x{header.height}, "
            f"{header.channels} channels, {header.colorspace.name}"
        )

        if header.width > self.max_dimension or header.height > self.max_dimension:
            raise PreviewTooLargeError("Thumbnail size exceeds limit")
        if header.width == 0 or header.height == 0:
            raise PreviewDecodeError("Thumbnail has zero size")

        fp.seek(start)
        try:
            with Image.open(fp, formats=["QOI"]) as img:
                img.load()
                rgba = img.convert("RGBA")
        except (OSError, ValueError, IndexError) as e:
            raise PreviewDecodeError(f"Failed to parse thumbnail data: {e}") from e

        return PreviewImage(
            width=rgba.width,
            height=rgba.height,
            colorspace=header.colorspace,
            pixels=rgba.tobytes(),
        )
