"""Domain models."""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path

MIME_TYPE = "application/x.fuzzpaint-doc"


class ColorSpace(IntEnum):
    """Colorspace tag stored in the preview header."""

    SRGB = 0  # sRGB color, linear alpha
    LINEAR = 1


@dataclass
class PreviewImage:
    """Decoded preview, always 8-bit RGBA."""

    width: int
    height: int
    colorspace: ColorSpace
    pixels: bytes

    def __post_init__(self) -> None:
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(
                f"Pixel buffer is {len(self.pixels)} bytes, expected {expected}"
            )


@dataclass
class ThumbnailMetadata:
    """XDG attributes describing the document a thumbnail belongs to."""

    uri: str
    mtime: int  # Seconds since epoch
    size: int | None = None  # Document size in bytes
    mimetype: str = MIME_TYPE


@dataclass
class ThumbnailResult:
    """Result of a thumbnailing run."""

    source: Path
    uri: str | None = None
    output_path: Path | None = None
    width: int = 0
    height: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0 and self.output_path is not None
