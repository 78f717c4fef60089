"""Thumbnail renderer using Pillow."""

import io
import logging

from PIL import Image
from PIL.PngImagePlugin import PngInfo

from ...domain.models import ColorSpace, PreviewImage, ThumbnailMetadata
from ...ports.image import RendererPort

logger = logging.getLogger(__name__)

SOFTWARE = "Fuzzpaint"
SRGB_PERCEPTUAL = 0  # sRGB chunk rendering intent


def fit_within(
    width: int, height: int, size: int, upscale: bool = True
) -> tuple[int, int]:
    """Fit width x height into a size x size square, keeping aspect ratio.

    The longer side becomes exactly ``size``; the shorter side is rounded
    up, so it is never zero. With ``upscale`` off, images that already fit
    keep their dimensions.
    """
    longest = max(width, height)
    if not upscale and longest <= size:
        return width, height
    if width >= height:
        return size, -(-height * size // width)
    return -(-width * size // height), size


class PillowRenderer(RendererPort):
    """Renderer implementation producing XDG-compliant RGBA PNGs."""

    def __init__(
        self,
        software: str = SOFTWARE,
        compress_level: int = 9,
        upscale: bool = True,
    ) -> None:
        self.software = software
        self.compress_level = compress_level
        self.upscale = upscale

    def _base_info(self, metadata: ThumbnailMetadata) -> PngInfo:
        info = PngInfo()
        info.add_text("Software", self.software)
        info.add_text("Thumb::URI", metadata.uri)
        info.add_text("Thumb::MTime", str(metadata.mtime))
        return info

    def _encode(self, img: Image.Image, info: PngInfo) -> bytes:
        buf = io.BytesIO()
        img.save(buf, format="PNG", pnginfo=info, compress_level=self.compress_level)
        return buf.getvalue()

    def render(
        self, image: PreviewImage, size: int, metadata: ThumbnailMetadata
    ) -> tuple[bytes, tuple[int, int]]:
        img = Image.frombytes("RGBA", (image.width, image.height), image.pixels)

        dims = fit_within(image.width, image.height, size, upscale=self.upscale)
        if dims != img.size:
            logger.debug(f"Scaling {img.width}x{img.height} -> {dims[0]}x{dims[1]}")
            img = img.resize(dims, Image.Resampling.BILINEAR)

        info = self._base_info(metadata)
        info.add_text("Thumb::Mimetype", metadata.mimetype)
        if metadata.size is not None:
            info.add_text("Thumb::Size", str(metadata.size))
        if image.colorspace == ColorSpace.SRGB:
            info.add(b"sRGB", bytes([SRGB_PERCEPTUAL]))

        return self._encode(img, info), dims

    def render_failure(self, metadata: ThumbnailMetadata) -> bytes:
        img = Image.new("RGBA", (1, 1), (0, 0, 0, 0))
        return self._encode(img, self._base_info(metadata))
