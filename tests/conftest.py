"""Shared test fixtures."""

import struct
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fzp_thumbnailer.domain.models import ColorSpace, PreviewImage
from fzp_thumbnailer.ports.document import DocumentPort
from fzp_thumbnailer.ports.image import DecoderPort, RendererPort
from fzp_thumbnailer.ports.storage import StoragePort

QOI_END = b"\x00" * 7 + b"\x01"


def encode_qoi(
    width: int,
    height: int,
    pixels: bytes | None = None,
    channels: int = 4,
    colorspace: int = 0,
) -> bytes:
    """Minimal QOI encoder: one QOI_OP_RGBA per pixel."""
    if pixels is None:
        pixels = bytes([200, 100, 50, 255]) * (width * height)
    header = struct.pack(">4sIIBB", b"qoif", width, height, channels, colorspace)
    body = bytearray()
    for i in range(0, len(pixels), 4):
        body.append(0xFF)
        body += pixels[i : i + 4]
    return header + bytes(body) + QOI_END


def encode_fzp(chunks: list[tuple[bytes, bytes]], declared: int | None = None) -> bytes:
    """Wrap chunks in an fzp RIFF container."""
    body = b"fzp " + b"".join(
        cid + struct.pack("<I", len(data)) + data for cid, data in chunks
    )
    size = len(body) if declared is None else declared
    return b"RIFF" + struct.pack("<I", size) + body


@pytest.fixture
def make_qoi() -> Callable[..., bytes]:
    return encode_qoi


@pytest.fixture
def make_fzp() -> Callable[..., bytes]:
    return encode_fzp


@pytest.fixture
def sample_document(tmp_path: Path) -> Path:
    """fzp document with a LIST chunk followed by a 64x32 preview."""
    path = tmp_path / "drawing.fzp"
    path.write_bytes(
        encode_fzp(
            [
                (b"LIST", b"INFOISFT\x05\x00\x00\x00fuzz\x00"),
                (b"thmb", encode_qoi(64, 32)),
                (b"DOCV", b"\x00" * 16),
            ]
        )
    )
    return path


@pytest.fixture
def sample_preview() -> PreviewImage:
    return PreviewImage(
        width=4,
        height=2,
        colorspace=ColorSpace.SRGB,
        pixels=bytes([10, 20, 30, 255]) * 8,
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config pointing cache and data dirs into tmp_path."""
    path = tmp_path / "config.toml"
    path.write_text(
        "[cache]\n"
        f'directory = "{tmp_path / "cache" / "thumbnails"}"\n'
        "\n"
        "[desktop]\n"
        f'data_home = "{tmp_path / "share"}"\n'
    )
    return path


@pytest.fixture
def mock_document() -> MagicMock:
    """Mock document port."""
    return MagicMock(spec=DocumentPort)


@pytest.fixture
def mock_decoder(sample_preview: PreviewImage) -> MagicMock:
    """Mock decoder port."""
    mock = MagicMock(spec=DecoderPort)
    mock.decode.return_value = sample_preview
    return mock


@pytest.fixture
def mock_renderer() -> MagicMock:
    """Mock renderer port."""
    mock = MagicMock(spec=RendererPort)
    mock.render.return_value = (b"\x89PNG thumbnail", (4, 2))
    mock.render_failure.return_value = b"\x89PNG failure"
    return mock


@pytest.fixture
def mock_storage(tmp_path: Path) -> MagicMock:
    """Mock storage port."""
    mock = MagicMock(spec=StoragePort)
    mock.write.side_effect = lambda dest, data: dest
    mock.cache_path.return_value = tmp_path / "cache" / "normal" / "abc.png"
    mock.write_failure.return_value = tmp_path / "cache" / "fail" / "abc.png"
    mock.clear_failure.return_value = False
    return mock
