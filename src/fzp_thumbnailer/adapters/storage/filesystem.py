"""Storage adapter writing thumbnails to the local filesystem.

Cache layout follows the freedesktop.org thumbnail specification::

    $XDG_CACHE_HOME/thumbnails/<flavor>/<md5 of URI>.png
    $XDG_CACHE_HOME/thumbnails/fail/<app>/<md5 of URI>.png
"""

import hashlib
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from urllib.parse import unquote, urlparse

from PIL import Image

from ...ports.storage import StoragePort

logger = logging.getLogger(__name__)

APP_NAME = "fuzzpaint-thumbnailer"
DIR_MODE = 0o700


class ThumbnailFlavor(str, Enum):
    """XDG thumbnail size classes."""

    NORMAL = "normal"
    LARGE = "large"
    X_LARGE = "x-large"
    XX_LARGE = "xx-large"

    @property
    def pixels(self) -> int:
        return FLAVOR_SIZES[self]

    @classmethod
    def for_size(cls, size: int) -> "ThumbnailFlavor":
        """Smallest flavor that holds a thumbnail of `size` pixels."""
        for flavor in cls:
            if size <= flavor.pixels:
                return flavor
        return cls.XX_LARGE


FLAVOR_SIZES = {
    ThumbnailFlavor.NORMAL: 128,
    ThumbnailFlavor.LARGE: 256,
    ThumbnailFlavor.X_LARGE: 512,
    ThumbnailFlavor.XX_LARGE: 1024,
}


def uri_for_path(path: Path) -> str:
    """Canonical file:// URI for a local path."""
    return path.expanduser().resolve().as_uri()


def path_for_uri(uri: str) -> Path:
    """Local path for a file:// URI."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Unsupported URI scheme: {parsed.scheme or uri}")
    if parsed.netloc not in ("", "localhost"):
        raise ValueError(f"Remote file URIs are not supported: {uri}")
    return Path(unquote(parsed.path))


def resolve_source(arg: str) -> tuple[Path, str]:
    """Accept a path or file:// URI, return (path, URI).

    Anything with a URI scheme goes through path_for_uri, so non-file
    schemes raise ValueError instead of being read as relative paths.
    """
    # Single letters are drive names, not schemes
    if len(urlparse(arg).scheme) > 1:
        return path_for_uri(arg), arg
    path = Path(arg)
    return path, uri_for_path(path)


def thumbnail_name(uri: str) -> str:
    """Thumbnail filename: MD5 hex digest of the URI."""
    return hashlib.md5(uri.encode("utf-8")).hexdigest() + ".png"


def read_thumbnail_mtime(path: Path) -> int | None:
    """Read Thumb::MTime from an existing thumbnail, if any."""
    try:
        with Image.open(path, formats=["PNG"]) as img:
            value = img.text.get("Thumb::MTime")
    except OSError:
        return None
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid Thumb::MTime in {path.name}: {value!r}")
        return None


class FilesystemStorage(StoragePort):
    """Storage implementation using the XDG thumbnail cache."""

    def __init__(self, cache_dir: Path, app_name: str = APP_NAME) -> None:
        self.cache_dir = cache_dir
        self.app_name = app_name

    def write(self, dest: Path, data: bytes) -> Path:
        """Write atomically: temp file in the target directory, then rename."""
        dest.parent.mkdir(parents=True, exist_ok=True, mode=DIR_MODE)

        # mkstemp creates the file with mode 0600, as XDG requires
        tmp = tempfile.NamedTemporaryFile(
            dir=dest.parent, prefix=".", suffix=".png", delete=False
        )
        tmp_path = Path(tmp.name)
        try:
            with tmp:
                tmp.write(data)
            os.replace(tmp_path, dest)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

        logger.debug(f"Wrote thumbnail: {dest}")
        return dest

    def flavor_path(self, uri: str, flavor: ThumbnailFlavor) -> Path:
        return self.cache_dir / flavor.value / thumbnail_name(uri)

    def cache_path(self, uri: str, size: int) -> Path:
        return self.flavor_path(uri, ThumbnailFlavor.for_size(size))

    def failure_path(self, uri: str) -> Path:
        return self.cache_dir / "fail" / self.app_name / thumbnail_name(uri)

    def write_failure(self, uri: str, data: bytes) -> Path:
        dest = self.write(self.failure_path(uri), data)
        logger.info(f"Recorded failure: {dest.name}")
        return dest

    def clear_failure(self, uri: str) -> bool:
        path = self.failure_path(uri)
        if not path.exists():
            return False
        path.unlink()
        logger.info(f"Cleared failure: {path.name}")
        return True

    def is_current(self, path: Path, mtime: int) -> bool:
        """Check whether a thumbnail exists and matches the document mtime."""
        if not path.exists():
            return False
        return read_thumbnail_mtime(path) == mtime
