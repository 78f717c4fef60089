"""Storage adapters."""

from .filesystem import (
    FilesystemStorage,
    ThumbnailFlavor,
    path_for_uri,
    resolve_source,
    thumbnail_name,
    uri_for_path,
)

__all__ = [
    "FilesystemStorage",
    "ThumbnailFlavor",
    "path_for_uri",
    "resolve_source",
    "thumbnail_name",
    "uri_for_path",
]
