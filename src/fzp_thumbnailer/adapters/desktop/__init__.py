"""Desktop integration adapters."""

from .entry import (
    build_mime_package,
    build_thumbnailer_entry,
    install_desktop_files,
    uninstall_desktop_files,
    update_mime_database,
)

__all__ = [
    "build_mime_package",
    "build_thumbnailer_entry",
    "install_desktop_files",
    "uninstall_desktop_files",
    "update_mime_database",
]
