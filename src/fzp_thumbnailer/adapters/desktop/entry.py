"""Thumbnailer entry and shared-mime-info registration."""

import logging
import shutil
import subprocess
from pathlib import Path
from xml.etree import ElementTree as ET

from ...domain.models import MIME_TYPE
from ..storage.filesystem import APP_NAME

logger = logging.getLogger(__name__)

MIME_NS = "http://www.freedesktop.org/standards/shared-mime-info"
MIME_COMMENT = "Fuzzpaint document"
MIME_GLOB = "*.fzp"

ET.register_namespace("", MIME_NS)


def _tag(name: str) -> str:
    return f"{{{MIME_NS}}}{name}"


def entry_path(data_home: Path) -> Path:
    return data_home / "thumbnailers" / f"{APP_NAME}.thumbnailer"


def mime_package_path(data_home: Path) -> Path:
    return data_home / "mime" / "packages" / f"{APP_NAME}.xml"


def build_thumbnailer_entry(exec_name: str = APP_NAME) -> str:
    """Build the .thumbnailer key file.

    Exec arguments: %i input path, %s size, %o output path, %u input URI.
    """
    return (
        "[Thumbnailer Entry]\n"
        f"TryExec={exec_name}\n"
        f"Exec={exec_name} thumbnail %i %s %o %u\n"
        f"MimeType={MIME_TYPE};\n"
    )


def build_mime_package() -> str:
    """Build the shared-mime-info package declaring the fzp type."""
    root = ET.Element(_tag("mime-info"))
    mime_type = ET.SubElement(root, _tag("mime-type"), type=MIME_TYPE)
    ET.SubElement(mime_type, _tag("comment")).text = MIME_COMMENT

    # RIFF at 0, form type at 8
    magic = ET.SubElement(mime_type, _tag("magic"), priority="50")
    riff = ET.SubElement(
        magic, _tag("match"), type="string", value="RIFF", offset="0"
    )
    ET.SubElement(riff, _tag("match"), type="string", value="fzp ", offset="8")

    ET.SubElement(mime_type, _tag("glob"), pattern=MIME_GLOB)

    ET.indent(root)
    xml_str = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{xml_str}\n'


def update_mime_database(data_home: Path) -> bool:
    """Run update-mime-database if available.

    Returns True if the database was updated.
    """
    tool = shutil.which("update-mime-database")
    if tool is None:
        logger.warning("update-mime-database not found, skipping MIME refresh")
        return False
    subprocess.run([tool, str(data_home / "mime")], check=True)
    return True


def install_desktop_files(data_home: Path, exec_name: str = APP_NAME) -> list[Path]:
    """Write the thumbnailer entry and MIME package under data_home."""
    written = []
    for path, content in (
        (entry_path(data_home), build_thumbnailer_entry(exec_name)),
        (mime_package_path(data_home), build_mime_package()),
    ):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info(f"Installed: {path}")
        written.append(path)
    return written


def uninstall_desktop_files(data_home: Path) -> list[Path]:
    """Remove installed desktop files. Returns the paths removed."""
    removed = []
    for path in (entry_path(data_home), mime_package_path(data_home)):
        if path.exists():
            path.unlink()
            logger.info(f"Removed: {path}")
            removed.append(path)
    return removed
