"""Unit tests for desktop integration."""

from pathlib import Path
from unittest.mock import patch
from xml.etree import ElementTree as ET

from fzp_thumbnailer.adapters.desktop.entry import (
    MIME_NS,
    build_mime_package,
    build_thumbnailer_entry,
    entry_path,
    install_desktop_files,
    mime_package_path,
    uninstall_desktop_files,
    update_mime_database,
)


def _find(elem: ET.Element, path: str) -> ET.Element:
    found = elem.find(path, {"m": MIME_NS})
    assert found is not None, f"{path} not found"
    return found


class TestThumbnailerEntry:
    """Tests for build_thumbnailer_entry."""

    def test_default_entry(self) -> None:
        assert build_thumbnailer_entry() == (
            "[Thumbnailer Entry]\n"
            "TryExec=fuzzpaint-thumbnailer\n"
            "Exec=fuzzpaint-thumbnailer thumbnail %i %s %o %u\n"
            "MimeType=application/x.fuzzpaint-doc;\n"
        )

    def test_custom_exec(self) -> None:
        entry = build_thumbnailer_entry("/opt/bin/fzp-thumb")
        assert "TryExec=/opt/bin/fzp-thumb\n" in entry
        assert "Exec=/opt/bin/fzp-thumb thumbnail %i %s %o %u\n" in entry


class TestMimePackage:
    """Tests for build_mime_package."""

    def test_declaration(self) -> None:
        xml = build_mime_package()
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')

    def test_mime_type(self) -> None:
        root = ET.fromstring(build_mime_package().split("\n", 1)[1])
        assert root.tag == f"{{{MIME_NS}}}mime-info"
        mime_type = _find(root, "m:mime-type")
        assert mime_type.get("type") == "application/x.fuzzpaint-doc"
        assert _find(mime_type, "m:glob").get("pattern") == "*.fzp"

    def test_magic_matches_riff_and_form_type(self) -> None:
        root = ET.fromstring(build_mime_package().split("\n", 1)[1])
        riff = _find(root, "m:mime-type/m:magic/m:match")
        assert (riff.get("value"), riff.get("offset")) == ("RIFF", "0")
        form = _find(riff, "m:match")
        assert (form.get("value"), form.get("offset")) == ("fzp ", "8")

    def test_default_namespace(self) -> None:
        assert "ns0:" not in build_mime_package()


class TestInstall:
    """Tests for install/uninstall."""

    def test_install_writes_files(self, tmp_path: Path) -> None:
        written = install_desktop_files(tmp_path)
        assert written == [entry_path(tmp_path), mime_package_path(tmp_path)]
        assert entry_path(tmp_path) == (
            tmp_path / "thumbnailers" / "fuzzpaint-thumbnailer.thumbnailer"
        )
        assert "Exec=" in entry_path(tmp_path).read_text()
        assert "*.fzp" in mime_package_path(tmp_path).read_text()

    def test_install_is_idempotent(self, tmp_path: Path) -> None:
        install_desktop_files(tmp_path)
        install_desktop_files(tmp_path)
        assert entry_path(tmp_path).exists()

    def test_uninstall_removes_files(self, tmp_path: Path) -> None:
        install_desktop_files(tmp_path)
        removed = uninstall_desktop_files(tmp_path)
        assert len(removed) == 2
        assert not entry_path(tmp_path).exists()
        assert not mime_package_path(tmp_path).exists()

    def test_uninstall_when_not_installed(self, tmp_path: Path) -> None:
        assert uninstall_desktop_files(tmp_path) == []


class TestUpdateMimeDatabase:
    """Tests for update_mime_database."""

    def test_skips_when_tool_missing(self, tmp_path: Path) -> None:
        with (
            patch("fzp_thumbnailer.adapters.desktop.entry.shutil.which", return_value=None),
            patch("fzp_thumbnailer.adapters.desktop.entry.subprocess.run") as run,
        ):
            assert update_mime_database(tmp_path) is False
            run.assert_not_called()

    def test_runs_tool(self, tmp_path: Path) -> None:
        with (
            patch(
                "fzp_thumbnailer.adapters.desktop.entry.shutil.which",
                return_value="/usr/bin/update-mime-database",
            ),
            patch("fzp_thumbnailer.adapters.desktop.entry.subprocess.run") as run,
        ):
            assert update_mime_database(tmp_path) is True
            run.assert_called_once_with(
                ["/usr/bin/update-mime-database", str(tmp_path / "mime")], check=True
            )
