from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sqlite3_vec.extension.locator import (
    ExtensionPath,
    find_local_prebuilt,
    preferred_filename,
    resolve_native_extension_path,
)


def _touch(directory: Path, *names: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(b"\x7fELF")


def test_preferred_filename() -> None:
    assert preferred_filename("linux-x64-gnu", "so") == "sqlite-vec-linux-x64-gnu.so"


def test_exact_triple_match(tmp_path: Path) -> None:
    _touch(tmp_path, "sqlite-vec-linux-x64-gnu.so")
    found = find_local_prebuilt(tmp_path, triple="linux-x64-gnu", extension="so")
    assert found == str(tmp_path / "sqlite-vec-linux-x64-gnu.so")


def test_foreign_binary_is_returned_as_loosest_fallback(tmp_path: Path) -> None:
    _touch(tmp_path, "sqlite-vec-darwin-arm64.dylib")
    found = find_local_prebuilt(tmp_path, triple="linux-x64-gnu", extension="so")
    assert found == str(tmp_path / "sqlite-vec-darwin-arm64.dylib")


def test_exact_match_wins_over_earlier_candidates(tmp_path: Path) -> None:
    _touch(tmp_path, "sqlite-vec-darwin-arm64.dylib", "sqlite-vec-linux-x64-gnu.so")
    found = find_local_prebuilt(tmp_path, triple="linux-x64-gnu", extension="so")
    assert found == str(tmp_path / "sqlite-vec-linux-x64-gnu.so")


def test_unrelated_files_and_directories_are_ignored(tmp_path: Path) -> None:
    _touch(tmp_path, "README.md", "libother.so", "sqlite-vec.txt")
    (tmp_path / "sqlite-vec-linux-x64-gnu.so").mkdir()
    assert find_local_prebuilt(tmp_path, triple="linux-x64-gnu", extension="so") is None


def test_missing_directory(tmp_path: Path) -> None:
    assert find_local_prebuilt(tmp_path / "absent") is None


def test_explicit_override_bypasses_locator(tmp_path: Path) -> None:
    _touch(tmp_path, "sqlite-vec-linux-x64-gnu.so")
    with patch("sqlite3_vec.extension.locator.find_local_prebuilt") as locate:
        resolved = resolve_native_extension_path("/opt/vec0.so", tmp_path)
    locate.assert_not_called()
    assert resolved == ExtensionPath("/opt/vec0.so", "explicit")
    assert resolved.explicit


def test_local_prebuilt_before_package(tmp_path: Path) -> None:
    _touch(tmp_path, "sqlite-vec-anything.so")
    with patch("sqlite3_vec.extension.locator.packaged_extension_path") as packaged:
        resolved = resolve_native_extension_path(None, tmp_path)
    packaged.assert_not_called()
    assert resolved == ExtensionPath(str(tmp_path / "sqlite-vec-anything.so"), "prebuilt")


def test_falls_back_to_packaged_binary(tmp_path: Path) -> None:
    with patch("sqlite3_vec.extension.locator.packaged_extension_path", return_value="/site/sqlite_vec/vec0"):
        resolved = resolve_native_extension_path(None, tmp_path)
    assert resolved == ExtensionPath("/site/sqlite_vec/vec0", "package")
    assert not resolved.explicit


def test_nothing_found_without_package(tmp_path: Path) -> None:
    assert resolve_native_extension_path(None, tmp_path, use_package=False) is None


@pytest.mark.parametrize("override", [None, "/explicit/vec0.so"])
def test_resolution_emits_diagnostic(tmp_path: Path, override: "str | None") -> None:
    diagnostics = MagicMock()
    with patch("sqlite3_vec.extension.locator.packaged_extension_path", return_value="/pkg/vec0"):
        resolved = resolve_native_extension_path(override, tmp_path, diagnostics=diagnostics)
    assert resolved is not None
    diagnostics.emit.assert_called_once_with("extension.resolve", path=resolved.path, source=resolved.source)
