"""Locate a loadable sqlite-vec binary on disk."""

import os
import re
from pathlib import Path
from typing import TYPE_CHECKING, Final, Literal, NamedTuple, Optional, Union

import sqlite_vec

from sqlite3_vec.extension.platform import lib_extension, platform_triple
from sqlite3_vec.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlite3_vec.utils.logging import Diagnostics

__all__ = (
    "DEFAULT_EXTENSION_DIR",
    "ExtensionPath",
    "find_local_prebuilt",
    "packaged_extension_path",
    "preferred_filename",
    "resolve_native_extension_path",
)

logger = get_logger("extension.locator")

DEFAULT_EXTENSION_DIR: Final[Path] = Path("dist") / "native"
_CANDIDATE_PATTERN: Final = re.compile(r"sqlite-vec.*\.(so|dylib|dll)$", re.IGNORECASE)

ExtensionSource = Literal["explicit", "prebuilt", "package"]


class ExtensionPath(NamedTuple):
    """A resolved extension path and where it came from."""

    path: str
    source: ExtensionSource

    @property
    def explicit(self) -> bool:
        return self.source == "explicit"


def preferred_filename(triple: Optional[str] = None, extension: Optional[str] = None) -> str:
    """Return ``sqlite-vec-<triple>.<ext>`` for the running platform."""
    return f"sqlite-vec-{triple or platform_triple()}.{extension or lib_extension()}"


def find_local_prebuilt(
    search_dir: "Union[str, os.PathLike[str]]", triple: Optional[str] = None, extension: Optional[str] = None
) -> Optional[str]:
    """Find the best matching prebuilt extension in ``search_dir``.

    An exact ``sqlite-vec-<triple>.<ext>`` match wins; otherwise the first
    entry (in sorted order) matching ``sqlite-vec*.{so,dylib,dll}`` is
    returned. Subdirectories are not searched.

    Args:
        search_dir: Directory to scan.
        triple: Override for the platform triple.
        extension: Override for the library extension.

    Returns:
        Full path to the file, or None when nothing matches or the directory does not exist.
    """
    directory = Path(search_dir)
    if not directory.is_dir():
        return None
    entries = sorted(entry.name for entry in directory.iterdir() if entry.is_file())
    preferred = preferred_filename(triple, extension)
    if preferred in entries:
        return str(directory / preferred)
    for name in entries:
        if _CANDIDATE_PATTERN.search(name):
            return str(directory / name)
    return None


def packaged_extension_path() -> str:
    """Return the loadable path shipped inside the ``sqlite-vec`` wheel.

    The path has no file suffix; SQLite appends the platform suffix when loading.
    """
    return sqlite_vec.loadable_path()


def resolve_native_extension_path(
    override: "Union[str, os.PathLike[str], None]" = None,
    search_dir: "Union[str, os.PathLike[str], None]" = None,
    *,
    use_package: bool = True,
    diagnostics: "Optional[Diagnostics]" = None,
) -> Optional[ExtensionPath]:
    """Resolve the extension binary to load.

    Resolution order: ``override`` (bypasses the locator), a local prebuilt
    in ``search_dir`` (default ``<cwd>/dist/native``), then the binary
    packaged with ``sqlite-vec``.
    """
    if override:
        resolved = ExtensionPath(os.fspath(override), "explicit")
    else:
        directory = Path(search_dir) if search_dir is not None else Path.cwd() / DEFAULT_EXTENSION_DIR
        local = find_local_prebuilt(directory)
        if local is not None:
            resolved = ExtensionPath(local, "prebuilt")
        elif use_package:
            resolved = ExtensionPath(packaged_extension_path(), "package")
        else:
            logger.debug("No sqlite-vec extension found in %s", directory)
            return None
    if diagnostics is not None:
        diagnostics.emit("extension.resolve", path=resolved.path, source=resolved.source)
    return resolved
