"""Locating and loading the sqlite-vec loadable extension."""

from sqlite3_vec.extension.loader import ENTRY_POINTS, has_async_loader, has_sync_loader, load_extension
from sqlite3_vec.extension.locator import (
    DEFAULT_EXTENSION_DIR,
    ExtensionPath,
    find_local_prebuilt,
    packaged_extension_path,
    preferred_filename,
    resolve_native_extension_path,
)
from sqlite3_vec.extension.platform import detect_libc, lib_extension, platform_triple

__all__ = (
    "DEFAULT_EXTENSION_DIR",
    "ENTRY_POINTS",
    "ExtensionPath",
    "detect_libc",
    "find_local_prebuilt",
    "has_async_loader",
    "has_sync_loader",
    "lib_extension",
    "load_extension",
    "packaged_extension_path",
    "platform_triple",
    "preferred_filename",
    "resolve_native_extension_path",
)
