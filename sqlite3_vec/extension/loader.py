"""Load a sqlite-vec binary into an open connection."""

import os
from typing import TYPE_CHECKING, Any, Final, Optional, Union

from sqlite3_vec.exceptions import ExtensionLoadError, UnsupportedCapabilityError
from sqlite3_vec.utils.logging import Diagnostics

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

__all__ = ("ENTRY_POINTS", "has_async_loader", "has_sync_loader", "load_extension")

ENTRY_POINTS: Final[tuple[str, ...]] = ("sqlite3_extension_init", "sqlite3_sqlitevec_init", "sqlite3_vec_init")
"""Initialization symbols tried in order before falling back to filename-derived resolution."""


def has_sync_loader(connection: Any) -> bool:
    return callable(getattr(connection, "load_extension", None))


def has_async_loader(connection: Any) -> bool:
    return callable(getattr(connection, "load_extension_async", None))


async def load_extension(
    connection: Any,
    path: "Union[str, os.PathLike[str]]",
    debug: bool = False,
    *,
    diagnostics: "Optional[Diagnostics]" = None,
) -> Optional[str]:
    """Load the extension at ``path`` into ``connection``.

    Each name in ``ENTRY_POINTS`` is tried in order; the first success stops
    the search. If all fail, one last attempt lets SQLite derive the entry
    point from the file name. A connection exposing a synchronous
    ``load_extension(path, entrypoint=None)`` is preferred over one exposing
    ``load_extension_async(path, entrypoint=None)``.

    Args:
        connection: Connection exposing ``load_extension`` or ``load_extension_async``.
        path: Extension binary to load.
        debug: Emit diagnostic events even when no ``diagnostics`` is supplied.
        diagnostics: Diagnostic event sink.

    Raises:
        UnsupportedCapabilityError: The connection cannot load extensions at all.
        ExtensionLoadError: Every attempt failed. The last failure is the ``__cause__``.

    Returns:
        The entry point that succeeded, or None when the filename-derived attempt succeeded.
    """
    diag = diagnostics or Diagnostics(enabled=debug)
    ext_path = os.fspath(path)

    if has_sync_loader(connection):
        sync_loader: Callable[..., Any] = connection.load_extension

        async def _load(entrypoint: Optional[str]) -> None:
            if entrypoint is None:
                sync_loader(ext_path)
            else:
                sync_loader(ext_path, entrypoint=entrypoint)

    elif has_async_loader(connection):
        async_loader: Callable[..., Awaitable[Any]] = connection.load_extension_async

        async def _load(entrypoint: Optional[str]) -> None:
            if entrypoint is None:
                await async_loader(ext_path)
            else:
                await async_loader(ext_path, entrypoint=entrypoint)

    else:
        raise UnsupportedCapabilityError

    diag.emit("extension.load", path=ext_path)
    for entrypoint in ENTRY_POINTS:
        try:
            await _load(entrypoint)
        except UnsupportedCapabilityError:
            raise
        except Exception as e:  # noqa: BLE001
            diag.emit("extension.entrypoint_failed", path=ext_path, entrypoint=entrypoint, error=str(e))
            continue
        diag.emit("extension.loaded", path=ext_path, entrypoint=entrypoint)
        return entrypoint

    try:
        await _load(None)
    except UnsupportedCapabilityError:
        raise
    except Exception as e:
        raise ExtensionLoadError(ext_path, f"Failed to load sqlite-vec extension ({e})") from e
    diag.emit("extension.loaded", path=ext_path, entrypoint=None)
    return None
