"""Metadata for the Project."""

from importlib.metadata import PackageNotFoundError, metadata, version

__all__ = ("__project__", "__version__")

try:
    __version__ = version("sqlite3-vec")
    __project__ = metadata("sqlite3-vec")["Name"]
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
    __project__ = "sqlite3-vec"
finally:
    del version, PackageNotFoundError, metadata
