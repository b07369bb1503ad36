from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import click

from sqlite3_vec.config import MEMORY_DATABASE, DatabaseConfig

if TYPE_CHECKING:
    from click import Group

__all__ = ("get_sqlite3_vec_group", "main")


def _in_memory_config(backend: str, extension: Optional[Path], debug: bool) -> DatabaseConfig:
    """Environment-driven config pinned to an in-memory database on ``backend``."""
    overrides: dict[str, Any] = {"backend": backend, "database": MEMORY_DATABASE, "directory": None}
    if extension is not None:
        overrides["load_extension"] = extension
    if debug:
        overrides["debug"] = True
    return DatabaseConfig.from_env(**overrides)


def get_sqlite3_vec_group() -> "Group":
    """Get the sqlite3-vec CLI group.

    Returns:
        The sqlite3-vec CLI group.
    """
    from rich import get_console

    console = get_console()

    @click.group(name="sqlite3-vec")
    @click.option("--debug", help="Emit diagnostic events to stderr.", is_flag=True, default=False)
    @click.pass_context
    def sqlite3_vec_group(ctx: "click.Context", debug: bool) -> None:
        """sqlite-vec for Python's sqlite3 and aiosqlite."""
        ctx.ensure_object(dict)
        ctx.obj["debug"] = debug

    backend_option = click.option(
        "--backend",
        help="Backend to open the database with.",
        type=click.Choice(["sqlite", "aiosqlite"]),
        default="sqlite",
        show_default=True,
    )
    extension_option = click.option(
        "--extension",
        help="Explicit path to the sqlite-vec loadable extension.",
        type=click.Path(path_type=Path),
        default=None,
    )

    @sqlite3_vec_group.command(name="info", help="Show platform details and the extension that would be loaded.")
    @backend_option
    @extension_option
    @click.pass_context
    def info(ctx: "click.Context", backend: str, extension: Optional[Path]) -> None:  # pyright: ignore[reportUnusedFunction]
        """Show platform details and library versions."""
        from anyio import run
        from rich.table import Table

        from sqlite3_vec.core.result import VersionInfo
        from sqlite3_vec.database import open_database
        from sqlite3_vec.extension import lib_extension, platform_triple, resolve_native_extension_path

        config = _in_memory_config(backend, extension, ctx.obj["debug"])
        resolved = resolve_native_extension_path(config.load_extension or None, config.extension_dir)

        async def _versions() -> "VersionInfo":
            async with await open_database(config) as db:
                return await db.versions()

        lib_version, vec_version = run(_versions)

        table = Table(show_header=False, box=None)
        table.add_row("Platform", platform_triple())
        table.add_row("Library extension", lib_extension())
        table.add_row("Extension", f"{resolved.path} ({resolved.source})" if resolved else "[red]not found[/]")
        table.add_row("Backend", backend)
        table.add_row("SQLite", lib_version)
        table.add_row("sqlite-vec", vec_version or "[yellow]not loaded[/]")
        console.print(table)

    @sqlite3_vec_group.command(name="locate", help="Find a prebuilt extension binary in a directory.")
    @click.argument("directory", type=click.Path(path_type=Path, file_okay=False), required=False, default=None)
    @click.pass_context
    def locate(ctx: "click.Context", directory: Optional[Path]) -> None:  # pyright: ignore[reportUnusedFunction]
        """Print the located prebuilt binary, exiting 1 when there is none."""
        from sqlite3_vec.extension import DEFAULT_EXTENSION_DIR, find_local_prebuilt

        search_dir = directory if directory is not None else Path.cwd() / DEFAULT_EXTENSION_DIR
        found = find_local_prebuilt(search_dir)
        if found is None:
            console.print(f"[red]No sqlite-vec binary found in {search_dir}[/]")
            ctx.exit(1)
        console.print(found, highlight=False, soft_wrap=True)

    @sqlite3_vec_group.command(name="smoke", help="Open an in-memory database and round-trip rows and a blob.")
    @backend_option
    @extension_option
    @click.pass_context
    def smoke(ctx: "click.Context", backend: str, extension: Optional[Path]) -> None:  # pyright: ignore[reportUnusedFunction]
        """Insert and read back a row and a 12-byte blob through the unified statement API."""
        from anyio import run

        from sqlite3_vec.database import open_database

        config = _in_memory_config(backend, extension, ctx.obj["debug"])
        payload = bytes(range(12))

        async def _smoke() -> "tuple[list[dict[str, object]], Optional[bytes], Optional[str]]":
            async with await open_database(config) as db:
                await db.exec("CREATE TABLE t(a, b); CREATE TABLE blobs(id INTEGER PRIMARY KEY, data BLOB)")
                insert = await db.prepare("INSERT INTO t VALUES (?1, ?2)", "insert")
                await insert.run([1, 2])
                rows = await (await db.prepare("SELECT a, b FROM t", "select")).all([])
                await (await db.prepare("INSERT INTO blobs(data) VALUES (?)", "blob")).run([bytearray(payload)])
                row = await (await db.prepare("SELECT data FROM blobs", "read_blob")).get()
                versions = await db.versions()
                return rows, row["data"] if row else None, versions.vec_version

        console.rule(f"[yellow]Smoke test ({backend})[/]", align="left")
        rows, blob, vec_version = run(_smoke)
        if rows != [{"a": 1, "b": 2}] or blob != payload:
            console.rule("[red bold]Smoke test failed", style="red", align="left")
            console.print(f"rows={rows!r} blob={blob!r}")
            ctx.exit(1)
        console.print(f"rows: {rows}")
        console.print(f"blob: {len(blob)} bytes")
        console.print(f"sqlite-vec: {vec_version or 'not loaded'}")
        console.rule("[green bold]Smoke test passed", align="left")

    return sqlite3_vec_group


def main() -> None:
    get_sqlite3_vec_group()(obj={})
