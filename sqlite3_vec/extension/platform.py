"""Platform identity used to name prebuilt extension assets.

Asset names follow ``sqlite-vec-<triple>.<ext>`` where the triple is one of
``darwin-<arch>``, ``win32-<arch>``, ``linux-<arch>-<libc>`` or
``<os>-<arch>`` for anything else.
"""

import glob
import platform
from typing import Final, Literal, Optional

__all__ = ("detect_libc", "lib_extension", "normalize_arch", "normalize_os", "platform_triple")

LibC = Literal["gnu", "musl"]

_ARCH_ALIASES: Final[dict[str, str]] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
}
_OS_ALIASES: Final[dict[str, str]] = {"darwin": "darwin", "windows": "win32", "linux": "linux"}
_MUSL_LOADER_GLOB: Final[str] = "/lib/ld-musl-*.so.1"


def normalize_os(system: Optional[str] = None) -> str:
    """Return the OS component of the triple (``darwin``, ``win32``, ``linux`` or the raw name)."""
    name = (system if system is not None else platform.system()).lower()
    if name.startswith(("cygwin", "msys", "mingw")):
        return "win32"
    return _OS_ALIASES.get(name, name)


def normalize_arch(machine: Optional[str] = None) -> str:
    """Return the architecture component of the triple."""
    name = (machine if machine is not None else platform.machine()).lower()
    return _ARCH_ALIASES.get(name, name)


def detect_libc() -> LibC:
    """Best-effort C library probe for Linux; any failure answers ``gnu``."""
    try:
        libc_name, _ = platform.libc_ver()
        if libc_name == "glibc":
            return "gnu"
        if libc_name == "musl" or glob.glob(_MUSL_LOADER_GLOB):
            return "musl"
    except Exception:  # noqa: BLE001
        return "gnu"
    return "gnu"


def platform_triple(system: Optional[str] = None, machine: Optional[str] = None, libc: Optional[LibC] = None) -> str:
    """Return the platform/architecture/libc triple for the running interpreter.

    Args:
        system: Override for ``platform.system()``.
        machine: Override for ``platform.machine()``.
        libc: Override for the Linux C library flavor.

    Returns:
        The triple, e.g. ``linux-x64-gnu`` or ``darwin-arm64``.
    """
    os_name = normalize_os(system)
    arch = normalize_arch(machine)
    if os_name in {"darwin", "win32"}:
        return f"{os_name}-{arch}"
    if os_name == "linux":
        return f"linux-{arch}-{libc or detect_libc()}"
    return f"{os_name}-{arch}"


def lib_extension(system: Optional[str] = None) -> str:
    """Return the native library file extension for the running OS."""
    os_name = normalize_os(system)
    if os_name == "darwin":
        return "dylib"
    if os_name == "win32":
        return "dll"
    return "so"
