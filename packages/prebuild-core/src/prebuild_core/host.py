"""Host platform naming.

Archived bindings are keyed with the Node.js ``process.platform`` and
``process.arch`` vocabulary so that artifacts stay interchangeable with
ones produced by JavaScript tooling. This module maps the Python
interpreter's view of the host into that vocabulary.
"""

from __future__ import annotations

import platform
import sys

# platform.machine() -> process.arch
_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "i386": "ia32",
    "i486": "ia32",
    "i586": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "armv8l": "arm",
    "arm": "arm",
    "ppc64le": "ppc64",
    "ppc64": "ppc64",
    "ppc": "ppc",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "loongarch64": "loong64",
    "mips64": "mips64el",
}

# sys.platform prefix -> process.platform
_OS_PREFIXES: tuple[tuple[str, str], ...] = (
    ("linux", "linux"),
    ("darwin", "darwin"),
    ("win32", "win32"),
    ("cygwin", "win32"),
    ("msys", "win32"),
    ("freebsd", "freebsd"),
    ("openbsd", "openbsd"),
    ("netbsd", "netbsd"),
    ("sunos", "sunos"),
    ("aix", "aix"),
)


def normalize_os(name: str) -> str:
    """Map a ``sys.platform`` value to the Node.js platform name.

    Args:
        name: Value in ``sys.platform`` form (e.g. "linux", "freebsd13").

    Returns:
        Node.js platform name. Unknown values are returned lower-cased.
    """
    lowered = name.lower()
    for prefix, node_name in _OS_PREFIXES:
        if lowered.startswith(prefix):
            return node_name
    return lowered


def normalize_arch(machine: str) -> str:
    """Map a ``platform.machine()`` value to the Node.js architecture name.

    Args:
        machine: Machine name as reported by the OS (e.g. "x86_64").

    Returns:
        Node.js architecture name. Unknown values are returned lower-cased.
    """
    lowered = machine.lower()
    return _ARCH_ALIASES.get(lowered, lowered)


def host_os() -> str:
    """Return the Node.js platform name of the running host."""
    return normalize_os(sys.platform)


def host_arch() -> str:
    """Return the Node.js architecture name of the running host."""
    return normalize_arch(platform.machine())
