"""Console output for prebuild-cli.

Progress lines and the final "Copied binding" line go to stdout; errors go
to stderr. Colors are off when NO_COLOR is set or
``--no-color`` is passed.
"""

from __future__ import annotations

import os
from typing import Any

from rich.console import Console

_NO_COLOR_ENV = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False, stderr: bool = False) -> Console:
    """Build a console for build output.

    Markup highlighting is off so paths and version numbers print verbatim,
    and long paths are never wrapped.

    Args:
        no_color: Disable colors (NO_COLOR disables them as well).
        stderr: Write to stderr instead of stdout.
    """
    plain = no_color or _NO_COLOR_ENV
    return Console(
        force_terminal=False if plain else None,
        no_color=plain,
        stderr=stderr,
        highlight=False,
        soft_wrap=True,
    )


console = create_console()
error_console = create_console(stderr=True)


def info(message: str, **kwargs: Any) -> None:
    """Print a progress line such as ``target = 20.11.1``."""
    console.print(message, **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print ``message`` after a green checkmark.

    Example:
        >>> success("Copied binding: vendor/linux-x64-115/binding.node")
        ✓ Copied binding: vendor/linux-x64-115/binding.node
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print ``message`` to stderr after a red cross.

    Example:
        >>> error("node-gyp not found!")
        ✗ node-gyp not found!
    """
    error_console.print(f"[red]✗[/red] {message}", **kwargs)


def set_no_color(no_color: bool) -> None:
    """Replace both consoles, e.g. after ``--no-color`` was parsed."""
    global console, error_console
    console = create_console(no_color=no_color)
    error_console = create_console(no_color=no_color, stderr=True)
