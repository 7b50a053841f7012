"""CLI error handling for prebuild-cli.

Every prebuild-core failure is shown as a single line on stderr and
exits with status 1.
"""

from __future__ import annotations

from typing import NoReturn

import click
from pydantic import ValidationError

from prebuild_cli import output
from prebuild_core.errors import PrebuildError

EXIT_SUCCESS = 0
EXIT_BUILD_ERROR = 1


class CLIError(click.ClickException):
    """Click exception rendered through the rich error console.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_BUILD_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Print the message to stderr; ``file`` is ignored."""
        output.error(self.format_message())


def format_validation_error(heading: str, err: ValidationError) -> str:
    """Render a pydantic error as ``heading`` plus one line per field.

    Example:
        >>> format_validation_error("Invalid artifact key", err)
        "Invalid artifact key:\\n  - abi_version: Value error, '../115' is not ..."
    """
    lines = [f"{heading}:"]
    for detail in err.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "value"
        lines.append(f"  - {field}: {detail['msg']}")
    return "\n".join(lines)


def handle_prebuild_error(err: PrebuildError) -> NoReturn:
    """Re-raise a prebuild-core error as a CLIError with exit code 1."""
    raise CLIError(err.user_message, exit_code=EXIT_BUILD_ERROR) from err

