"""node-gyp invocation."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from prebuild_core.config import PrebuildConfig
from prebuild_core.errors import (
    COMMAND_NOT_FOUND_EXIT_CODE,
    BuildFailedError,
    ToolchainMissingError,
)
from prebuild_core.models import RuntimeFamily

logger = structlog.get_logger(__name__)

ToolchainRunner = Callable[[Sequence[str], Path], int]
"""Runs a command in a directory and returns its exit code."""


def toolchain_args(
    config: PrebuildConfig,
    family: RuntimeFamily,
    target: str,
    arch: str,
) -> list[str]:
    """Build the node-gyp command line.

    Args:
        config: Prebuild configuration.
        family: Runtime family being built for.
        target: Runtime version to compile against.
        arch: Target architecture.

    Returns:
        Full command line, starting with the toolchain executable.

    Example:
        >>> toolchain_args(PrebuildConfig(), RuntimeFamily.NODE, "20.11.1", "x64")
        ['node-gyp', 'rebuild', '--target=20.11.1', '--arch=x64']
    """
    args = [
        *config.toolchain_command,
        "rebuild",
        f"--target={target}",
        f"--arch={arch}",
    ]
    if family is RuntimeFamily.ELECTRON:
        args.append(f"--dist-url={config.electron_dist_url}")
    return args


def run_subprocess(args: Sequence[str], cwd: Path) -> int:
    """Run the toolchain, discarding stdout and passing stderr through.

    A missing executable is reported as the shell's "command not found"
    exit code so that every runner reports it the same way.
    """
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
        )
    except FileNotFoundError:
        logger.debug("toolchain_executable_missing", command=args[0])
        return COMMAND_NOT_FOUND_EXIT_CODE
    return completed.returncode


def run_toolchain(
    args: Sequence[str],
    cwd: Path,
    runner: ToolchainRunner = run_subprocess,
) -> None:
    """Run the toolchain and translate its exit code.

    Args:
        args: Command line from :func:`toolchain_args`.
        cwd: Package root to build in.
        runner: Function executing the command.

    Raises:
        ToolchainMissingError: If the toolchain executable was not found.
        BuildFailedError: If the toolchain exited with any other non-zero code.
    """
    logger.info("toolchain_started", command=list(args), cwd=str(cwd))
    exit_code = runner(args, cwd)

    if exit_code == COMMAND_NOT_FOUND_EXIT_CODE:
        raise ToolchainMissingError(Path(args[0]).name)
    if exit_code != 0:
        raise BuildFailedError(exit_code)

    logger.info("toolchain_completed", command=args[0])
