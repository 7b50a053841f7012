"""Custom exception hierarchy for prebuild-core.

This module defines the exception classes raised by the builder:
- PrebuildError: Base exception for all prebuild errors
- ConfigurationError: Unsupported runtime family or bad settings
- ToolchainMissingError: node-gyp could not be found
- BuildFailedError: node-gyp exited with a non-zero code
- OutputMissingError: node-gyp succeeded but left no binding behind
- VersionDetectionError: A runtime version or ABI probe failed

Every error is terminal: callers report the user message and stop.
Technical details are logged internally via structlog.
"""

from __future__ import annotations

from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

# Shell convention for "command not found"
COMMAND_NOT_FOUND_EXIT_CODE = 127


class PrebuildError(Exception):
    """Base exception for prebuild-runtime.

    Args:
        user_message: Message to display to the user.
        internal_details: Optional technical details. These are logged
            but never part of the user message.

    Example:
        >>> raise PrebuildError(
        ...     "Build failed",
        ...     internal_details="node-gyp stderr: gyp ERR! stack Error: ...",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize PrebuildError with user message and optional internal details.

        Args:
            user_message: Message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "prebuild_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(PrebuildError):
    """Raised when the requested build configuration is invalid.

    Use this exception when:
    - The runtime family is neither "node" nor "electron"
    - A setting cannot be used to build a request

    Example:
        >>> raise ConfigurationError("Unsupported platform: deno")
    """

    pass


class ToolchainMissingError(PrebuildError):
    """Raised when the native-module toolchain executable cannot be found.

    Attributes:
        command: The command that could not be started.
    """

    def __init__(self, command: str, *, internal_details: str | None = None) -> None:
        """Initialize ToolchainMissingError.

        Args:
            command: The toolchain command that was not found.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(f"{command} not found!", internal_details=internal_details)
        self.command = command


class BuildFailedError(PrebuildError):
    """Raised when the toolchain exits with a non-zero code.

    Attributes:
        exit_code: Exit code reported by the toolchain process.
    """

    def __init__(self, exit_code: int, *, internal_details: str | None = None) -> None:
        """Initialize BuildFailedError.

        Args:
            exit_code: Exit code of the toolchain process.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"Build failed with error code: {exit_code}",
            internal_details=internal_details,
        )
        self.exit_code = exit_code


class OutputMissingError(PrebuildError):
    """Raised when the toolchain reported success but produced no binding.

    Attributes:
        path: Where the compiled binding was expected.
    """

    def __init__(self, path: Path) -> None:
        """Initialize OutputMissingError.

        Args:
            path: Expected location of the compiled binding.
        """
        super().__init__(f"Binding does not exist: {path}")
        self.path = path


class VersionDetectionError(PrebuildError):
    """Raised when a runtime version or ABI version cannot be determined.

    Use this exception when:
    - The runtime executable wrote anything to stderr
    - The runtime executable wrote nothing to stdout
    - The runtime package (e.g. electron) is not installed

    Attributes:
        runtime: Runtime family being probed.
    """

    def __init__(
        self,
        runtime: str,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize VersionDetectionError.

        Args:
            runtime: Runtime family being probed ("node" or "electron").
            user_message: Message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message, internal_details=internal_details)
        self.runtime = runtime
