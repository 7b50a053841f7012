"""Runtime probes.

A probe answers two questions about an installed runtime: which version it
is, and which module ABI version its native addons must be built for.

- RuntimeProbe: Interface used by the builder and the loader
- NodeProbe: Asks the ``node`` executable on PATH
- ElectronProbe: Reads the ``electron`` npm package and spawns Electron
  in Node mode

Probes raise VersionDetectionError instead of returning partial answers.
"""

from __future__ import annotations

import json
import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path

import structlog

from prebuild_core.config import PrebuildConfig
from prebuild_core.errors import VersionDetectionError
from prebuild_core.models import RuntimeFamily

logger = structlog.get_logger(__name__)

ELECTRON_PACKAGE = Path("node_modules") / "electron"
ELECTRON_RUN_AS_NODE_ENV_VAR = "ELECTRON_RUN_AS_NODE"
ELECTRON_ABI_ERROR = "Failed to get Electron's module version"

MODULES_EXPRESSION = "process.versions.modules"


def _run_runtime(
    runtime: str,
    args: list[str],
    *,
    env: Mapping[str, str] | None = None,
    error_message: str,
    fail_on_stderr: bool = False,
) -> str:
    """Run a runtime executable and return what it printed.

    Args:
        runtime: Runtime family name, for error reporting.
        args: Command line to execute.
        env: Environment for the child process.
        error_message: User message used for every failure.
        fail_on_stderr: Treat any stderr output as a failure. Otherwise stderr
            is only logged and a non-zero exit code fails the probe.

    Returns:
        Stripped stdout of the process.

    Raises:
        VersionDetectionError: If the executable is missing, failed, or
            wrote nothing to stdout.
    """
    logger.debug("runtime_probe_spawned", runtime=runtime, command=args)
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            env=dict(env) if env is not None else None,
        )
    except OSError as e:
        raise VersionDetectionError(
            runtime,
            f"{error_message}: cannot execute {args[0]}",
            internal_details=str(e),
        ) from e

    stderr = result.stderr.strip() if result.stderr else ""
    if stderr and fail_on_stderr:
        raise VersionDetectionError(runtime, f"{error_message}: {stderr}")
    if stderr:
        logger.debug("runtime_probe_stderr", runtime=runtime, stderr=stderr)
    if result.returncode != 0:
        raise VersionDetectionError(
            runtime,
            f"{error_message}: {stderr}" if stderr else error_message,
            internal_details=f"{args[0]} exited with {result.returncode}",
        )

    output = result.stdout.strip()
    if not output:
        raise VersionDetectionError(
            runtime,
            error_message,
            internal_details=f"{args[0]} exited with {result.returncode} and no output",
        )
    return output


class RuntimeProbe(ABC):
    """Reports the version and module ABI version of an installed runtime.

    Example:
        >>> probe = NodeProbe(PrebuildConfig())
        >>> probe.runtime_version()
        '20.11.1'
        >>> probe.abi_version()
        '115'
    """

    family: RuntimeFamily

    def __init__(self, config: PrebuildConfig) -> None:
        """Initialize the probe.

        Args:
            config: Prebuild configuration (executables, package root).
        """
        self.config = config
        self._log = logger.bind(runtime=self.family.value)

    @abstractmethod
    def runtime_version(self) -> str:
        """Return the runtime version to compile against.

        Raises:
            VersionDetectionError: If the version cannot be determined.
        """

    @abstractmethod
    def abi_version(self) -> str:
        """Return the module ABI version of the runtime.

        Raises:
            VersionDetectionError: If the ABI version cannot be determined.
        """


class NodeProbe(RuntimeProbe):
    """Probe for the Node.js executable configured in ``node_executable``."""

    family = RuntimeFamily.NODE

    def _evaluate(self, expression: str) -> str:
        return _run_runtime(
            self.family.value,
            [self.config.node_executable, "-p", expression],
            error_message="Failed to get Node.js version information",
        )

    def runtime_version(self) -> str:
        version = self._evaluate("process.versions.node")
        self._log.debug("runtime_version_detected", version=version)
        return version

    def abi_version(self) -> str:
        abi_version = self._evaluate(MODULES_EXPRESSION)
        self._log.debug("abi_version_detected", abi_version=abi_version)
        return abi_version


class ElectronProbe(RuntimeProbe):
    """Probe for the ``electron`` npm package installed for the addon.

    The package is looked up the way Node resolves modules: in
    ``node_modules/electron`` of the package root, then of every parent
    directory.
    """

    family = RuntimeFamily.ELECTRON

    def package_dir(self) -> Path:
        """Locate the installed electron package.

        Raises:
            VersionDetectionError: If electron is not installed.
        """
        root = self.config.package_root.resolve()
        for directory in (root, *root.parents):
            candidate = directory / ELECTRON_PACKAGE
            if (candidate / "package.json").is_file():
                return candidate

        raise VersionDetectionError(
            self.family.value,
            "Cannot find module 'electron'. Install it with: npm install electron",
            internal_details=f"searched node_modules/electron upwards from {root}",
        )

    def runtime_version(self) -> str:
        package_dir = self.package_dir()
        try:
            manifest = json.loads((package_dir / "package.json").read_text(encoding="utf-8"))
            version = str(manifest["version"])
        except (OSError, ValueError, KeyError) as e:
            raise VersionDetectionError(
                self.family.value,
                "Failed to read Electron's version",
                internal_details=f"{package_dir / 'package.json'}: {e}",
            ) from e

        self._log.info("electron_located", path=str(package_dir), version=version)
        return version

    def executable(self) -> Path:
        """Path of the Electron binary named by the package's ``path.txt``.

        Raises:
            VersionDetectionError: If path.txt is missing.
        """
        package_dir = self.package_dir()
        try:
            relative = (package_dir / "path.txt").read_text(encoding="utf-8").strip()
        except OSError as e:
            raise VersionDetectionError(
                self.family.value,
                ELECTRON_ABI_ERROR,
                internal_details=f"cannot read {package_dir / 'path.txt'}: {e}",
            ) from e

        # Newer electron releases store the path relative to dist/
        executable = package_dir / relative
        if not executable.exists() and (package_dir / "dist" / relative).exists():
            executable = package_dir / "dist" / relative
        return executable

    def abi_version(self) -> str:
        executable = self.executable()
        env = {**os.environ, ELECTRON_RUN_AS_NODE_ENV_VAR: "1"}
        abi_version = _run_runtime(
            self.family.value,
            [str(executable), "-e", f"console.log({MODULES_EXPRESSION})"],
            env=env,
            error_message=ELECTRON_ABI_ERROR,
            fail_on_stderr=True,
        )
        self._log.debug("abi_version_detected", abi_version=abi_version)
        return abi_version


ProbeFactory = Callable[[RuntimeFamily, PrebuildConfig], RuntimeProbe]

_PROBES: dict[RuntimeFamily, type[RuntimeProbe]] = {
    RuntimeFamily.NODE: NodeProbe,
    RuntimeFamily.ELECTRON: ElectronProbe,
}


def get_probe(family: RuntimeFamily | str, config: PrebuildConfig) -> RuntimeProbe:
    """Return the probe for a runtime family.

    Args:
        family: Runtime family or its name.
        config: Prebuild configuration.

    Returns:
        RuntimeProbe for the family.

    Raises:
        ConfigurationError: If the family is not supported.
    """
    return _PROBES[RuntimeFamily.parse(family)](config)
