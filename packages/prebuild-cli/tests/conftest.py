"""Shared test fixtures for prebuild-cli tests.

Provides CliRunner fixtures, a temporary addon package and a fake
``subprocess.run`` standing in for node, node-gyp and electron.
"""

from __future__ import annotations

import json
import subprocess
import sys
from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Reset structlog to stdout before each test."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def linux_x64_host() -> Generator[None, None, None]:
    """Pin the host platform so archive keys are predictable."""
    with (
        patch("prebuild_core.models.host_os", return_value="linux"),
        patch("prebuild_core.models.host_arch", return_value="x64"),
        patch("prebuild_cli.commands.locate.host_os", return_value="linux"),
        patch("prebuild_cli.commands.locate.host_arch", return_value="x64"),
    ):
        yield


class FakeRuntimes:
    """Fake ``subprocess.run`` for node, node-gyp and electron.

    Attributes:
        calls: Every command line that was run.
        toolchain_exit_code: Exit code reported by node-gyp.
        toolchain_outputs: Bindings node-gyp writes to build/Release on success.
        node_version: Printed for ``node -p process.versions.node``.
        node_abi: Printed for ``node -p process.versions.modules``.
        node_stderr: Written to stderr by node.
        electron_abi: Printed by the electron executable.
        electron_stderr: Written to stderr by the electron executable.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.toolchain_exit_code = 0
        self.toolchain_outputs = ["binding"]
        self.node_version = "20.11.1"
        self.node_abi = "115"
        self.node_stderr = ""
        self.electron_abi = "119"
        self.electron_stderr = ""

    def __call__(self, args: Sequence[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        args = list(args)
        self.calls.append(args)
        executable = Path(args[0]).name

        if executable == "node-gyp":
            if self.toolchain_exit_code == 0:
                release = Path(kwargs["cwd"]) / "build" / "Release"
                release.mkdir(parents=True, exist_ok=True)
                for name in self.toolchain_outputs:
                    (release / f"{name}.node").write_bytes(b"compiled " + name.encode())
            return subprocess.CompletedProcess(args, self.toolchain_exit_code)

        if executable == "node":
            stdout = self.node_abi if args[-1].endswith("modules") else self.node_version
            return subprocess.CompletedProcess(
                args, 0, stdout=stdout + "\n", stderr=self.node_stderr
            )

        if executable == "electron":
            return subprocess.CompletedProcess(
                args, 0, stdout=self.electron_abi + "\n", stderr=self.electron_stderr
            )

        raise FileNotFoundError(args[0])

    @property
    def toolchain_calls(self) -> list[list[str]]:
        """node-gyp command lines that were run."""
        return [call for call in self.calls if Path(call[0]).name == "node-gyp"]


@pytest.fixture
def runtimes() -> Generator[FakeRuntimes, None, None]:
    """Patch subprocess.run with fake runtimes."""
    fake = FakeRuntimes()
    with patch("subprocess.run", side_effect=fake):
        yield fake


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def package_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an addon package and point PREBUILD_PACKAGE_ROOT at it."""
    root = tmp_path / "addon"
    root.mkdir()
    (root / "binding.gyp").write_text("{'targets': [{'target_name': 'binding'}]}\n")
    monkeypatch.setenv("PREBUILD_PACKAGE_ROOT", str(root))
    monkeypatch.delenv("PREBUILD_NODE_GYP", raising=False)
    return root


@pytest.fixture
def electron_installed(package_root: Path) -> Path:
    """Install a fake electron npm package into the addon package."""
    package_dir = package_root / "node_modules" / "electron"
    (package_dir / "dist").mkdir(parents=True)
    (package_dir / "package.json").write_text(json.dumps({"name": "electron", "version": "28.2.0"}))
    (package_dir / "path.txt").write_text("dist/electron")
    (package_dir / "dist" / "electron").write_text("")
    return package_dir
