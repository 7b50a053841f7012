"""Shared pytest fixtures for prebuild-core tests.

Provides a temporary package root, a fake runtime probe and a fake
toolchain runner so builds can be exercised without node or node-gyp.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
import structlog

from prebuild_core.config import PrebuildConfig
from prebuild_core.errors import VersionDetectionError
from prebuild_core.models import RuntimeFamily
from prebuild_core.probes import RuntimeProbe


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


class FakeProbe(RuntimeProbe):
    """Runtime probe returning fixed answers.

    Attributes:
        calls: Names of the methods that were called.
    """

    def __init__(
        self,
        config: PrebuildConfig,
        family: RuntimeFamily = RuntimeFamily.NODE,
        version: str = "20.11.1",
        abi: str | None = "115",
    ) -> None:
        self.family = family
        super().__init__(config)
        self.version = version
        self.abi = abi
        self.calls: list[str] = []

    def runtime_version(self) -> str:
        self.calls.append("runtime_version")
        return self.version

    def abi_version(self) -> str:
        self.calls.append("abi_version")
        if self.abi is None:
            raise VersionDetectionError(self.family.value, "Failed to get module version")
        return self.abi


class FakeToolchain:
    """Toolchain runner that records commands and fakes build output.

    Attributes:
        commands: Every command line it was asked to run.
        exit_code: Exit code to report.
        outputs: Binding names to write to build/Release on success.
    """

    def __init__(self, exit_code: int = 0, outputs: Sequence[str] = ("binding",)) -> None:
        self.exit_code = exit_code
        self.outputs = list(outputs)
        self.commands: list[list[str]] = []

    def __call__(self, args: Sequence[str], cwd: Path) -> int:
        self.commands.append(list(args))
        if self.exit_code == 0:
            release = cwd / "build" / "Release"
            release.mkdir(parents=True, exist_ok=True)
            for name in self.outputs:
                (release / f"{name}.node").write_bytes(b"\x7fELF compiled " + name.encode())
        return self.exit_code


@pytest.fixture
def package_root(tmp_path: Path) -> Path:
    """Return an empty addon package directory."""
    root = tmp_path / "addon"
    root.mkdir()
    (root / "binding.gyp").write_text("{'targets': [{'target_name': 'binding'}]}\n")
    return root


@pytest.fixture
def config(package_root: Path) -> PrebuildConfig:
    """Return a configuration rooted at the temporary package."""
    return PrebuildConfig(package_root=package_root)


@pytest.fixture
def fake_probes(config: PrebuildConfig) -> dict[RuntimeFamily, FakeProbe]:
    """Return one fake probe per runtime family."""
    return {
        RuntimeFamily.NODE: FakeProbe(config, RuntimeFamily.NODE, "20.11.1", "115"),
        RuntimeFamily.ELECTRON: FakeProbe(config, RuntimeFamily.ELECTRON, "28.2.0", "119"),
    }


@pytest.fixture
def probe_factory(
    fake_probes: dict[RuntimeFamily, FakeProbe],
) -> Callable[[RuntimeFamily, PrebuildConfig], RuntimeProbe]:
    """Return a probe factory serving the fake probes."""

    def _factory(family: RuntimeFamily, config: PrebuildConfig) -> RuntimeProbe:
        return fake_probes[family]

    return _factory


@pytest.fixture
def toolchain() -> FakeToolchain:
    """Return a succeeding fake toolchain."""
    return FakeToolchain()


@pytest.fixture
def make_toolchain() -> type[FakeToolchain]:
    """Return the fake toolchain class for tests needing custom exit codes."""
    return FakeToolchain
