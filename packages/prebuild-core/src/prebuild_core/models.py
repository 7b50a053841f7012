"""Data models for prebuild-core.

This module defines:
- RuntimeFamily: Host runtimes that load native addons
- ArtifactKey: (os, arch, abi) triple naming an archive directory
- BuildRequest: Parameters of one builder invocation
- BuildResult: What a successful build produced
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prebuild_core.errors import ConfigurationError
from prebuild_core.host import host_arch, host_os

DEFAULT_BINDING_NAME = "binding"
"""Binding name used when none is given, shared by builder and loader."""

KEY_SEPARATOR = "-"

# Letters, digits, dot and underscore. Hyphen is reserved for the separator.
_KEY_COMPONENT_PATTERN = re.compile(r"^[A-Za-z0-9._]+$")


class RuntimeFamily(str, Enum):
    """Runtimes that load ``.node`` addons."""

    NODE = "node"
    ELECTRON = "electron"

    @classmethod
    def parse(cls, value: str | RuntimeFamily) -> RuntimeFamily:
        """Parse a runtime family name.

        Args:
            value: Family name, e.g. "node" or "electron".

        Returns:
            Matching RuntimeFamily.

        Raises:
            ConfigurationError: If the value is not a supported family.
        """
        if isinstance(value, RuntimeFamily):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unsupported platform: {value}") from None


class ArtifactKey(BaseModel):
    """Composite key naming one archive directory.

    The key serializes as ``{os}-{arch}-{abi_version}``. The same triple
    must produce the same directory name at build time and at load time,
    so every component is restricted to path-safe characters.

    Attributes:
        os: Node.js platform name (linux, darwin, win32, ...)
        arch: Node.js architecture name (x64, arm64, ia32, ...)
        abi_version: Module ABI version (``process.versions.modules``)

    Example:
        >>> ArtifactKey(os="linux", arch="x64", abi_version="115").slug
        'linux-x64-115'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    os: str = Field(..., min_length=1, description="Operating system name")
    arch: str = Field(..., min_length=1, description="CPU architecture name")
    abi_version: str = Field(..., min_length=1, description="Module ABI version")

    @field_validator("abi_version", mode="before")
    @classmethod
    def strip_abi_version(cls, v: object) -> object:
        """Drop surrounding whitespace, e.g. the newline printed by a probe."""
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("os", "arch", "abi_version")
    @classmethod
    def validate_path_safe(cls, v: str) -> str:
        """Reject components that are not safe inside a directory name."""
        if not _KEY_COMPONENT_PATTERN.match(v) or v in (".", ".."):
            raise ValueError(
                f"'{v}' is not a valid key component "
                "(allowed: letters, digits, '.', '_')"
            )
        return v

    @property
    def slug(self) -> str:
        """Directory name for this key."""
        return KEY_SEPARATOR.join((self.os, self.arch, self.abi_version))

    def __str__(self) -> str:
        return self.slug

    @classmethod
    def parse(cls, slug: str) -> ArtifactKey:
        """Parse a directory name produced by :attr:`slug`.

        Raises:
            ValueError: If the name does not have exactly three components.
        """
        parts = slug.split(KEY_SEPARATOR)
        if len(parts) != 3:
            raise ValueError(f"Invalid artifact key: {slug!r}")
        os_name, arch, abi_version = parts
        return cls(os=os_name, arch=arch, abi_version=abi_version)

    @classmethod
    def for_host(cls, abi_version: str, *, arch: str | None = None) -> ArtifactKey:
        """Build the key for the running host and a given ABI version.

        Args:
            abi_version: Module ABI version of the runtime.
            arch: Architecture override. Defaults to the host architecture.

        Returns:
            ArtifactKey for this host.
        """
        return cls(os=host_os(), arch=arch or host_arch(), abi_version=abi_version)


class BuildRequest(BaseModel):
    """Parameters of one builder invocation.

    Attributes:
        binding_name: Name of the binding, without the ``.node`` extension
        platform: Runtime family to build for
        target: Runtime version to build against (auto-detected if None)
        module_version: ABI version override for the archive key
        arch: Target architecture (always the host architecture)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    binding_name: str = Field(
        default=DEFAULT_BINDING_NAME,
        min_length=1,
        description="Binding name",
    )
    platform: str = Field(default=RuntimeFamily.NODE.value, description="Runtime family")
    target: str | None = Field(default=None, description="Runtime version")
    module_version: str | None = Field(default=None, description="ABI version override")
    arch: str = Field(
        default_factory=lambda: host_arch(),
        min_length=1,
        description="Architecture",
    )

    @field_validator("binding_name")
    @classmethod
    def validate_binding_name(cls, v: str) -> str:
        """Binding name becomes a file name; it may not leave its directory."""
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"Binding name must be a plain file name: {v!r}")
        return v

    @field_validator("module_version")
    @classmethod
    def validate_module_version(cls, v: str | None) -> str | None:
        """The override becomes part of the archive directory name."""
        if v is None:
            return None
        v = v.strip()
        if not _KEY_COMPONENT_PATTERN.match(v) or v in (".", ".."):
            raise ValueError(
                f"'{v}' is not a valid module version "
                "(allowed: letters, digits, '.', '_')"
            )
        return v

    @property
    def family(self) -> RuntimeFamily:
        """Parsed runtime family.

        Raises:
            ConfigurationError: If the platform is not supported.
        """
        return RuntimeFamily.parse(self.platform)


class BuildResult(BaseModel):
    """Outcome of a successful build.

    Attributes:
        key: Archive key the binding was filed under
        target: Runtime version the binding was built against
        source_path: Binding produced by the toolchain
        artifact_path: Archived copy of the binding
        created_directories: Archive directories created by this build
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: ArtifactKey
    target: str
    source_path: Path
    artifact_path: Path
    created_directories: list[Path] = Field(default_factory=list)
