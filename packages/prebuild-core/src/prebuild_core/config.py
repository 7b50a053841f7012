"""Prebuild configuration.

Locations and toolchain settings shared by the builder and the loader:
- PrebuildConfig: Package root, archive layout, toolchain command
- Environment variable fallback (PREBUILD_PACKAGE_ROOT, PREBUILD_NODE_GYP)
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from prebuild_core.models import ArtifactKey

# Environment variable for the package root (directory holding binding.gyp)
PACKAGE_ROOT_ENV_VAR = "PREBUILD_PACKAGE_ROOT"

# Environment variable overriding the toolchain command
TOOLCHAIN_ENV_VAR = "PREBUILD_NODE_GYP"

DEFAULT_ARCHIVE_DIR = "vendor"
DEFAULT_BUILD_OUTPUT_DIR = Path("build") / "Release"
DEFAULT_BINDING_EXTENSION = ".node"
DEFAULT_TOOLCHAIN_COMMAND = ("node-gyp",)
DEFAULT_ELECTRON_DIST_URL = "https://atom.io/download/electron"


def get_package_root() -> Path:
    """Get the package root from the environment.

    Returns:
        Value of PREBUILD_PACKAGE_ROOT, or the working directory.
    """
    value = os.environ.get(PACKAGE_ROOT_ENV_VAR)
    return Path(value) if value else Path.cwd()


class PrebuildConfig(BaseModel):
    """Configuration for building and locating archived bindings.

    Attributes:
        package_root: Directory containing binding.gyp, build/ and vendor/
        archive_dir: Archive root, relative to the package root
        build_output_dir: Where node-gyp leaves compiled bindings
        binding_extension: File extension of compiled bindings
        toolchain_command: Command (and leading arguments) for node-gyp
        node_executable: Node.js executable used for version probes
        electron_dist_url: Header download URL passed for Electron builds

    Example:
        >>> config = PrebuildConfig(package_root=Path("/src/addon"))
        >>> config.archive_root
        PosixPath('/src/addon/vendor')
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    package_root: Path = Field(default_factory=get_package_root, description="Package root")
    archive_dir: str = Field(default=DEFAULT_ARCHIVE_DIR, min_length=1, description="Archive root")
    build_output_dir: Path = Field(
        default=DEFAULT_BUILD_OUTPUT_DIR,
        description="Toolchain output directory",
    )
    binding_extension: str = Field(
        default=DEFAULT_BINDING_EXTENSION,
        description="Binding file extension",
    )
    toolchain_command: tuple[str, ...] = Field(
        default=DEFAULT_TOOLCHAIN_COMMAND,
        min_length=1,
        description="Toolchain command",
    )
    node_executable: str = Field(default="node", min_length=1, description="Node.js executable")
    electron_dist_url: str = Field(
        default=DEFAULT_ELECTRON_DIST_URL,
        description="Electron headers URL",
    )

    @classmethod
    def from_env(cls, package_root: Path | str | None = None) -> PrebuildConfig:
        """Create a configuration from environment variables.

        Args:
            package_root: Explicit package root. Overrides PREBUILD_PACKAGE_ROOT.

        Returns:
            PrebuildConfig with environment overrides applied.
        """
        overrides: dict[str, object] = {}
        if package_root is not None:
            overrides["package_root"] = Path(package_root)

        toolchain = os.environ.get(TOOLCHAIN_ENV_VAR, "").split()
        if toolchain:
            overrides["toolchain_command"] = tuple(toolchain)

        return cls(**overrides)  # type: ignore[arg-type]

    @property
    def archive_root(self) -> Path:
        """Absolute archive root directory."""
        return self.package_root.resolve() / self.archive_dir

    def binding_filename(self, binding_name: str) -> str:
        """File name of a binding, e.g. ``binding.node``."""
        return binding_name + self.binding_extension

    def build_output_path(self, binding_name: str) -> Path:
        """Where the toolchain leaves the compiled binding."""
        return (
            self.package_root.resolve()
            / self.build_output_dir
            / self.binding_filename(binding_name)
        )

    def key_directory(self, key: ArtifactKey) -> Path:
        """Archive directory for one key."""
        return self.archive_root / key.slug

    def artifact_path(self, key: ArtifactKey, binding_name: str) -> Path:
        """Archived location of a binding for a key.

        This is the single place where the archive layout is spelled out;
        the builder writes here and the loader reads from here.
        """
        return self.key_directory(key) / self.binding_filename(binding_name)
