"""prebuild-core: Build, archive and load prebuilt native addons.

This package provides:
- ArtifactBuilder: Compile an addon with node-gyp and archive the binding
- load_binding / binding_path: Locate and load an archived binding
- ArtifactKey: The ``<os>-<arch>-<abi>`` archive key
- Runtime probes for Node.js and Electron
"""

from __future__ import annotations

__version__ = "0.1.0"

from prebuild_core.builder import ArtifactBuilder, BuildPlan
from prebuild_core.config import PrebuildConfig

# Error types
from prebuild_core.errors import (
    BuildFailedError,
    ConfigurationError,
    OutputMissingError,
    PrebuildError,
    ToolchainMissingError,
    VersionDetectionError,
)
from prebuild_core.loader import binding_path, host_binding_path, host_key, load_binding
from prebuild_core.models import (
    DEFAULT_BINDING_NAME,
    ArtifactKey,
    BuildRequest,
    BuildResult,
    RuntimeFamily,
)
from prebuild_core.probes import ElectronProbe, NodeProbe, RuntimeProbe, get_probe

__all__ = [
    "__version__",
    # Builder
    "ArtifactBuilder",
    "BuildPlan",
    "PrebuildConfig",
    # Loader
    "binding_path",
    "host_binding_path",
    "host_key",
    "load_binding",
    # Models
    "DEFAULT_BINDING_NAME",
    "ArtifactKey",
    "BuildRequest",
    "BuildResult",
    "RuntimeFamily",
    # Probes
    "RuntimeProbe",
    "NodeProbe",
    "ElectronProbe",
    "get_probe",
    # Errors
    "PrebuildError",
    "ConfigurationError",
    "ToolchainMissingError",
    "BuildFailedError",
    "OutputMissingError",
    "VersionDetectionError",
]
