"""Artifact loader.

Finds the archived binding for a runtime and loads it as a shared library.
No existence check and no fallback search is done: a missing binding fails
with the dynamic loader's own error.
"""

from __future__ import annotations

import ctypes
from pathlib import Path

import structlog

from prebuild_core.config import PrebuildConfig
from prebuild_core.models import DEFAULT_BINDING_NAME, ArtifactKey
from prebuild_core.probes import NodeProbe

logger = structlog.get_logger(__name__)


def binding_path(
    name: str = DEFAULT_BINDING_NAME,
    *,
    key: ArtifactKey,
    config: PrebuildConfig | None = None,
) -> Path:
    """Compute where the binding for a key is archived.

    Args:
        name: Binding name, without extension.
        key: Artifact key of the runtime loading the binding.
        config: Prebuild configuration. Defaults to PrebuildConfig.from_env().

    Returns:
        ``<archive root>/<key>/<name>.node``
    """
    config = config or PrebuildConfig.from_env()
    return config.artifact_path(key, name or DEFAULT_BINDING_NAME)


def host_key(abi_version: str | None = None, config: PrebuildConfig | None = None) -> ArtifactKey:
    """Artifact key of this host.

    Args:
        abi_version: Module ABI version. Asked from the installed Node.js
            runtime when omitted.
        config: Prebuild configuration, used to find the node executable.

    Raises:
        VersionDetectionError: If the ABI version must be probed and cannot be.
    """
    if abi_version is None:
        abi_version = NodeProbe(config or PrebuildConfig.from_env()).abi_version()
    return ArtifactKey.for_host(abi_version)


def host_binding_path(
    name: str = DEFAULT_BINDING_NAME,
    abi_version: str | None = None,
    config: PrebuildConfig | None = None,
) -> Path:
    """Compute where the binding for this host is archived."""
    config = config or PrebuildConfig.from_env()
    return binding_path(name, key=host_key(abi_version, config), config=config)


def load_binding(
    name: str = DEFAULT_BINDING_NAME,
    *,
    key: ArtifactKey | None = None,
    abi_version: str | None = None,
    config: PrebuildConfig | None = None,
) -> ctypes.CDLL:
    """Load an archived binding.

    Args:
        name: Binding name, without extension.
        key: Artifact key to load. Defaults to the host key for ``abi_version``.
        abi_version: ABI version used when ``key`` is not given.
        config: Prebuild configuration.

    Returns:
        The loaded shared library.

    Raises:
        OSError: If the binding does not exist or cannot be loaded.
    """
    config = config or PrebuildConfig.from_env()
    if key is None:
        key = host_key(abi_version, config)

    path = binding_path(name, key=key, config=config)
    logger.debug("binding_loading", path=str(path), key=key.slug)
    return ctypes.CDLL(str(path))
