"""Artifact builder.

Compiles a native addon with node-gyp and files the compiled binding
under ``vendor/<os>-<arch>-<abi>/<name>.node``:

1. plan: resolve runtime family, runtime version and architecture
2. compile: run node-gyp, then verify ``build/Release/<name>.node`` exists
3. resolve_key: determine the module ABI version for the archive key
4. archive: create the key directory and copy the binding into it

Copying is the last step, so a failed build never touches the archive.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from prebuild_core.config import PrebuildConfig
from prebuild_core.errors import OutputMissingError, VersionDetectionError
from prebuild_core.models import ArtifactKey, BuildRequest, BuildResult, RuntimeFamily
from prebuild_core.probes import ProbeFactory, RuntimeProbe, get_probe
from prebuild_core.toolchain import (
    ToolchainRunner,
    run_subprocess,
    run_toolchain,
    toolchain_args,
)

logger = structlog.get_logger(__name__)


class BuildPlan(BaseModel):
    """A build request with every value resolved.

    Attributes:
        binding_name: Binding name, without extension
        family: Runtime family
        target: Runtime version to compile against
        arch: Target architecture
        module_version: ABI version override, if any
        command: Toolchain command line
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    binding_name: str
    family: RuntimeFamily
    target: str
    arch: str
    module_version: str | None = None
    command: list[str] = Field(default_factory=list)


class ArtifactBuilder:
    """Builds one binding and archives it under its artifact key.

    Attributes:
        config: Prebuild configuration

    Example:
        >>> builder = ArtifactBuilder(PrebuildConfig(package_root=Path("addon")))
        >>> result = builder.build(BuildRequest(binding_name="addon"))
        >>> result.artifact_path
        PosixPath('/src/addon/vendor/linux-x64-115/addon.node')
    """

    def __init__(
        self,
        config: PrebuildConfig | None = None,
        *,
        probe_factory: ProbeFactory = get_probe,
        runner: ToolchainRunner = run_subprocess,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Prebuild configuration. Defaults to PrebuildConfig.from_env().
            probe_factory: Returns the runtime probe for a family.
            runner: Executes the toolchain command and returns its exit code.
        """
        self.config = config or PrebuildConfig.from_env()
        self._probe_factory = probe_factory
        self._runner = runner

    def _probe(self, family: RuntimeFamily) -> RuntimeProbe:
        return self._probe_factory(family, self.config)

    def plan(self, request: BuildRequest) -> BuildPlan:
        """Resolve the runtime family, version and toolchain command.

        Raises:
            ConfigurationError: If the runtime family is not supported.
            VersionDetectionError: If the runtime version must be detected and
                cannot be.
        """
        family = request.family
        target = request.target or self._probe(family).runtime_version()
        return BuildPlan(
            binding_name=request.binding_name,
            family=family,
            target=target,
            arch=request.arch,
            module_version=request.module_version,
            command=toolchain_args(self.config, family, target, request.arch),
        )

    def compile(self, plan: BuildPlan) -> Path:
        """Run the toolchain and return the compiled binding.

        Raises:
            ToolchainMissingError: If node-gyp cannot be found.
            BuildFailedError: If node-gyp fails.
            OutputMissingError: If node-gyp succeeded without producing the binding.
        """
        run_toolchain(plan.command, self.config.package_root, runner=self._runner)

        source = self.config.build_output_path(plan.binding_name)
        if not source.is_file():
            raise OutputMissingError(source)
        return source

    def resolve_key(self, plan: BuildPlan) -> ArtifactKey:
        """Determine the archive key for a plan.

        An explicit module version is used as given; otherwise the ABI
        version is asked from the runtime probe.

        Raises:
            VersionDetectionError: If the ABI version cannot be determined or
                is not usable in a directory name.
        """
        if plan.module_version:
            abi_version = plan.module_version
        else:
            abi_version = self._probe(plan.family).abi_version()
        logger.info("module_version_resolved", module_version=abi_version)
        try:
            return ArtifactKey.for_host(abi_version, arch=plan.arch)
        except ValidationError as e:
            raise VersionDetectionError(
                plan.family.value,
                f"Invalid module version: {abi_version!r}",
                internal_details=str(e),
            ) from e

    def archive(self, plan: BuildPlan, key: ArtifactKey, source: Path) -> BuildResult:
        """Copy a compiled binding into its key directory.

        Missing directories are created; an existing binding is overwritten.
        """
        created: list[Path] = []
        for directory in (self.config.archive_root, self.config.key_directory(key)):
            if not directory.is_dir():
                directory.mkdir(parents=True, exist_ok=True)
                created.append(directory)
                logger.info("directory_created", path=str(directory))

        destination = self.config.artifact_path(key, plan.binding_name)
        shutil.copyfile(source, destination)
        logger.info("binding_copied", source=str(source), destination=str(destination))

        return BuildResult(
            key=key,
            target=plan.target,
            source_path=source,
            artifact_path=destination,
            created_directories=created,
        )

    def build(self, request: BuildRequest) -> BuildResult:
        """Run every build step for a request.

        Args:
            request: Build parameters.

        Returns:
            BuildResult describing the archived binding.

        Raises:
            PrebuildError: On any failure. Nothing is archived in that case.
        """
        plan = self.plan(request)
        source = self.compile(plan)
        key = self.resolve_key(plan)
        return self.archive(plan, key, source)
