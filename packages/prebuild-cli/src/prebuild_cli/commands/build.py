"""prebuild build command - Compile and archive a native addon.

Runs node-gyp for the requested runtime and copies the compiled binding
to vendor/<os>-<arch>-<abi>/<name>.node.
"""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from prebuild_cli.errors import CLIError, format_validation_error, handle_prebuild_error
from prebuild_cli.log_config import configure_logging
from prebuild_cli.output import info, success
from prebuild_core.builder import ArtifactBuilder
from prebuild_core.config import PACKAGE_ROOT_ENV_VAR, PrebuildConfig
from prebuild_core.errors import PrebuildError
from prebuild_core.models import DEFAULT_BINDING_NAME, BuildRequest


@click.command("build", context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-n",
    "--name",
    "binding_name",
    type=str,
    default=DEFAULT_BINDING_NAME,
    help=f"The file name of the native binding [default: {DEFAULT_BINDING_NAME}]",
)
@click.option(
    "-p",
    "--platform",
    "platform",
    type=str,
    default="node",
    help='Either "node" or "electron" [default: node]',
)
@click.option(
    "-t",
    "--target",
    "target",
    type=str,
    default=None,
    help="The platform version (detected when omitted)",
)
@click.option(
    "--version",
    "module_version",
    type=str,
    default=None,
    help="The module version used in the vendor directory name (detected when omitted)",
)
@click.option(
    "--package-root",
    "package_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar=PACKAGE_ROOT_ENV_VAR,
    help="Directory containing binding.gyp [default: current directory]",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def build(
    binding_name: str,
    platform: str,
    target: str | None,
    module_version: str | None,
    package_root: Path | None,
    verbose: bool,
) -> None:
    """Build a native addon and archive it for the current platform.

    Examples:

        prebuild-addon

        prebuild-addon --name addon --platform electron

        prebuild-addon --target 20.11.1 --version 115
    """
    configure_logging(verbose)

    try:
        request = BuildRequest(
            binding_name=binding_name,
            platform=platform,
            target=target,
            module_version=module_version,
        )
    except ValidationError as e:
        raise CLIError(format_validation_error("Invalid build options", e)) from None

    builder = ArtifactBuilder(PrebuildConfig.from_env(package_root))

    try:
        plan = builder.plan(request)

        info("")
        info(f"bindingName = {plan.binding_name}")
        info(f"platform = {plan.family.value}")
        info(f"target = {plan.target}")
        info(f"arch = {plan.arch}")
        info("")
        info("Building...")
        info(" ".join(plan.command))
        info("")

        source = builder.compile(plan)
        key = builder.resolve_key(plan)
        info(f"moduleVersion = {key.abi_version}")

        result = builder.archive(plan, key, source)
    except PrebuildError as e:
        handle_prebuild_error(e)

    for directory in result.created_directories:
        info(f"Created directory: {directory}")
    success(f"Copied binding: {result.artifact_path}")
