"""prebuild locate command - Show where a binding is loaded from."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from prebuild_cli.errors import CLIError, format_validation_error, handle_prebuild_error
from prebuild_cli.log_config import configure_logging
from prebuild_cli.output import info
from prebuild_core.config import PACKAGE_ROOT_ENV_VAR, PrebuildConfig
from prebuild_core.errors import PrebuildError
from prebuild_core.host import host_arch, host_os
from prebuild_core.loader import binding_path, host_key
from prebuild_core.models import DEFAULT_BINDING_NAME, ArtifactKey


@click.command("locate", context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-n",
    "--name",
    "binding_name",
    type=str,
    default=DEFAULT_BINDING_NAME,
    help=f"The file name of the native binding [default: {DEFAULT_BINDING_NAME}]",
)
@click.option(
    "--abi",
    "abi_version",
    type=str,
    default=None,
    help="Module ABI version [default: ABI of the installed node]",
)
@click.option("--os", "os_name", type=str, default=None, help="Platform name [default: host]")
@click.option("--arch", "arch", type=str, default=None, help="Architecture [default: host]")
@click.option(
    "--package-root",
    "package_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar=PACKAGE_ROOT_ENV_VAR,
    help="Directory containing vendor/ [default: current directory]",
)
@click.option(
    "--check",
    is_flag=True,
    default=False,
    help="Exit with an error if the binding is not archived.",
)
def locate(
    binding_name: str,
    abi_version: str | None,
    os_name: str | None,
    arch: str | None,
    package_root: Path | None,
    check: bool,
) -> None:
    """Print the archived path of a binding.

    This is the path load_binding() opens for the same key.

    Examples:

        prebuild locate --abi 115

        prebuild locate --name addon --os darwin --arch arm64 --abi 121 --check
    """
    configure_logging()
    config = PrebuildConfig.from_env(package_root)

    try:
        if abi_version is None:
            abi_version = host_key(config=config).abi_version
        key = ArtifactKey(
            os=os_name or host_os(),
            arch=arch or host_arch(),
            abi_version=abi_version,
        )
    except PrebuildError as e:
        handle_prebuild_error(e)
    except ValidationError as e:
        raise CLIError(format_validation_error("Invalid artifact key", e)) from None

    path = binding_path(binding_name, key=key, config=config)
    if check and not path.is_file():
        raise CLIError(f"Binding not found: {path}")

    info(str(path))
