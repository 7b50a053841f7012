"""Entry point of the ``prebuild`` command group.

``prebuild build`` is the same command installed as ``prebuild-addon``;
``prebuild locate`` prints where the loader looks for a binding.
Subcommand modules are imported on first use.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from prebuild_cli import __version__
from prebuild_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

# Command name -> "module:attribute"
LAZY_COMMANDS = {
    "build": "prebuild_cli.commands.build:build",
    "locate": "prebuild_cli.commands.locate:locate",
}


def _import_command(target: str) -> click.Command:
    module_name, _, attr_name = target.partition(":")
    command = getattr(importlib.import_module(module_name), attr_name)
    if not isinstance(command, click.Command):
        raise TypeError(f"{target} is not a click command")
    return command


class LazyGroup(rclick.RichGroup):
    """Rich group whose subcommands are imported when first looked up.

    Attributes:
        lazy_subcommands: Command name to ``"module:attribute"`` target.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for RichGroup.
            lazy_subcommands: Command name to import target, e.g.
                {"build": "prebuild_cli.commands.build:build"}
            **kwargs: Keyword arguments for RichGroup.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return registered and not yet imported command names, sorted.

        Args:
            ctx: Click context.
        """
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Return a registered command, importing it on first use.

        Returns:
            The command, or None for unknown names.
        """
        command = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if command is None and cmd_name in self.lazy_subcommands:
            command = _import_command(self.lazy_subcommands[cmd_name])
            self.add_command(command, cmd_name)
        return command


def _disable_color(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if value:
        set_no_color(True)


@click.command(
    cls=LazyGroup,
    lazy_subcommands=LAZY_COMMANDS,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="prebuild")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=_disable_color,
)
def cli() -> None:
    """Prebuild - Native addon builds keyed by platform and ABI.

    Compile a Node.js or Electron addon with node-gyp and archive the
    binding under `vendor/<os>-<arch>-<abi>/`.

    **Getting Started:**

    - `prebuild build` - Build and archive a binding for this platform
    - `prebuild build --platform electron` - Build against the installed Electron
    - `prebuild locate --abi 115` - Show where a binding is loaded from
    """


if __name__ == "__main__":
    cli()
