"""Tests for the locate command."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from click.testing import CliRunner

from prebuild_cli.commands.build import build
from prebuild_cli.commands.locate import locate


class TestLocateCommand:
    """Tests for printing archived binding paths."""

    def test_locate_explicit_abi(self, cli_runner: CliRunner, package_root: Path) -> None:
        """Path is printed for the host platform and the given ABI."""
        result = cli_runner.invoke(locate, ["--abi", "115"])

        assert result.exit_code == 0, result.output
        expected = package_root.resolve() / "vendor" / "linux-x64-115" / "binding.node"
        assert result.output.strip() == str(expected)

    def test_locate_explicit_key(self, cli_runner: CliRunner, package_root: Path) -> None:
        """--os and --arch override the host platform."""
        result = cli_runner.invoke(
            locate, ["-n", "addon", "--os", "darwin", "--arch", "arm64", "--abi", "121"]
        )

        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith(str(Path("darwin-arm64-121") / "addon.node"))

    def test_locate_probes_node_abi(
        self, cli_runner: CliRunner, package_root: Path, runtimes: Any
    ) -> None:
        """Without --abi the installed node is asked."""
        result = cli_runner.invoke(locate, [])

        assert result.exit_code == 0, result.output
        assert "linux-x64-115" in result.output
        assert ["node", "-p", "process.versions.modules"] in runtimes.calls

    def test_locate_matches_build(
        self, cli_runner: CliRunner, package_root: Path, runtimes: Any
    ) -> None:
        """The located path is the path the build archived."""
        assert cli_runner.invoke(build, ["--version", "116"]).exit_code == 0

        result = cli_runner.invoke(locate, ["--abi", "116", "--check"])

        assert result.exit_code == 0, result.output
        assert Path(result.output.strip()).read_bytes() == b"compiled binding"

    def test_locate_check_missing(self, cli_runner: CliRunner, package_root: Path) -> None:
        """--check fails when the binding is not archived."""
        result = cli_runner.invoke(locate, ["--abi", "115", "--check"])

        assert result.exit_code == 1
        assert "Binding not found" in result.output

    def test_locate_invalid_key(self, cli_runner: CliRunner, package_root: Path) -> None:
        """Unsafe key components are rejected."""
        result = cli_runner.invoke(locate, ["--abi", "../115"])

        assert result.exit_code == 1
        assert "Invalid artifact key" in result.output

    def test_locate_node_missing(
        self, cli_runner: CliRunner, package_root: Path, runtimes: Any
    ) -> None:
        """A failing node probe is reported."""
        runtimes.node_abi = ""
        result = cli_runner.invoke(locate, [])

        assert result.exit_code == 1
        assert "Failed to get Node.js version information" in result.output
