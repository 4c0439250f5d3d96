"""Tests for the shared Click command and group classes."""

from __future__ import annotations

import json

import click
import pytest
from click.testing import CliRunner

from shopledger.cli import cli
from shopledger.commands._base import ShopCommand, ShopGroup


def _demo_group() -> ShopGroup:
    @click.group(cls=ShopGroup, examples="  demo list")
    def demo() -> None:
        """Demo group."""

    @demo.command(name="list", examples="  demo list --all")
    def list_cmd() -> None:
        click.echo("listed")

    @demo.command(name="remove")
    def remove() -> None:
        click.echo("removed")

    return demo


class TestExamplesOption:
    def test_only_on_commands_with_examples(self) -> None:
        runner = CliRunner()
        group = _demo_group()
        assert "--examples" in runner.invoke(group, ["list", "--help"]).output
        assert "--examples" not in runner.invoke(group, ["remove", "--help"]).output

    def test_prints_command_examples(self) -> None:
        result = CliRunner().invoke(_demo_group(), ["list", "--examples"])
        assert result.exit_code == 0
        assert "demo list --all" in result.output

    def test_subcommands_use_shop_command(self) -> None:
        assert isinstance(_demo_group().commands["list"], ShopCommand)


class TestAliases:
    def test_alias_resolves(self) -> None:
        result = CliRunner().invoke(_demo_group(), ["ls"])
        assert result.exit_code == 0
        assert result.output.strip() == "listed"

    def test_unsupported_alias_fails(self) -> None:
        result = CliRunner().invoke(_demo_group(), ["new"])
        assert result.exit_code == 2

    def test_help_lists_supported_aliases(self) -> None:
        group = _demo_group()
        assert group.aliases() == [("ls", "list"), ("rm", "remove")]
        output = CliRunner().invoke(group, ["--help"]).output
        assert "Aliases" in output
        assert "new" not in output.split("Aliases")[1]


@pytest.mark.usefixtures("_isolated_shop")
class TestAliasesOnShopCommands:
    def test_item_ls(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["item", "new", "Rice"])
        result = cli_runner.invoke(cli, ["--json", "item", "ls"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["total"] == 1

    def test_category_rm(self, cli_runner: CliRunner) -> None:
        added = cli_runner.invoke(cli, ["-q", "category", "add", "Drinks"])
        result = cli_runner.invoke(cli, ["--json", "category", "rm", added.output.strip()])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["removed"] is True
