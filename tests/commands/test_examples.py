"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from shopledger.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["item", "--examples"], ["shopledger item add", "shopledger item summary"]),
    (["item", "add", "--examples"], ["--type service --charges 300"]),
    (["item", "restock", "--examples"], ["--pending"]),
    (["item", "list", "--examples"], ["--page-size 5"]),
    (["category", "--examples"], ["shopledger category rename"]),
    (["category", "add", "--examples"], ["shopledger category add Drinks"]),
    (["customer", "--examples"], ["shopledger customer find"]),
    (["customer", "order", "--examples"], ["--status paid"]),
    (["customer", "list", "--examples"], ["--search nairobi"]),
]


def _examples_id(args_keywords: tuple[list[str], list[str]]) -> str:
    args, _ = args_keywords
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_command_examples(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


@pytest.mark.parametrize(
    "args",
    [["item", "add", "--help"], ["customer", "--help"]],
)
def test_help_mentions_examples(cli_runner: CliRunner, args: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "--examples" in result.output


class TestExamplesEagerExit:
    """--examples exits before argument validation."""

    def test_skips_required_args(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["item", "restock", "--examples"])
        assert result.exit_code == 0
        assert "Examples for" in result.output

    def test_skips_required_args_customer_add(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["customer", "add", "--examples"])
        assert result.exit_code == 0
