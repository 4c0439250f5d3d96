"""Tests for the root shopledger CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from shopledger import __version__
from shopledger.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "shopledger" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/test.toml", "--version"])
    assert result.exit_code == 0


# --- Command groups registered ---

EXPECTED_GROUPS = ["item", "category", "customer"]


@pytest.mark.parametrize("group", EXPECTED_GROUPS)
def test_group_registered(cli_runner: CliRunner, group: str) -> None:
    result = cli_runner.invoke(cli, [group, "--help"])
    assert result.exit_code == 0, f"{group} --help failed: {result.output}"


def test_all_groups_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    for name in EXPECTED_GROUPS:
        assert name in result.output, f"{name} missing from --help"


def test_short_help_flag(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "--root" in result.output


# --- Shop location ---


@pytest.mark.usefixtures("_isolated_shop")
class TestShopLocation:
    def test_root_option_places_data_dir(
        self, cli_runner: CliRunner, shop_root: Path, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        other = tmp_path_factory.mktemp("market-stall")
        result = cli_runner.invoke(cli, ["--root", str(other), "item", "list"])
        assert result.exit_code == 0, result.output
        assert (other / ".shopledger").is_dir()
        assert not (shop_root / ".shopledger").exists()

    def test_root_must_not_be_a_file(self, cli_runner: CliRunner, shop_root: Path) -> None:
        target = shop_root / "notes.txt"
        target.write_text("stock take", encoding="utf-8")
        result = cli_runner.invoke(cli, ["--root", str(target), "item", "list"])
        assert result.exit_code == 2

    def test_config_file_sets_root(self, cli_runner: CliRunner, shop_root: Path) -> None:
        shop_dir = shop_root / "branch"
        shop_dir.mkdir()
        config = shop_dir / "shopledger.toml"
        config.write_text('[shop]\nname = "Branch"\n', encoding="utf-8")
        result = cli_runner.invoke(cli, ["-c", str(config), "item", "list"])
        assert result.exit_code == 0, result.output
        assert (shop_dir / ".shopledger").is_dir()

    def test_missing_config_file_fails(self, cli_runner: CliRunner, shop_root: Path) -> None:
        result = cli_runner.invoke(cli, ["-c", str(shop_root / "absent.toml"), "item", "list"])
        assert result.exit_code == 1
        assert "not found" in result.output
