"""Tests for the root biblionet CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from biblionet import __version__
from biblionet.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "biblionet" in result.output
    assert "plot" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_missing_config_file_fails_run(cli_runner: CliRunner, matrix_csv: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", "missing.toml", "plot", str(matrix_csv)])
    assert result.exit_code == 1
    assert "Config file not found" in result.output
