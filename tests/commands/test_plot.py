"""Tests for the plot CLI command."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest
from click.testing import CliRunner

from biblionet.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestPlotCommand:
    def test_plot_json(self, cli_runner: CliRunner, matrix_csv: Path, tmp_path: Path) -> None:
        out = tmp_path / "map.png"
        result = cli_runner.invoke(
            cli,
            ["--json", "plot", str(matrix_csv), "--type", "circle", "-n", "2", "-o", str(out)],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"]["threshold"] == 7
        assert [v["id"] for v in data["data"]["vertices"]] == ["C", "D"]
        assert out.is_file()

    def test_default_output_from_config(
        self, cli_runner: CliRunner, matrix_csv: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "biblionet.toml").write_text(
            '[plot]\ntype = "circle"\ncluster = "null"\n\n[render]\noutput = "maps/net.svg"\n'
        )
        result = cli_runner.invoke(cli, ["--json", "plot", str(matrix_csv)])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["cluster"] == "null"
        assert (tmp_path / "maps" / "net.svg").is_file()

    def test_flags_override_config(
        self, cli_runner: CliRunner, matrix_csv: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "biblionet.toml").write_text('[plot]\ntype = "circle"\nremove_isolates = false\n')
        result = cli_runner.invoke(
            cli, ["--json", "plot", str(matrix_csv), "--remove-isolates", "--cluster", "louvain"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data["vertex_count"] == 6
        assert data["cluster"] == "louvain"

    def test_weighted_curved_halo(
        self, cli_runner: CliRunner, matrix_csv: Path, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "--json", "plot", str(matrix_csv),
                "--type", "circle", "--weighted", "--size", "--halo", "--curved",
                "-o", str(tmp_path / "w.png"),
            ],
        )
        assert result.exit_code == 0, result.output
        vertices = json.loads(result.output)["data"]["vertices"]
        assert max(v["size"] for v in vertices) == 20.0

    def test_quiet_lists_vertex_ids(self, cli_runner: CliRunner, matrix_csv: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "plot", str(matrix_csv), "--type", "circle", "-n", "2"])
        assert result.exit_code == 0, result.output
        assert result.output.split() == ["C", "D"]

    def test_human_output(self, cli_runner: CliRunner, matrix_csv: Path) -> None:
        result = cli_runner.invoke(cli, ["plot", str(matrix_csv), "--type", "circle"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "threshold: 0" in result.output

    def test_invalid_matrix_exits_1(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.csv"
        bad.write_text(",a,a\na,0,1\na,1,0\n")
        result = cli_runner.invoke(cli, ["--json", "plot", str(bad)])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "INVALID_MATRIX"

    def test_missing_jar_warns_on_stderr(
        self, cli_runner: CliRunner, matrix_csv: Path, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(
            cli, ["plot", str(matrix_csv), "--type", "vosviewer", "--vos-path", str(tmp_path)]
        )
        assert result.exit_code == 0
        assert "WARNING: VOSviewer.jar does not exist" in result.output

    def test_missing_matrix_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["plot", str(tmp_path / "nope.csv")])
        assert result.exit_code == 2

    def test_plot_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["plot", "--help"])
        assert result.exit_code == 0
        assert "MATRIX" in result.output
        assert "--remove-multiple" in result.output

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["plot", "--examples"])
        assert result.exit_code == 0
        assert "biblionet plot cocitation.csv" in result.output


@pytest.mark.usefixtures("_isolated_cwd")
class TestRelativeVosPath:
    def test_relative_vos_path_reaches_jar(
        self,
        cli_runner: CliRunner,
        matrix_csv: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        tools = tmp_path / "tools"
        tools.mkdir()
        (tools / "VOSviewer.jar").write_bytes(b"")

        def java(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
            cwd = Path(str(kwargs["cwd"]))
            found = (cwd / cmd[2]).is_file() and (cwd / cmd[4]).is_file()
            return subprocess.CompletedProcess(cmd, 0 if found else 3)

        monkeypatch.setattr(subprocess, "run", java)
        result = cli_runner.invoke(
            cli, ["--json", "plot", str(matrix_csv), "--type", "vosviewer", "--vos-path", "tools"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["warnings"] == []
        assert data["data"]["vosviewer"]["exit_status"] == 0
