"""Shared pytest fixtures for biblionet tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest
from click.testing import CliRunner

from biblionet.domain.matrix import AdjacencyMatrix

# Two triangles (A-B-C, D-E-F) joined by C-D, plus the isolate G.
_LABELS = ["A", "B", "C", "D", "E", "F", "G"]
_CELLS = [
    [0, 3, 3, 0, 0, 0, 0],
    [3, 0, 3, 0, 0, 0, 0],
    [3, 3, 0, 1, 0, 0, 0],
    [0, 0, 1, 0, 3, 3, 0],
    [0, 0, 0, 3, 0, 3, 0],
    [0, 0, 0, 3, 3, 0, 0],
    [0, 0, 0, 0, 0, 0, 0],
]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def cocitation_frame() -> pd.DataFrame:
    """Labeled co-citation counts with two clear communities."""
    return pd.DataFrame(_CELLS, index=_LABELS, columns=_LABELS)


@pytest.fixture
def cocitation_matrix(cocitation_frame: pd.DataFrame) -> AdjacencyMatrix:
    return AdjacencyMatrix.from_frame(cocitation_frame)


@pytest.fixture
def single_edge_matrix() -> AdjacencyMatrix:
    """10x10 matrix whose only non-zero pair is R3-R6."""
    values = np.zeros((10, 10))
    values[2, 5] = values[5, 2] = 1
    return AdjacencyMatrix.from_array(values, [f"R{i}" for i in range(1, 11)])


@pytest.fixture
def matrix_csv(tmp_path: Path, cocitation_frame: pd.DataFrame) -> Path:
    """The co-citation matrix written as CSV (header row + label column)."""
    path = tmp_path / "cocitation.csv"
    cocitation_frame.to_csv(path)
    return path


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in a temp directory with no config file or env overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")``.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BIBLIONET_CONFIG", raising=False)
