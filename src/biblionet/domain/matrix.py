"""AdjacencyMatrix — validated, read-only network matrix.

A bibliographic network arrives as a square matrix whose rows and columns
are labeled with entity names (references, authors, sources, ...).  All
validation happens here so the graph engine can trust its input.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from biblionet.domain.errors import InvalidMatrixError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path


@dataclass(frozen=True)
class AdjacencyMatrix:
    """Square numeric matrix with one label per row/column.

    Attributes:
        labels: Vertex identifiers, in column order.
        values: ``float`` array of shape ``(n, n)``; marked read-only.
    """

    labels: tuple[str, ...]
    values: np.ndarray

    def __post_init__(self) -> None:
        try:
            values = np.array(self.values, dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidMatrixError(f"Matrix cells must be numeric: {exc}") from exc
        if values.ndim != 2:
            raise InvalidMatrixError(f"Matrix must be 2-dimensional, got {values.ndim} dimension(s)")
        rows, cols = values.shape
        if rows != cols:
            raise InvalidMatrixError(f"Matrix must be square, got {rows}x{cols}")
        if rows == 0:
            raise InvalidMatrixError("Matrix is empty")
        if len(self.labels) != cols:
            raise InvalidMatrixError(f"Expected {cols} labels, got {len(self.labels)}")
        if any(label == "" for label in self.labels):
            raise InvalidMatrixError("Matrix has missing labels")
        if len(set(self.labels)) != len(self.labels):
            dupes = sorted(lbl for lbl, count in Counter(self.labels).items() if count > 1)
            raise InvalidMatrixError(f"Duplicate labels: {', '.join(dupes)}")
        if not np.all(np.isfinite(values)):
            raise InvalidMatrixError("Matrix contains NaN or infinite cells")
        if np.any(values < 0):
            raise InvalidMatrixError("Matrix contains negative cells")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "labels", tuple(self.labels))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_array(cls, values: object, labels: Sequence[object]) -> AdjacencyMatrix:
        """Build from any array-like plus an explicit label list."""
        return cls(labels=tuple(_label(lbl) for lbl in labels), values=values)  # type: ignore[arg-type]

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> AdjacencyMatrix:
        """Build from a DataFrame whose columns carry the labels.

        Unlabeled columns are rejected. A non-default row index must list
        the same labels in the same order as the columns.
        """
        if isinstance(frame.columns, pd.RangeIndex):
            raise InvalidMatrixError("Matrix has no column labels")
        labels = [_label(c) for c in frame.columns]
        if not isinstance(frame.index, pd.RangeIndex):
            row_labels = [_label(r) for r in frame.index]
            if row_labels != labels:
                raise InvalidMatrixError("Row labels do not match column labels")
        try:
            arr = frame.to_numpy(dtype=float, copy=True)
        except (TypeError, ValueError) as exc:
            raise InvalidMatrixError(f"Matrix cells must be numeric: {exc}") from exc
        return cls(labels=tuple(labels), values=arr)

    @classmethod
    def read_csv(cls, path: Path) -> AdjacencyMatrix:
        """Read a CSV with a header row and the labels in the first column."""
        frame = pd.read_csv(path, index_col=0)
        return cls.from_frame(frame)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Number of vertices (rows == columns)."""
        return len(self.labels)

    @property
    def is_symmetric(self) -> bool:
        return bool(np.array_equal(self.values, self.values.T))

    @property
    def is_integral(self) -> bool:
        """True when every cell is a whole number (usable as an edge count)."""
        return bool(np.all(np.mod(self.values, 1) == 0))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.values, index=list(self.labels), columns=list(self.labels))


def _label(value: object) -> str:
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return ""
    return str(value).strip()
