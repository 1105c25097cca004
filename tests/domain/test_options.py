"""Tests for PlotOptions defaults, coercion and derived properties."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from biblionet.domain.options import DEFAULT_CURVATURE, PlotOptions
from biblionet.domain.types import ClusterMethod, LayoutType


class TestDefaults:
    def test_defaults(self) -> None:
        opts = PlotOptions()
        assert opts.n == 20
        assert opts.type is LayoutType.KAMADA
        assert opts.cluster is ClusterMethod.WALKTRAP
        assert opts.size is False
        assert opts.noloops is True
        assert opts.remove_multiple is True
        assert opts.remove_isolates is False
        assert opts.halo is False
        assert opts.weight_attr is None
        assert opts.title == "Plot"
        assert opts.vos_path is None

    def test_frozen(self) -> None:
        opts = PlotOptions()
        with pytest.raises(ValidationError):
            opts.n = 5  # type: ignore[misc]

    @pytest.mark.parametrize("field", ["n", "edgesize", "labelsize"])
    def test_positive_fields(self, field: str) -> None:
        with pytest.raises(ValidationError):
            PlotOptions(**{field: 0})


class TestCoercion:
    def test_layout_from_string(self) -> None:
        assert PlotOptions(type="mds").type is LayoutType.MDS

    def test_unknown_layout(self) -> None:
        assert PlotOptions(type="nope").type is LayoutType.KAMADA

    def test_cluster_none(self) -> None:
        assert PlotOptions(cluster=None).cluster is ClusterMethod.NULL

    def test_vos_path_coerced(self) -> None:
        assert PlotOptions(vos_path="tools").vos_path == Path("tools")


class TestDerived:
    @pytest.mark.parametrize(
        ("weighted", "expected"),
        [(None, None), (False, None), ("", None), (True, "weight"), ("count", "count")],
    )
    def test_weight_attr(self, weighted: object, expected: str | None) -> None:
        assert PlotOptions(weighted=weighted).weight_attr == expected

    def test_curvature(self) -> None:
        assert PlotOptions().curvature == 0.0
        assert PlotOptions(curved=True).curvature == DEFAULT_CURVATURE
        assert PlotOptions(curved=0.2).curvature == 0.2

    def test_external(self) -> None:
        assert PlotOptions(type="vosviewer").external is True
        assert PlotOptions(type="circle").external is False
