"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator
from pathlib import Path

import pytest

from biblionet.config.settings import BiblionetSettings
from biblionet.services.plot import PlotService
from biblionet.services.result import ServiceResult
from biblionet.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_annotate(self) -> None:
        span = Span(name="prune")
        span.annotate("threshold", 4)
        span.end()
        assert span.to_dict()["annotations"] == {"threshold": 4}


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("layout") as span:
            assert span is None

    def test_no_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("layout") as span:
            assert span is None

    def test_nests_under_current(self) -> None:
        enable_telemetry()
        root = Span(name="root")
        token = _current_span.set(root)
        try:
            with trace_span("build") as child:
                assert child is not None
                assert get_current_span() is child
            assert get_current_span() is root
        finally:
            _current_span.reset(token)
        assert [c.name for c in root.children] == ["build"]
        assert root.children[0].end_time is not None


class TestTraced:
    def test_disabled_returns_result_unchanged(self) -> None:
        @traced
        def op() -> ServiceResult:
            return ServiceResult(ok=True, op="plot")

        assert op().meta is None

    def test_enabled_attaches_span_tree(self) -> None:
        @traced
        def op() -> ServiceResult:
            with trace_span("stage"):
                pass
            return ServiceResult(ok=True, op="plot", meta={"other": 1})

        enable_telemetry()
        result = op()
        assert result.meta is not None
        assert result.meta["other"] == 1
        tree = result.meta["telemetry"]
        assert tree["name"].endswith("op")
        assert tree["children"][0]["name"] == "stage"

    def test_exception_propagates_and_resets(self) -> None:
        @traced
        def op() -> ServiceResult:
            raise RuntimeError("boom")

        enable_telemetry()
        with pytest.raises(RuntimeError):
            op()
        assert get_current_span() is None

    def test_non_result_passthrough(self) -> None:
        @traced
        def op() -> int:
            return 3

        enable_telemetry()
        assert op() == 3


class TestPipelineSpans:
    def test_plot_records_stages(
        self, matrix_csv: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("BIBLIONET_CONFIG", raising=False)
        settings = BiblionetSettings.from_cli(start=tmp_path)
        enable_telemetry()
        result = PlotService(settings).plot(
            matrix_csv, output=tmp_path / "net.png", type="circle"
        )
        assert result.ok
        tree = result.meta["telemetry"]
        names = [c["name"] for c in tree["children"]]
        assert names == ["build", "prune", "simplify", "layout", "cluster", "render", "save"]
        prune = tree["children"][1]
        assert prune["annotations"]["threshold"] == 0
