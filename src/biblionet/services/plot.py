"""Network plotting pipeline.

``NetworkPlotter`` is the library entry point: adjacency matrix in, reduced
and annotated graph out, with a matplotlib rendering or a VOSviewer hand-off
as the side effect.  ``PlotService`` wraps it for the CLI, reading the
matrix from disk, saving the figure and reporting a ``ServiceResult``.

Stages, in order: build → size → prune → simplify → remove isolates →
layout (or VOSviewer) → cluster/color → render.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import networkx as nx
import pandas as pd

from biblionet.domain.errors import InvalidMatrixError
from biblionet.domain.matrix import AdjacencyMatrix
from biblionet.domain.options import PlotOptions
from biblionet.domain.types import ClusterMethod
from biblionet.infrastructure.canvas import (
    DEFAULT_VERTEX_COLOR,
    SET3,
    community_color,
    draw_network,
    new_axes,
    save_figure,
)
from biblionet.infrastructure.graph.engine import GraphEngine, Layout, Partition
from biblionet.infrastructure.vosviewer import VOSviewerRenderer, VOSviewerRun
from biblionet.services.result import ServiceError, ServiceResult
from biblionet.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from pathlib import Path

    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

    from biblionet.config.settings import BiblionetSettings

logger = logging.getLogger(__name__)

MAX_VERTEX_SIZE = 20.0
DEFAULT_VERTEX_SIZE = 5.0


@dataclass
class NetworkPlot:
    """Everything one pipeline run produced.

    ``graph`` is always the final reduced graph.  ``layout``, ``partition``
    and ``figure`` are None when VOSviewer drew the map (``partition`` is
    also None with ``cluster="null"``).
    """

    graph: nx.Graph
    threshold: int
    layout: Layout | None = None
    partition: Partition | None = None
    figure: Figure | None = None
    vosviewer: VOSviewerRun | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def community_count(self) -> int:
        return len(set(self.partition.values())) if self.partition else 0


class NetworkPlotter:
    """Build, reduce, lay out, color and draw a bibliographic network.

    Usage::

        plotter = NetworkPlotter(PlotOptions(n=30, type="fruchterman"))
        result = plotter.plot(matrix_frame)
        result.figure.savefig("cocitation.png")
    """

    def __init__(
        self,
        options: PlotOptions | None = None,
        *,
        renderer: VOSviewerRenderer | None = None,
    ) -> None:
        self._options = options or PlotOptions()
        self._renderer = renderer

    @property
    def options(self) -> PlotOptions:
        return self._options

    def plot(
        self,
        matrix: AdjacencyMatrix | pd.DataFrame,
        *,
        ax: Axes | None = None,
        render: bool = True,
    ) -> NetworkPlot:
        """Run the full pipeline on *matrix*.

        Args:
            matrix: The network matrix (a labeled DataFrame is validated).
            ax: Render target; a new figure is created when omitted.
            render: Set False to compute layout and colors without drawing.

        Raises:
            InvalidMatrixError: The matrix cannot be turned into a network.
        """
        opts = self._options
        if isinstance(matrix, pd.DataFrame):
            matrix = AdjacencyMatrix.from_frame(matrix)
        weight_attr = opts.weight_attr
        if weight_attr is None and not matrix.is_integral:
            raise InvalidMatrixError(
                "Unweighted networks need whole-number edge counts; "
                "use weighted=True for fractional cells"
            )

        with trace_span("build") as span:
            engine = GraphEngine.from_matrix(matrix.values, matrix.labels, weight_attr=weight_attr)
            if span:
                span.annotate("vertices", engine.graph.number_of_nodes())
                span.annotate("edges", engine.graph.number_of_edges())

        self._assign_sizes(engine)

        with trace_span("prune") as span:
            threshold = engine.prune(opts.n)
            if span:
                span.annotate("threshold", threshold)
                span.annotate("vertices", engine.graph.number_of_nodes())

        with trace_span("simplify"):
            engine.simplify(
                remove_multiple=opts.remove_multiple,
                remove_loops=opts.noloops,
                weight_attr=weight_attr,
            )
            if opts.remove_isolates:
                removed = engine.remove_isolates()
                logger.debug("Removed %d isolated vertices", len(removed))

        graph = engine.graph
        nx.set_node_attributes(graph, engine.degree(), "degree")
        logger.debug(
            "Reduced network: threshold=%d vertices=%d edges=%d",
            threshold,
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )

        if opts.external:
            return self._hand_off(graph, threshold, weight_attr)

        with trace_span("layout") as span:
            layout = engine.layout(opts.type.value, seed=opts.seed)
            if span:
                span.annotate("layout", opts.type.value)
        nx.set_node_attributes(graph, layout, "pos")

        with trace_span("cluster") as span:
            partition = self._assign_colors(engine, weight_attr)
            if span and partition is not None:
                span.annotate("communities", len(set(partition.values())))

        self._assign_widths(graph, weight_attr)

        figure = None
        if render:
            with trace_span("render"):
                target = ax if ax is not None else new_axes()
                draw_network(
                    target,
                    graph,
                    layout,
                    partition=partition,
                    halo=opts.halo and opts.cluster is not ClusterMethod.NULL,
                    curvature=opts.curvature,
                    labelsize=opts.labelsize,
                    label_distance=opts.label_distance,
                    title=opts.title,
                )
                figure = target.figure

        return NetworkPlot(
            graph=graph,
            threshold=threshold,
            layout=layout,
            partition=partition,
            figure=figure,
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _assign_sizes(self, engine: GraphEngine) -> None:
        """Set vertex ``size`` from the full-graph degree distribution."""
        deg = engine.degree()
        max_deg = max(deg.values(), default=0)
        if self._options.size and max_deg > 0:
            sizes = {v: d / max_deg * MAX_VERTEX_SIZE for v, d in deg.items()}
        else:
            if self._options.size:
                logger.debug("All degrees are zero; using constant vertex size")
            sizes = dict.fromkeys(deg, DEFAULT_VERTEX_SIZE)
        nx.set_node_attributes(engine.graph, sizes, "size")

    def _assign_colors(self, engine: GraphEngine, weight_attr: str | None) -> Partition | None:
        graph = engine.graph
        if self._options.cluster is ClusterMethod.NULL:
            nx.set_node_attributes(graph, DEFAULT_VERTEX_COLOR, "color")
            return None

        partition = engine.partition(
            self._options.cluster.value,
            weight_attr=weight_attr,
            seed=self._options.seed,
        )
        communities = len(set(partition.values()))
        if communities > len(SET3):
            logger.debug("%d communities exceed the %d-color palette; colors repeat", communities, len(SET3))
        nx.set_node_attributes(graph, partition, "community")
        nx.set_node_attributes(graph, {v: community_color(c) for v, c in partition.items()}, "color")
        return partition

    def _assign_widths(self, graph: nx.Graph, weight_attr: str | None) -> None:
        """Set edge ``width``: constant, or scaled by weight when weighted."""
        edgesize = self._options.edgesize
        edges = list(graph.edges(data=True))
        if weight_attr is None or not edges:
            for _, _, data in edges:
                data["width"] = edgesize
            return

        weights = [float(data.get(weight_attr, 1.0)) for _, _, data in edges]
        lowest = min(weights)
        top = max(w + lowest for w in weights)
        for (_, _, data), w in zip(edges, weights, strict=True):
            data["width"] = (w + lowest) / top * edgesize if top > 0 else edgesize

    def _hand_off(self, graph: nx.Graph, threshold: int, weight_attr: str | None) -> NetworkPlot:
        renderer = self._renderer or VOSviewerRenderer(self._options.vos_path)
        with trace_span("vosviewer"):
            run = renderer.run(graph, weight_attr=weight_attr)
        warnings = [run.warning] if run.warning else []
        return NetworkPlot(graph=graph, threshold=threshold, vosviewer=run, warnings=warnings)


class PlotService:
    """CLI-facing wrapper: CSV in, image file and ServiceResult out."""

    def __init__(self, settings: BiblionetSettings) -> None:
        self._settings = settings

    def options(self, **overrides: Any) -> PlotOptions:
        """Merge non-None *overrides* over the configured ``[plot]`` defaults."""
        base = self._settings.plot.model_dump()
        base.update({k: v for k, v in overrides.items() if v is not None})
        return PlotOptions.model_validate(base)

    @traced
    def plot(
        self,
        matrix_path: Path,
        *,
        output: Path | None = None,
        **overrides: Any,
    ) -> ServiceResult:
        """Plot the network stored in the CSV at *matrix_path*.

        Args:
            matrix_path: CSV with a header row and labels in the first column.
            output: Image path (default: ``[render] output``); the suffix
                picks the format.  Unused when VOSviewer draws the map.
            **overrides: PlotOptions fields; None means "use the default".
        """
        op = "plot"
        options = self.options(**overrides)

        try:
            matrix = AdjacencyMatrix.read_csv(matrix_path)
        except InvalidMatrixError as exc:
            return _invalid(op, exc, matrix_path)
        except (OSError, ValueError) as exc:
            return ServiceResult(
                ok=False,
                op=op,
                error=ServiceError(
                    code="READ_FAILED",
                    message=f"Cannot read matrix from {matrix_path}: {exc}",
                    detail={"path": str(matrix_path)},
                ),
            )

        render_cfg = self._settings.render
        vos_cfg = self._settings.vosviewer
        renderer = VOSviewerRenderer(options.vos_path, java=vos_cfg.java, timeout=vos_cfg.timeout)
        plotter = NetworkPlotter(options, renderer=renderer)

        try:
            ax = None if options.external else new_axes(figsize=render_cfg.figsize, dpi=render_cfg.dpi)
            result = plotter.plot(matrix, ax=ax)
        except InvalidMatrixError as exc:
            return _invalid(op, exc, matrix_path)

        data = _summarize(result, options)
        if result.figure is not None:
            target = output or render_cfg.output
            with trace_span("save"):
                save_figure(result.figure, target, dpi=render_cfg.dpi)
            data["output"] = str(target)

        return ServiceResult(ok=True, op=op, data=data, warnings=result.warnings)


def _invalid(op: str, exc: InvalidMatrixError, path: Path) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(
            code="INVALID_MATRIX",
            message=str(exc),
            detail={"path": str(path)},
        ),
    )


def _summarize(result: NetworkPlot, options: PlotOptions) -> dict[str, Any]:
    """Build the JSON-safe payload for a plot result."""
    g = result.graph
    vertices: list[dict[str, Any]] = []
    for node, attrs in g.nodes(data=True):
        item: dict[str, Any] = {
            "id": attrs.get("id", node),
            "degree": attrs.get("degree", 0),
            "size": round(float(attrs.get("size", DEFAULT_VERTEX_SIZE)), 4),
        }
        if "color" in attrs:
            item["color"] = attrs["color"]
        if "community" in attrs:
            item["community"] = attrs["community"]
        if "pos" in attrs:
            x, y = attrs["pos"]
            item["x"] = round(x, 6)
            item["y"] = round(y, 6)
        vertices.append(item)
    vertices.sort(key=lambda v: (-v["degree"], v["id"]))

    data: dict[str, Any] = {
        "threshold": result.threshold,
        "vertex_count": g.number_of_nodes(),
        "edge_count": g.number_of_edges(),
        "layout": options.type.value,
        "cluster": None if options.external else options.cluster.value,
        "community_count": result.community_count,
        "vertices": vertices,
    }
    if result.vosviewer is not None:
        run = result.vosviewer
        data["vosviewer"] = {
            "network_file": str(run.network_file) if run.network_file else None,
            "exit_status": run.exit_status,
        }
    return data
