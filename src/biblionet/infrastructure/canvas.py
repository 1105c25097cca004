"""Matplotlib canvas for network maps.

Rendering always targets an explicit ``Axes``; figures are created with
``matplotlib.figure.Figure`` directly so no pyplot global state is touched.
Vertex ``size``/``color`` and edge ``width`` attributes set by the pipeline
drive the drawing.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Any

import matplotlib
import networkx as nx
from matplotlib.colors import to_hex
from matplotlib.figure import Figure

if TYPE_CHECKING:
    from pathlib import Path

    from matplotlib.axes import Axes

logger = logging.getLogger(__name__)

# ColorBrewer Set3, the 12-color categorical palette used for communities.
SET3: tuple[str, ...] = tuple(to_hex(c).upper() for c in matplotlib.colormaps["Set3"].colors)
DEFAULT_VERTEX_COLOR = SET3[0]

# Vertex size units -> matplotlib marker area (points^2).
NODE_AREA_SCALE = 12.0
HALO_AREA_SCALE = 6.0
BASE_LABEL_SIZE = 10.0
EDGE_COLOR = "darkgrey"
WITHIN_EDGE_COLOR = "black"
CROSSING_EDGE_COLOR = "red"


def community_color(index: int) -> str:
    """Palette color for a 1-based community index.

    Indices past 12 wrap around, so distinct communities may share a color.
    """
    return SET3[(index - 1) % len(SET3)]


def new_axes(*, figsize: tuple[float, float] = (10.0, 10.0), dpi: int = 100) -> Axes:
    """Create a standalone figure and return its single Axes."""
    fig = Figure(figsize=figsize, dpi=dpi)
    return fig.subplots()


def save_figure(fig: Figure, path: Path, *, dpi: int = 100) -> Path:
    """Write *fig* to *path*; the format follows the file suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    logger.debug("Saved network map to %s", path)
    return path


def draw_network(
    ax: Axes,
    graph: nx.Graph,
    layout: dict[str, tuple[float, float]],
    *,
    partition: dict[str, int] | None = None,
    halo: bool = False,
    curvature: float = 0.0,
    labelsize: float = 1.0,
    label_distance: float = 0.4,
    title: str | None = None,
) -> None:
    """Draw *graph* on *ax* at the positions in *layout*.

    With *halo* and a *partition*, each community gets a translucent halo
    in its color and edges between communities are drawn in red.
    """
    if title:
        ax.set_title(title)
    ax.set_axis_off()
    if graph.number_of_nodes() == 0:
        return

    nodes = list(graph.nodes())
    sizes = {v: float(graph.nodes[v].get("size", 5.0)) for v in nodes}
    outline = halo and bool(partition)

    if outline:
        assert partition is not None
        _draw_halos(ax, layout, partition, sizes)

    _draw_edges(ax, graph, layout, partition if outline else None, curvature)

    nx.draw_networkx_nodes(
        graph,
        layout,
        ax=ax,
        nodelist=nodes,
        node_size=[sizes[v] * NODE_AREA_SCALE for v in nodes],
        node_color=[graph.nodes[v].get("color", DEFAULT_VERTEX_COLOR) for v in nodes],
        edgecolors="black",
        linewidths=0.8,
    )

    ys = [xy[1] for xy in layout.values()]
    span = (max(ys) - min(ys)) or 1.0
    dy = label_distance * 0.05 * span
    nx.draw_networkx_labels(
        graph,
        {v: (x, y + dy) for v, (x, y) in layout.items()},
        ax=ax,
        labels={v: str(graph.nodes[v].get("id", v)) for v in nodes},
        font_size=BASE_LABEL_SIZE * labelsize,
        font_color="black",
        font_weight="normal",
        verticalalignment="bottom",
    )
    ax.margins(0.1)


def _draw_edges(
    ax: Axes,
    graph: nx.Graph,
    layout: dict[str, tuple[float, float]],
    partition: dict[str, int] | None,
    curvature: float,
) -> None:
    edges = list(graph.edges(data="width", default=1.0))
    if not edges:
        return
    if partition is None:
        colors: Any = EDGE_COLOR
    else:
        colors = [
            CROSSING_EDGE_COLOR if partition.get(u) != partition.get(v) else WITHIN_EDGE_COLOR
            for u, v, _ in edges
        ]

    kwargs: dict[str, Any] = {}
    if curvature:
        # Curved edges need FancyArrowPatch, which networkx only uses with arrows
        kwargs = {"arrows": True, "arrowstyle": "-", "connectionstyle": f"arc3,rad={curvature}"}

    nx.draw_networkx_edges(
        graph,
        layout,
        ax=ax,
        edgelist=[(u, v) for u, v, _ in edges],
        width=[float(w) for _, _, w in edges],
        edge_color=colors,
        **kwargs,
    )


def _draw_halos(
    ax: Axes,
    layout: dict[str, tuple[float, float]],
    partition: dict[str, int],
    sizes: dict[str, float],
) -> None:
    groups: dict[int, list[str]] = defaultdict(list)
    for node, comm in partition.items():
        if node in layout:
            groups[comm].append(node)
    for comm, members in sorted(groups.items()):
        ax.scatter(
            [layout[v][0] for v in members],
            [layout[v][1] for v in members],
            s=[sizes.get(v, 5.0) * NODE_AREA_SCALE * HALO_AREA_SCALE for v in members],
            c=community_color(comm),
            alpha=0.35,
            linewidths=0,
            zorder=0,
        )
