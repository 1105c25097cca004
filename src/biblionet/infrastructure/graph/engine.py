"""GraphEngine — NetworkX graph built from an adjacency matrix.

Built fresh per invocation and mutated in place by the reduction steps
(prune, simplify, remove isolates).  Degree and simplification use
NetworkX; layouts NetworkX lacks (sphere, MDS) and all community
detection go through python-igraph on a converted copy.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Generator, Sequence
from contextlib import contextmanager
from typing import Any

import igraph as ig
import networkx as nx
import numpy as np

logger = logging.getLogger(__name__)

_Graph = nx.MultiGraph | nx.Graph
Layout = dict[str, tuple[float, float]]
Partition = dict[str, int]

# Edge attribute used for weights on the igraph copy.
_IG_WEIGHT = "weight"


@contextmanager
def _seeded(seed: int | None) -> Generator[None]:
    """Run igraph with a private RNG seeded by *seed*.

    igraph has no getter for its current generator, so on exit the stdlib
    ``random`` module (igraph's default) is reinstalled.  A generator set by
    the caller through ``igraph.set_random_number_generator`` does not
    survive a seeded call; pass ``seed=None`` to leave it untouched.
    """
    if seed is None:
        yield
        return
    ig.set_random_number_generator(random.Random(seed))
    try:
        yield
    finally:
        ig.set_random_number_generator(random)


class GraphEngine:
    """Undirected bibliographic network with the reduction steps as methods.

    Vertices are keyed by their matrix label and carry an ``id`` attribute
    with the same value.  Until :meth:`simplify` collapses parallel edges the
    graph is a ``MultiGraph``, so degrees count every parallel edge.
    """

    def __init__(self, graph: _Graph) -> None:
        self._graph = graph

    @property
    def graph(self) -> _Graph:
        return self._graph

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_matrix(
        cls,
        values: np.ndarray,
        labels: Sequence[str],
        *,
        weight_attr: str | None = None,
    ) -> GraphEngine:
        """Build an undirected graph from a square matrix.

        Each unordered pair uses ``max(M[i, j], M[j, i])``.  Unweighted
        (*weight_attr* is None): the value is an edge count and that many
        parallel edges are added; the diagonal yields self-loops.  Weighted:
        one edge per non-zero pair with the value stored under *weight_attr*.
        """
        g: nx.MultiGraph = nx.MultiGraph()
        # Add all vertices first so isolated entities survive construction
        g.add_nodes_from((label, {"id": label}) for label in labels)

        sym = np.maximum(values, values.T)
        rows, cols = np.nonzero(np.triu(sym))
        for i, j in zip(rows.tolist(), cols.tolist(), strict=True):
            u, v = labels[i], labels[j]
            cell = sym[i, j]
            if weight_attr is None:
                g.add_edges_from([(u, v)] * int(cell))
            else:
                g.add_edge(u, v, **{weight_attr: float(cell)})

        logger.debug(
            "Built graph with %d vertices and %d edges",
            g.number_of_nodes(),
            g.number_of_edges(),
        )
        return cls(g)

    # ------------------------------------------------------------------
    # Degree and reduction
    # ------------------------------------------------------------------

    def degree(self) -> dict[str, int]:
        """Degree of every vertex; parallel edges count, loops count twice."""
        return dict(self._graph.degree())

    def prune(self, n: int) -> int:
        """Keep the *n* highest-degree vertices and return the threshold.

        The threshold is the n-th largest degree.  Vertices tied at the
        threshold are all kept, so more than *n* vertices may remain.
        """
        deg = self.degree()
        if not deg:
            return 0
        n = max(1, min(n, len(deg)))
        threshold = sorted(deg.values(), reverse=True)[n - 1]
        self._graph.remove_nodes_from([v for v, d in deg.items() if d < threshold])
        return threshold

    def simplify(
        self,
        *,
        remove_multiple: bool = True,
        remove_loops: bool = True,
        weight_attr: str | None = None,
    ) -> None:
        """Remove self-loops and/or collapse parallel edges.

        Collapsed edges sum their *weight_attr* values.
        """
        g = self._graph
        if remove_loops:
            if g.is_multigraph():
                loops = list(nx.selfloop_edges(g, keys=True))
            else:
                loops = list(nx.selfloop_edges(g))
            g.remove_edges_from(loops)

        if remove_multiple and g.is_multigraph():
            simple = nx.Graph()
            simple.add_nodes_from(g.nodes(data=True))
            for u, v, data in g.edges(data=True):
                if simple.has_edge(u, v):
                    if weight_attr is not None:
                        simple[u][v][weight_attr] += data.get(weight_attr, 0.0)
                else:
                    simple.add_edge(u, v, **data)
            self._graph = simple

    def remove_isolates(self) -> list[str]:
        """Delete vertices of degree zero; return the removed ids."""
        isolates = list(nx.isolates(self._graph))
        self._graph.remove_nodes_from(isolates)
        return isolates

    # ------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------

    def layout(self, name: str, *, seed: int | None = None) -> Layout:
        """Compute 2D coordinates with the named layout.

        Supported names: ``circle``, ``sphere``, ``mds``, ``fruchterman``,
        ``kamada``.  Edge weights are ignored by every layout.
        """
        try:
            fn = self._LAYOUTS[name]
        except KeyError:
            raise ValueError(f"Unknown layout: {name}") from None
        if self._graph.number_of_nodes() == 0:
            return {}
        pos = fn(self, seed)
        return {node: (float(xy[0]), float(xy[1])) for node, xy in pos.items()}

    def _circle(self, seed: int | None) -> dict[str, Any]:
        return nx.circular_layout(self._graph)

    def _fruchterman(self, seed: int | None) -> dict[str, Any]:
        return nx.spring_layout(self._graph, seed=seed)

    def _kamada(self, seed: int | None) -> dict[str, Any]:
        return nx.kamada_kawai_layout(self._graph, weight=None)

    def _sphere(self, seed: int | None) -> dict[str, Any]:
        ig_graph, names = self.to_igraph()
        # layout_sphere is 3D; the plot uses the x/y projection
        coords = ig_graph.layout_sphere().coords
        return {names[i]: (c[0], c[1]) for i, c in enumerate(coords)}

    def _mds(self, seed: int | None) -> dict[str, Any]:
        # igraph needs at least as many vertices as dimensions
        if self._graph.number_of_nodes() == 1:
            return {node: (0.0, 0.0) for node in self._graph}
        ig_graph, names = self.to_igraph()
        with _seeded(seed):
            coords = ig_graph.layout_mds(dim=2).coords
        return {names[i]: (c[0], c[1]) for i, c in enumerate(coords)}

    _LAYOUTS: dict[str, Callable[[GraphEngine, int | None], dict[str, Any]]] = {
        "circle": _circle,
        "sphere": _sphere,
        "mds": _mds,
        "fruchterman": _fruchterman,
        "kamada": _kamada,
    }

    # ------------------------------------------------------------------
    # Community detection
    # ------------------------------------------------------------------

    def partition(
        self,
        name: str,
        *,
        weight_attr: str | None = None,
        seed: int | None = None,
    ) -> Partition:
        """Partition vertices into communities numbered from 1.

        Supported names: ``optimal``, ``louvain``, ``infomap``,
        ``edge_betweenness``, ``walktrap``.  On a graph without edges every
        vertex is its own community.
        """
        if name not in self._CLUSTERINGS:
            raise ValueError(f"Unknown cluster method: {name}")
        if self._graph.number_of_nodes() == 0:
            return {}

        ig_graph, names = self.to_igraph(weight_attr=weight_attr)
        if ig_graph.ecount() == 0:
            return {node: i + 1 for i, node in enumerate(names)}

        weights = _IG_WEIGHT if weight_attr is not None else None
        with _seeded(seed):
            clustering = self._CLUSTERINGS[name](ig_graph, weights)
        return {names[i]: comm + 1 for i, comm in enumerate(clustering.membership)}

    _CLUSTERINGS: dict[str, Callable[[ig.Graph, str | None], ig.VertexClustering]] = {
        "optimal": lambda g, w: g.community_optimal_modularity(weights=w),
        "louvain": lambda g, w: g.community_multilevel(weights=w),
        "infomap": lambda g, w: g.community_infomap(edge_weights=w),
        # Betweenness treats weights as distances; co-occurrence counts are
        # similarities, so this one runs unweighted.
        "edge_betweenness": lambda g, w: g.community_edge_betweenness(directed=False).as_clustering(),
        "walktrap": lambda g, w: g.community_walktrap(weights=w).as_clustering(),
    }

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_igraph(self, *, weight_attr: str | None = None) -> tuple[ig.Graph, list[str]]:
        """Convert to an undirected igraph copy; return it with vertex names.

        Parallel edges and loops are preserved.  With *weight_attr*, edge
        values are copied to the igraph ``weight`` attribute.
        """
        g = self._graph
        names = list(g.nodes())
        mapping = {node: i for i, node in enumerate(names)}
        ig_graph = ig.Graph(
            n=len(mapping),
            edges=[(mapping[u], mapping[v]) for u, v in g.edges()],
            directed=False,
        )
        ig_graph.vs["name"] = names
        if weight_attr is not None:
            ig_graph.es[_IG_WEIGHT] = [
                float(data.get(weight_attr, 1.0)) for _, _, data in g.edges(data=True)
            ]
        return ig_graph, names
