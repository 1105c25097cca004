"""VOSviewer integration — Pajek export plus a blocking ``java -jar`` call.

VOSviewer draws the map itself, so nothing flows back into the plotting
pipeline except the exit status.  A missing jar, a missing ``java`` binary,
a timeout or a non-zero exit are reported as warnings and never interrupt
the pipeline.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

JAR_NAME = "VOSviewer.jar"
NETWORK_FILE = "network.net"
DOWNLOAD_URL = "http://www.vosviewer.com/download"


@dataclass(frozen=True)
class VOSviewerRun:
    """Outcome of handing a network to VOSviewer.

    Attributes:
        network_file: Exported Pajek file, or None if nothing was exported.
        exit_status: VOSviewer's exit code, or None if it never ran/finished.
        warning: Human-readable problem description, if any.
    """

    network_file: Path | None = None
    exit_status: int | None = None
    warning: str | None = None


class VOSviewerRenderer:
    """Export a graph as Pajek and open it in VOSviewer.

    Args:
        directory: Directory holding ``VOSviewer.jar``; the network file is
            written there too.  Defaults to the current working directory.
        java: Java executable used to launch the jar.
        timeout: Seconds to wait for VOSviewer to exit (None waits forever).
    """

    def __init__(
        self,
        directory: Path | None = None,
        *,
        java: str = "java",
        timeout: float | None = None,
    ) -> None:
        # Absolute, because VOSviewer runs with the jar directory as its cwd
        self._directory = (directory if directory is not None else Path.cwd()).resolve()
        self._java = java
        self._timeout = timeout

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def jar(self) -> Path:
        return self._directory / JAR_NAME

    def available(self) -> bool:
        """True when ``VOSviewer.jar`` exists in the configured directory."""
        return self.jar.is_file()

    def command(self, network_file: Path) -> Sequence[str]:
        return [self._java, "-jar", str(self.jar), "-pajek_network", str(network_file)]

    # ------------------------------------------------------------------
    # Port operations
    # ------------------------------------------------------------------

    def export(self, graph: nx.Graph, *, weight_attr: str | None = None) -> Path:
        """Write *graph* as a Pajek network file and return its path.

        Only vertex labels and edge weights are written; Pajek has no room
        for the plotting attributes.
        """
        export: nx.Graph = nx.MultiGraph() if graph.is_multigraph() else nx.Graph()
        export.add_nodes_from(graph.nodes())
        for u, v, data in graph.edges(data=True):
            weight = float(data.get(weight_attr, 1.0)) if weight_attr is not None else 1.0
            export.add_edge(u, v, weight=weight)

        self._directory.mkdir(parents=True, exist_ok=True)
        network_file = self._directory / NETWORK_FILE
        nx.write_pajek(export, network_file)
        logger.debug("Wrote Pajek network to %s", network_file)
        return network_file

    def invoke(self, network_file: Path) -> int:
        """Run VOSviewer on *network_file* and block until it exits.

        Raises:
            OSError: The Java executable could not be started.
            subprocess.TimeoutExpired: VOSviewer outlived the timeout.
        """
        cmd = self.command(network_file)
        logger.debug("Launching VOSviewer: %s", " ".join(cmd))
        completed = subprocess.run(
            cmd,
            cwd=self._directory,
            check=False,
            timeout=self._timeout,
        )
        return completed.returncode

    def run(self, graph: nx.Graph, *, weight_attr: str | None = None) -> VOSviewerRun:
        """Export and invoke, turning every failure into a warning."""
        if not self.available():
            msg = (
                f"{JAR_NAME} does not exist in the path {self._directory}. "
                f"Please download it from {DOWNLOAD_URL} (Java version for other systems)"
            )
            logger.warning(msg)
            return VOSviewerRun(warning=msg)

        network_file = self.export(graph, weight_attr=weight_attr)
        try:
            status = self.invoke(network_file)
        except subprocess.TimeoutExpired:
            msg = f"VOSviewer did not exit within {self._timeout}s"
            logger.warning(msg)
            return VOSviewerRun(network_file=network_file, warning=msg)
        except OSError as exc:
            msg = f"Could not launch VOSviewer with '{self._java}': {exc}"
            logger.warning(msg)
            return VOSviewerRun(network_file=network_file, warning=msg)

        if status != 0:
            msg = f"VOSviewer exited with status {status}"
            logger.warning(msg)
            return VOSviewerRun(network_file=network_file, exit_status=status, warning=msg)
        return VOSviewerRun(network_file=network_file, exit_status=status)
