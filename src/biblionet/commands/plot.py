"""Command: plot a bibliographic network from an adjacency matrix CSV."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from biblionet.commands._base import BiblioCommand
from biblionet.domain.options import DEFAULT_CURVATURE

if TYPE_CHECKING:
    from biblionet.commands._context import AppContext

_LAYOUTS = ["circle", "sphere", "mds", "fruchterman", "kamada", "vosviewer"]
_CLUSTERS = ["null", "optimal", "louvain", "infomap", "edge_betweenness", "walktrap"]


@click.command(
    cls=BiblioCommand,
    examples="""\
  biblionet plot cocitation.csv
  biblionet plot cocitation.csv -n 30 --type fruchterman --cluster louvain -o map.svg
  biblionet plot coupling.csv --weighted --size --halo --curved
  biblionet plot keywords.csv --type vosviewer --vos-path ~/tools/vosviewer
  biblionet --json plot cocitation.csv --cluster null""",
)
@click.argument("matrix", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-n", "n", type=click.IntRange(min=1), default=None, help="Number of vertices to plot.")
@click.option(
    "--type",
    "layout",
    type=click.Choice(_LAYOUTS, case_sensitive=False),
    default=None,
    help="Network map layout.",
)
@click.option(
    "--cluster",
    type=click.Choice(_CLUSTERS, case_sensitive=False),
    default=None,
    help="Community detection used to color vertices.",
)
@click.option("--size/--no-size", default=None, help="Scale vertex size by degree.")
@click.option("--loops/--noloops", "loops", default=None, help="Keep or delete self-loops.")
@click.option(
    "--multiple/--remove-multiple",
    "multiple",
    default=None,
    help="Keep or collapse parallel edges.",
)
@click.option(
    "--remove-isolates/--keep-isolates",
    default=None,
    help="Drop or keep vertices left without edges.",
)
@click.option("--halo/--no-halo", default=None, help="Outline communities.")
@click.option(
    "--curved",
    type=float,
    is_flag=False,
    flag_value=DEFAULT_CURVATURE,
    default=None,
    help=f"Curve edges (optional curvature, default {DEFAULT_CURVATURE}).",
)
@click.option("--weighted/--unweighted", default=None, help="Treat cells as edge weights.")
@click.option("--weight-attr", default=None, help="Edge attribute name for weights (implies --weighted).")
@click.option("--edgesize", type=click.FloatRange(min=0, min_open=True), default=None, help="Edge width.")
@click.option(
    "--labelsize",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Label size multiplier.",
)
@click.option("--label-distance", type=float, default=None, help="Label offset from the vertex.")
@click.option("--title", default=None, help="Plot title.")
@click.option("--seed", type=int, default=None, help="RNG seed for layouts and clusterings.")
@click.option(
    "--vos-path",
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Directory holding VOSviewer.jar.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Image file to write (format from suffix).",
)
@click.pass_obj
def plot(
    app: AppContext,
    matrix: Path,
    n: int | None,
    layout: str | None,
    cluster: str | None,
    size: bool | None,
    loops: bool | None,
    multiple: bool | None,
    remove_isolates: bool | None,
    halo: bool | None,
    curved: float | None,
    weighted: bool | None,
    weight_attr: str | None,
    edgesize: float | None,
    labelsize: float | None,
    label_distance: float | None,
    title: str | None,
    seed: int | None,
    vos_path: Path | None,
    output: Path | None,
) -> None:
    """Plot the top-N vertices of the network in MATRIX.

    MATRIX is a square CSV with vertex labels in the header row and first
    column.
    """
    from biblionet.services.plot import PlotService

    if weight_attr:
        weighted_value: bool | str | None = weight_attr
    else:
        weighted_value = weighted

    result = PlotService(app.settings).plot(
        matrix,
        output=output,
        n=n,
        type=layout,
        cluster=cluster,
        size=size,
        noloops=None if loops is None else not loops,
        remove_multiple=None if multiple is None else not multiple,
        remove_isolates=remove_isolates,
        halo=halo,
        curved=curved,
        weighted=weighted_value,
        edgesize=edgesize,
        labelsize=labelsize,
        label_distance=label_distance,
        title=title,
        seed=seed,
        vos_path=vos_path,
    )
    app.emit(result)
