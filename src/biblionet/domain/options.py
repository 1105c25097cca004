"""PlotOptions — every knob of the network plotting pipeline.

Frozen pydantic model with code-baked defaults.  The same model backs the
``[plot]`` section of ``biblionet.toml`` and the library entry point.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from biblionet.domain.types import ClusterMethod, LayoutType

DEFAULT_CURVATURE = 0.5


class PlotOptions(BaseModel):
    """Options for :class:`biblionet.services.plot.NetworkPlotter`.

    Attributes:
        n: Number of vertices to plot (clamped to the matrix size).
        type: Network map layout; unknown names fall back to ``kamada``.
        cluster: Community detection used for coloring; unknown names fall
            back to ``walktrap``.
        size: Scale vertex size by degree.
        noloops: Delete self-loops.
        remove_multiple: Collapse parallel edges into one.
        remove_isolates: Drop vertices left without edges.
        halo: Outline communities (ignored with ``cluster="null"``).
        curved: Edge curvature; ``True`` means a default curvature.
        weighted: ``None`` for an unweighted graph where cells are edge
            counts, ``True`` for a ``weight`` edge attribute, or the name of
            the edge attribute holding the cell value.
        edgesize: Edge width (maximum width when weighted).
        labelsize: Label size multiplier.
        label_distance: Label offset from the vertex.
        title: Plot title.
        seed: RNG seed for stochastic layouts and clusterings.
        vos_path: Directory holding ``VOSviewer.jar`` (default: cwd).
    """

    model_config = {"frozen": True}

    n: int = Field(default=20, ge=1)
    type: LayoutType = LayoutType.KAMADA
    cluster: ClusterMethod = ClusterMethod.WALKTRAP
    size: bool = False
    noloops: bool = True
    remove_multiple: bool = True
    remove_isolates: bool = False
    halo: bool = False
    curved: bool | float = False
    weighted: bool | str | None = None
    edgesize: float = Field(default=1.0, gt=0)
    labelsize: float = Field(default=1.0, gt=0)
    label_distance: float = 0.4
    title: str = "Plot"
    seed: int | None = 42
    vos_path: Path | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_layout(cls, value: object) -> LayoutType:
        return LayoutType.coerce(value)

    @field_validator("cluster", mode="before")
    @classmethod
    def _coerce_cluster(cls, value: object) -> ClusterMethod:
        return ClusterMethod.coerce(value)

    @field_validator("weighted", mode="before")
    @classmethod
    def _normalize_weighted(cls, value: object) -> object:
        # False and "" both mean "unweighted"
        if value is False or value == "":
            return None
        return value

    @property
    def weight_attr(self) -> str | None:
        """Name of the edge attribute carrying cell values, if weighted."""
        if self.weighted is None or self.weighted is False:
            return None
        if self.weighted is True:
            return "weight"
        return str(self.weighted)

    @property
    def curvature(self) -> float:
        if self.curved is True:
            return DEFAULT_CURVATURE
        if self.curved is False:
            return 0.0
        return float(self.curved)

    @property
    def external(self) -> bool:
        """True when the layout is delegated to VOSviewer."""
        return self.type is LayoutType.VOSVIEWER
