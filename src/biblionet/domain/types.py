"""Layout and clustering enums with permissive parsing.

Unknown names never raise: they fall back to the default member so a typo
in a config file still produces a plot.
"""

from __future__ import annotations

import logging
from enum import StrEnum

logger = logging.getLogger(__name__)


def _normalize(value: str) -> str:
    return value.strip().lower().replace("-", "_")


class LayoutType(StrEnum):
    """Network map layouts."""

    CIRCLE = "circle"
    SPHERE = "sphere"
    MDS = "mds"
    FRUCHTERMAN = "fruchterman"
    KAMADA = "kamada"
    VOSVIEWER = "vosviewer"

    @classmethod
    def coerce(cls, value: object) -> LayoutType:
        """Return the matching layout, or ``KAMADA`` for anything unknown."""
        if isinstance(value, cls):
            return value
        key = _normalize(str(value))
        if key == "external_tool":
            return cls.VOSVIEWER
        try:
            return cls(key)
        except ValueError:
            logger.warning("Unknown layout %r, falling back to %s", value, cls.KAMADA.value)
            return cls.KAMADA


class ClusterMethod(StrEnum):
    """Community detection algorithms used to color vertices."""

    NULL = "null"
    OPTIMAL = "optimal"
    LOUVAIN = "louvain"
    INFOMAP = "infomap"
    EDGE_BETWEENNESS = "edge_betweenness"
    WALKTRAP = "walktrap"

    @classmethod
    def coerce(cls, value: object) -> ClusterMethod:
        """Return the matching method, or ``WALKTRAP`` for anything unknown.

        ``none`` and ``None`` are accepted as spellings of ``null``.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NULL
        key = _normalize(str(value))
        if key == "none":
            return cls.NULL
        try:
            return cls(key)
        except ValueError:
            logger.warning("Unknown cluster method %r, falling back to %s", value, cls.WALKTRAP.value)
            return cls.WALKTRAP
