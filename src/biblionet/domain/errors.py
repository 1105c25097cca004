"""Exception hierarchy for the biblionet library layer.

Services translate these into ``ServiceResult`` errors; library callers
catch them directly.
"""

from __future__ import annotations


class BiblionetError(Exception):
    """Base class for biblionet errors."""


class InvalidMatrixError(BiblionetError):
    """The adjacency matrix cannot be turned into a network.

    Raised before any graph is built: non-square or empty input, missing or
    mismatched labels, duplicate labels, non-numeric or negative cells.
    """
