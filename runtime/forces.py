"""Fruchterman-Reingold force laws.

Both functions work elementwise on scalars or numpy arrays of distances.
``k`` is the optimal distance at which attraction and repulsion balance for
two adjacent vertices.
"""

from __future__ import annotations

import numpy as np

from core.exceptions import InvalidParameterError


def _check_optimal_distance(k: float) -> None:
    if not k > 0:
        raise InvalidParameterError("dist_opt", k, f"dist_opt must be > 0; got {k!r}")


def attractive_force(x, k: float):
    """Return ``x**2 / k``."""
    _check_optimal_distance(k)
    return np.square(x) / k


def repulsive_force(x, k: float):
    """Return ``k**2 / x``; defined only for ``x > 0``."""
    _check_optimal_distance(k)
    if not np.all(np.asarray(x) > 0):
        raise InvalidParameterError(
            "distance", x, "repulsive force is only defined for distances > 0"
        )
    return k * k / x


__all__ = ["attractive_force", "repulsive_force"]
