"""Interior estimators.

An estimator maps the four axis neighbors of an interior cell (north,
south, east, west) to the cell's next value.  Two are provided:

- ``four_point``: blends the north/south and east/west midpoints, leaning
  toward the pair with the shorter chord.  This is the rule that makes a
  grid settle into an area-minimizing shape.
- ``average``: the plain four-neighbor mean (a discrete Laplacian).
"""

from __future__ import annotations

from typing import Callable, Dict, Sequence

from soapfilm.errors import ConfigurationError
from soapfilm.geom import Vector3, lerp, midpoint

Estimator = Callable[[Vector3, Vector3, Vector3, Vector3], Vector3]


def four_point(n: Vector3, s: Vector3, e: Vector3, w: Vector3) -> Vector3:
    """Ratio-weighted blend of the north/south and east/west midpoints.

    ``ratio = |N-S| / (|N-S| + |E-W|)`` moves the estimate from the
    north/south midpoint toward the east/west midpoint.  A collapsed
    north/south pair gives ``ratio == 0`` and the east/west midpoint.
    """

    len_a = (n - s).mag()
    len_b = (e - w).mag()
    mid_a = midpoint(n, s)
    mid_b = midpoint(e, w)
    if len_a == 0.0:
        return mid_b
    ratio = len_a / (len_a + len_b)
    return lerp(mid_a, mid_b, ratio)


def average(n: Vector3, s: Vector3, e: Vector3, w: Vector3) -> Vector3:
    """Unweighted mean of the four neighbors."""
    return (n + s + e + w) * 0.25


ESTIMATORS: Dict[str, Estimator] = {
    "four_point": four_point,
    "average": average,
}


def register_estimator(name: str, estimator: Estimator) -> None:
    if not callable(estimator):
        raise ConfigurationError(f"estimator {name!r} is not callable")
    ESTIMATORS[name.lower()] = estimator


def get_estimator(name: str) -> Estimator:
    try:
        return ESTIMATORS[name.lower()]
    except KeyError:
        known = ", ".join(available_estimators())
        raise ConfigurationError(f"unknown estimator {name!r} (known: {known})") from None


def available_estimators() -> Sequence[str]:
    return tuple(sorted(ESTIMATORS.keys()))


def resolve_estimator(estimator) -> Estimator:
    """Accept an estimator callable or registered name."""
    if estimator is None:
        return four_point
    if isinstance(estimator, str):
        return get_estimator(estimator)
    if not callable(estimator):
        raise ConfigurationError(f"estimator must be a name or callable, got {type(estimator)!r}")
    return estimator


__all__ = [
    "ESTIMATORS",
    "Estimator",
    "available_estimators",
    "average",
    "four_point",
    "get_estimator",
    "register_estimator",
    "resolve_estimator",
]
