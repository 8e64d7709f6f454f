# -*- coding: utf-8 -*-
"""soapfilm: discrete minimal surfaces on glued quad patches."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("soapfilm")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from soapfilm.conditions import (
    CrossPatchAverage,
    FixedPoint,
    MirrorSymmetry,
    ParametricPoint,
    Plane,
    SegmentRail,
)
from soapfilm.errors import ConfigurationError, DegenerateGeometryError, SoapFilmError
from soapfilm.estimators import average, four_point
from soapfilm.geom import Vector3
from soapfilm.grid import GridCoord, Side, UV
from soapfilm.patch import Patch, PatchPoint
from soapfilm.topology import Simulation, Topology

__all__ = [
    "ConfigurationError",
    "CrossPatchAverage",
    "DegenerateGeometryError",
    "FixedPoint",
    "GridCoord",
    "MirrorSymmetry",
    "ParametricPoint",
    "Patch",
    "PatchPoint",
    "Plane",
    "SegmentRail",
    "Side",
    "Simulation",
    "SoapFilmError",
    "Topology",
    "UV",
    "Vector3",
    "__version__",
    "average",
    "four_point",
]
