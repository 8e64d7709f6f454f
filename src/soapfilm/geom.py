## point and vector arithmetic for the soapfilm relaxation engine
## Copyright (c) 2026 the soapfilm authors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""point and vector arithmetic for **soapfilm**

====================
OVERVIEW
====================

Every grid cell of a patch holds a ``Vector3``, an immutable triple of
floats.  Points and displacement vectors share the same type; whether a
value is interpreted as a position or as an offset depends only on how it
is used.

Vectors support the usual operators: ::

   a = Vector3(1, 2, 3)
   b = Vector3(0, 1, 0)
   a + b, a - b, -a, a * 2.0, 2.0 * a, a / 2.0

and the methods ``mag()``, ``unit()``, ``dot()`` and ``cross()``.

constants
=========

``epsilon`` is the tolerance used by ``close()`` and ``vclose()``, and by
degeneracy checks throughout the package.  Redefine it at your peril.

"""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt
from typing import Iterable, Iterator, Tuple

from soapfilm.errors import DegenerateGeometryError

## constants
epsilon = 0.000005


## operations on scalars
## -----------------------

def close(a, b):
    """ are two scalars the same within epsilon
    """
    return abs(a - b) < epsilon


## operations on vectors
## ------------------------

@dataclass(frozen=True)
class Vector3:
    """Immutable 3D point or vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, c: float) -> "Vector3":
        return Vector3(self.x * c, self.y * c, self.z * c)

    __rmul__ = __mul__

    def __truediv__(self, c: float) -> "Vector3":
        return Vector3(self.x / c, self.y / c, self.z / c)

    def dot(self, other: "Vector3") -> float:
        """ 3 vector ``self`` dot ``other`` """
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vector3") -> "Vector3":
        """ 3 vector ``self`` cross ``other`` """
        return Vector3(self.y * other.z - self.z * other.y,
                       self.z * other.x - self.x * other.z,
                       self.x * other.y - self.y * other.x)

    def mag(self) -> float:
        """ compute the magnitude of the vector"""
        return sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def unit(self) -> "Vector3":
        """return the normalized vector, raising
        ``DegenerateGeometryError`` for a zero-length vector"""
        m = self.mag()
        if m < epsilon:
            raise DegenerateGeometryError(f"cannot normalize zero-length vector {self}")
        return self / m

    def astuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Vector3(0.0, 0.0, 0.0)


## determine if two vectors are the same, to within epsilon
def vclose(a, b):
    return close((a - b).mag(), 0)


def lerp(a, b, t):
    """linear interpolation, ``a`` at ``t=0`` and ``b`` at ``t=1``"""
    return a + (b - a) * t


def midpoint(a, b):
    return (a + b) * 0.5


def centroid(points: Iterable[Vector3]) -> Vector3:
    """arithmetic mean of a non-empty collection of points"""
    sx = sy = sz = 0.0
    n = 0
    for p in points:
        sx += p.x
        sy += p.y
        sz += p.z
        n += 1
    if n == 0:
        raise ValueError("centroid of an empty point set")
    return Vector3(sx / n, sy / n, sz / n)


__all__ = [
    "ORIGIN",
    "Vector3",
    "centroid",
    "close",
    "epsilon",
    "lerp",
    "midpoint",
    "vclose",
]
