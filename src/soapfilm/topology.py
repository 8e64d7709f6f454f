"""Topologies and the simulation driver.

A ``Topology`` owns the patches of one surface.  Patches are created
through ``add_patch`` and can be looked up by handle (their position in the
topology) or by name.  A ``Simulation`` drives a topology: each ``step()``
runs ``apply()`` on every patch, then ``commit()`` on every patch.

All iteration state (time, iteration count, estimator) lives on the
``Simulation`` object, so independent simulations never interfere.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Union

from soapfilm.errors import ConfigurationError
from soapfilm.estimators import Estimator, resolve_estimator
from soapfilm.geom import ORIGIN
from soapfilm.patch import Patch, Seed

logger = logging.getLogger(__name__)


class Topology:
    """Arena of patches making up one surface."""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._patches: List[Patch] = []
        self._by_name: Dict[str, int] = {}

    def __repr__(self) -> str:
        return f"Topology(name={self.name!r}, patches={len(self._patches)})"

    def __len__(self) -> int:
        return len(self._patches)

    def __iter__(self) -> Iterator[Patch]:
        return iter(self._patches)

    @property
    def patches(self) -> List[Patch]:
        return list(self._patches)

    def add_patch(self, size: int, seed: Seed = ORIGIN, *, name: Optional[str] = None,
                  estimator=None) -> Patch:
        if name is not None and name in self._by_name:
            raise ConfigurationError(f"duplicate patch name {name!r}")
        patch = Patch(size, seed, name=name, estimator=estimator)
        if name is not None:
            self._by_name[name] = len(self._patches)
        self._patches.append(patch)
        return patch

    def handle(self, patch: Patch) -> int:
        for i, p in enumerate(self._patches):
            if p is patch:
                return i
        raise ConfigurationError(f"{patch!r} does not belong to this topology")

    def patch(self, key: Union[int, str]) -> Patch:
        if isinstance(key, str):
            try:
                return self._patches[self._by_name[key]]
            except KeyError:
                raise ConfigurationError(f"no patch named {key!r}") from None
        try:
            return self._patches[key]
        except IndexError:
            raise ConfigurationError(f"no patch with handle {key}") from None

    def validate(self) -> None:
        """Check that every condition only references patches of this topology."""
        members = {id(p) for p in self._patches}
        for patch in self._patches:
            for coord, condition in patch.conditions:
                references = getattr(condition, "references", None)
                if references is None:
                    continue
                for point in references():
                    if id(point.patch) not in members:
                        raise ConfigurationError(
                            f"condition at {coord} on {patch.label} references "
                            f"{point.patch.label}, which is not part of the topology")

    def apply_all(self, estimator=None) -> None:
        for patch in self._patches:
            patch.apply(estimator)

    def commit_all(self) -> float:
        residual = 0.0
        for patch in self._patches:
            residual = max(residual, patch.commit())
        return residual


class Simulation:
    """Iteration context for one topology.

    Parameters
    ----------
    topology : Topology
        The surface being relaxed.
    estimator : str or callable, optional
        Interior estimator used for patches that do not carry their own;
        ``"four_point"`` by default.
    dt : float, optional
        Time added to ``time`` after every step.  Parametric boundaries can
        read ``time`` through ``clock()`` to move over the run.
    """

    def __init__(self, topology: Topology, estimator: Union[str, Estimator, None] = "four_point",
                 dt: float = 0.1):
        self.topology = topology
        self.estimator = resolve_estimator(estimator)
        self.dt = float(dt)
        self.time = 0.0
        self.iteration = 0
        self.residual: Optional[float] = None

    def clock(self) -> float:
        return self.time

    def step(self) -> float:
        """Run one iteration and return the largest displacement."""
        for patch in self.topology:
            patch.apply(patch.estimator or self.estimator)
        residual = self.topology.commit_all()
        self.time += self.dt
        self.iteration += 1
        self.residual = residual
        return residual

    def run(self, iterations: int, tolerance: Optional[float] = None,
            callback: Optional[Callable[["Simulation", float], None]] = None) -> int:
        """Step up to ``iterations`` times; return the number of steps taken.

        Stops early once a step moves no point further than ``tolerance``.
        """
        if iterations < 0:
            raise ConfigurationError(f"iterations must be non-negative, got {iterations}")
        self.topology.validate()
        steps = 0
        log_every = max(1, iterations // 10)
        for _ in range(iterations):
            residual = self.step()
            steps += 1
            if callback is not None:
                callback(self, residual)
            if steps % log_every == 0:
                logger.debug("iteration %d residual %.3e", self.iteration, residual)
            if tolerance is not None and residual <= tolerance:
                logger.info("converged after %d iterations (residual %.3e)", steps, residual)
                return steps
        logger.info("ran %d iterations, final residual %s", steps,
                    "n/a" if self.residual is None else f"{self.residual:.3e}")
        return steps


__all__ = ["Simulation", "Topology"]
