"""YAML run files.

A run file names a builder and its parameters, and says how long to relax
and where to write the result: ::

    builder: cylinder
    params: {size: 12, radius: 1.0, height: 1.0}
    iterations: 500
    tolerance: 1.0e-6
    estimator: four_point
    output: cylinder.stl
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from soapfilm.builders import RESERVED_PARAMS
from soapfilm.errors import ConfigurationError


@dataclass
class RunConfig:
    """Parsed contents of a run file."""

    builder: str
    params: Dict[str, Any] = field(default_factory=dict)
    iterations: int = 500
    tolerance: Optional[float] = None
    estimator: str = "four_point"
    dt: float = 0.1
    output: Optional[Path] = None
    binary: bool = True
    log_level: str = "INFO"
    extra: Dict[str, Any] = field(default_factory=dict)


_KNOWN_KEYS: Iterable[str] = {
    "builder",
    "params",
    "iterations",
    "tolerance",
    "estimator",
    "dt",
    "output",
    "binary",
    "log_level",
}


def parse_config(data: Any, base: Optional[Path] = None) -> RunConfig:
    """Normalise a mapping (as loaded from YAML) into a ``RunConfig``.

    A relative ``output`` is resolved against ``base`` when given.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"run file must be a mapping, got {type(data)!r}")
    if "builder" not in data:
        raise ConfigurationError("run file missing required key: builder")

    params = data.get("params", {}) or {}
    if not isinstance(params, dict):
        raise ConfigurationError("params must be a mapping")
    reserved = sorted(str(key) for key in params if key in RESERVED_PARAMS)
    if reserved:
        raise ConfigurationError(f"params may not set {', '.join(reserved)}")

    try:
        iterations = int(data.get("iterations", 500))
        tolerance = data.get("tolerance")
        tolerance = None if tolerance is None else float(tolerance)
        dt = float(data.get("dt", 0.1))
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"invalid numeric value in run file: {exc}") from exc
    if iterations <= 0:
        raise ConfigurationError(f"iterations must be positive, got {iterations}")

    output = data.get("output")
    if output is not None:
        output = Path(output)
        if base is not None and not output.is_absolute():
            output = base / output

    return RunConfig(
        builder=str(data["builder"]),
        params=dict(params),
        iterations=iterations,
        tolerance=tolerance,
        estimator=str(data.get("estimator", "four_point")),
        dt=dt,
        output=output,
        binary=bool(data.get("binary", True)),
        log_level=str(data.get("log_level", "INFO")).upper(),
        extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
    )


def load_config(path: Path | str) -> RunConfig:
    """Load a YAML run file and return the normalised ``RunConfig``."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"run file not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as fp:
        try:
            data = yaml.safe_load(fp) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"cannot parse {config_path}: {exc}") from exc
    return parse_config(data, base=config_path.parent)


__all__ = ["RunConfig", "load_config", "parse_config"]
