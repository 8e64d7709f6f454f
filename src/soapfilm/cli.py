"""Command-line entry point: build a surface, relax it, export it."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from soapfilm.builders import available_builders, build
from soapfilm.config import RunConfig, load_config
from soapfilm.errors import SoapFilmError
from soapfilm.estimators import available_estimators
from soapfilm.io import write_stl
from soapfilm.logging_config import setup_logging
from soapfilm.mesh import surface_area
from soapfilm.topology import Simulation, Topology

logger = logging.getLogger(__name__)


def execute(config: RunConfig) -> Simulation:
    """Build, relax and optionally export the surface described by ``config``."""
    topology = Topology(config.builder)
    sim = Simulation(topology, estimator=config.estimator, dt=config.dt)
    build(config.builder, topology=topology, clock=sim.clock, **config.params)
    logger.info("built %s: %d patches", config.builder, len(topology))

    steps = sim.run(config.iterations, tolerance=config.tolerance)
    logger.info("%d steps, surface area %.6f", steps, surface_area(topology))

    if config.output is not None:
        count = write_stl(topology, config.output, binary=config.binary, name=config.builder)
        logger.info("wrote %d triangles to %s", count, config.output)
    return sim


def cmd_run(args) -> int:
    config = load_config(args.config)
    if args.verbose:
        config.log_level = "DEBUG"
    setup_logging(config.log_level)
    execute(config)
    return 0


def cmd_build(args) -> int:
    params = {}
    if args.size is not None:
        params["size"] = args.size
    config = RunConfig(
        builder=args.builder,
        params=params,
        iterations=args.iterations,
        tolerance=args.tolerance,
        estimator=args.estimator,
        output=Path(args.output) if args.output else None,
        binary=not args.ascii,
        log_level="DEBUG" if args.verbose else "INFO",
    )
    setup_logging(config.log_level)
    execute(config)
    return 0


def cmd_list(args) -> int:
    for name in available_builders():
        print(name)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='soapfilm',
        description='Relax discrete minimal surfaces on glued quad patches.',
    )
    subparsers = parser.add_subparsers(dest='action', required=True)

    run_parser = subparsers.add_parser('run', help='Run a YAML run file')
    run_parser.add_argument('config', help='Path to the run file')
    run_parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    build_parser = subparsers.add_parser('build', help='Build and relax a named surface')
    build_parser.add_argument('builder', choices=available_builders())
    build_parser.add_argument('--size', type=int, help='Grid size of each patch')
    build_parser.add_argument('--iterations', type=int, default=500)
    build_parser.add_argument('--tolerance', type=float, default=None,
                              help='Stop once no point moves further than this')
    build_parser.add_argument('--estimator', default='four_point', choices=available_estimators())
    build_parser.add_argument('-o', '--output', metavar='FILE', help='STL output file')
    build_parser.add_argument('--ascii', action='store_true', help='Write ASCII STL')
    build_parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    subparsers.add_parser('list', help='List available builders')

    args = parser.parse_args(argv)

    try:
        if args.action == 'run':
            return cmd_run(args)
        if args.action == 'build':
            return cmd_build(args)
        return cmd_list(args)
    except (SoapFilmError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 1


__all__ = ["execute", "main"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
