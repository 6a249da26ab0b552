import argparse
import logging
import sys
from typing import Optional, Sequence

from geosketch import (
    SCENARIOS,
    RelaxOptions,
    normalize_point_coords,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Relax built-in 2D constraint sketches")
    parser.add_argument(
        "scenario",
        nargs="?",
        default="reference",
        choices=sorted(SCENARIOS),
        help="Sketch to relax (default: reference)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=100,
        help="Maximum number of relaxation steps (default: 100)",
    )
    parser.add_argument(
        "--method",
        choices=["steepest", "gauss-newton", "least-squares"],
        default="steepest",
        help="Update rule (default: steepest)",
    )
    parser.add_argument(
        "--tol",
        type=float,
        default=0.0,
        help="Stop once every residual is within this bound (default: run all iterations)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    system = SCENARIOS[args.scenario]()
    logger.info("Loaded scenario '%s': %r", args.scenario, system)

    print("Initial:")
    for idx, (x, y) in system.point_coords().items():
        print(f"  P{idx}: ({x:.6f}, {y:.6f})")

    if args.method == "least-squares":
        result = system.solve_least_squares()
    else:
        result = system.relax(
            RelaxOptions(max_iterations=args.iterations, tol=args.tol, method=args.method)
        )

    print(f"Method: {args.method}")
    print(f"Iterations: {result.iterations}")
    print(f"Converged: {result.converged}")
    print(f"Max residual: {result.max_residual:.3e}")
    print("Coordinates:")
    coords = system.point_coords()
    for idx, (x, y) in coords.items():
        print(f"  P{idx}: ({x:.6f}, {y:.6f})")

    print("Normed points:")
    for idx, (x, y) in normalize_point_coords(coords).items():
        print(f"  P{idx}: ({x:.6f}, {y:.6f})")

    print("Residuals:")
    for entry in system.residual_breakdown():
        print(f"  {entry['constraint']}: {entry['max_abs']:.3e}")


if __name__ == "__main__":
    main(sys.argv[1:])
