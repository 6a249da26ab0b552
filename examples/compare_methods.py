"""Example: compare steepest descent, Gauss-Newton and least squares on a rectangle."""

from geosketch import RelaxOptions
from geosketch.scenarios import rectangle_system


def main() -> None:
    for method in ("steepest", "gauss-newton"):
        system = rectangle_system()
        result = system.relax(RelaxOptions(max_iterations=200, tol=1e-9, method=method))
        print(f"{method}: iterations={result.iterations} max_residual={result.max_residual:.3e}")

    system = rectangle_system()
    result = system.solve_least_squares()
    print(f"least-squares: nfev={result.iterations} max_residual={result.max_residual:.3e}")
    for idx, (x, y) in system.point_coords().items():
        print(f"P{idx}: ({x:.6f}, {y:.6f})")


if __name__ == "__main__":
    main()
