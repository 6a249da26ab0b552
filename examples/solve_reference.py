"""Example: relax a vertical unit segment anchored at the origin."""

from geosketch import GeometricSystem, distance, fixed_x, fixed_y, vertical


def main() -> None:
    system = GeometricSystem()
    p0 = system.add_point(0.2, 0.1)
    p1 = system.add_point(0.1, 0.9)
    system.add_constraint(fixed_x(p0, 0.0))
    system.add_constraint(fixed_y(p0, 0.0))
    system.add_constraint(vertical(p0, p1))
    system.add_constraint(distance(p0, p1, 1.0))

    for _ in range(100):
        system.step()

    print("Objective:", system.objective())
    for idx, (x, y) in system.point_coords().items():
        print(f"P{idx}: ({x:.6f}, {y:.6f})")


if __name__ == "__main__":
    main()
