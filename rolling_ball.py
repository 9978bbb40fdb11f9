import argparse
import os
import sys
import matplotlib.pyplot as plt
import numpy as np

from mesh_io import load_any_surface
from rendering import Camera, BodyMeshStream
from rendering.plotting import plot_surface_with_trajectory
from simulation import RollingBodySimulator, SimulationConfig, PhysicsModel, CollisionResponse
from simulation.config import BALL_RADIUS, FRICTION, RESTITUTION, TIME_STEP
from surface import Projection


DEFAULT_MESH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "files", "demo_surface.txt")
DEFAULT_STEPS = 10000
DEFAULT_START = (0.3, 1.0, 1.5)
STOP_SPEED = 0.001


def parse_args(argv=None):
    """Parse command-line arguments for a rolling ball run."""
    parser = argparse.ArgumentParser(description='Roll a ball across a triangulated surface.')
    parser.add_argument('mesh_filepath', type=str, nargs='?', default=DEFAULT_MESH,
                        help='Mesh file (text vertex/triangle/neighbor format, or any format trimesh reads)')
    parser.add_argument('--steps', type=int, default=DEFAULT_STEPS, help='Maximum number of steps')
    parser.add_argument('--dt', type=float, default=TIME_STEP, help='Time step')
    parser.add_argument('--model', choices=[m.value for m in PhysicsModel], default=PhysicsModel.TANGENT_PROJECTION.value,
                        help='Acceleration model')
    parser.add_argument('--collision', choices=[c.value for c in CollisionResponse],
                        default=CollisionResponse.CREASE_DAMPING.value, help='Response when crossing onto a new triangle')
    parser.add_argument('--projection', choices=[p.value for p in Projection], default=Projection.XY.value,
                        help='Plane used for barycentric coordinates')
    parser.add_argument('--radius', type=float, default=BALL_RADIUS, help='Ball radius')
    parser.add_argument('--friction', type=float, default=FRICTION, help='Friction coefficient')
    parser.add_argument('--restitution', type=float, default=RESTITUTION,
                        help='Fraction of normal velocity kept after a clamp or crease impulse')
    parser.add_argument('--start', type=float, nargs=3, default=DEFAULT_START, metavar=('X', 'Y', 'Z'),
                        help='Initial ball center')
    parser.add_argument('--velocity', type=float, nargs=3, default=(0.0, 0.0, 0.0), metavar=('VX', 'VY', 'VZ'),
                        help='Initial ball velocity')
    parser.add_argument('--verbose', '-v', action='store_true', help='Print progress and show a plot of the run')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    if not os.path.isfile(args.mesh_filepath):
        print(f"Error: The file {args.mesh_filepath} does not exist.")
        sys.exit(1)

    try:
        config = SimulationConfig.from_args(args)
        mesh = load_any_surface(args.mesh_filepath, Projection(args.projection), verbose=args.verbose)
    except ValueError as e:
        print(f"Error loading the mesh: {e}")
        sys.exit(1)

    problems = mesh.check_neighbor_consistency()
    if problems:
        print(f"Warning: {len(problems)} inconsistent neighbor links, the first is: {problems[0]}")
    if mesh.is_empty:
        print("Error: the mesh has no triangles")
        sys.exit(1)

    start = np.array(args.start)
    seed = mesh.find_triangle_brute_force(start)
    if seed < 0:
        print(f"Error: the start position {start} is not above any triangle of the mesh")
        sys.exit(1)

    simulator = RollingBodySimulator(mesh, start, np.array(args.velocity), seed_triangle=seed, config=config)

    print(f"Ball rolling on {mesh}")
    print(f"Model: {config.physics_model.value}, gravity: {config.gravity}, friction: {config.friction}")
    print(f"Initial position: {simulator.position}")

    trajectory = simulator.run(args.steps, stop_speed=STOP_SPEED, progress=not args.verbose, verbose=args.verbose)

    print(f"Steps completed: {trajectory.num_steps}")
    print(f"Final status: {trajectory.final_status.value}")
    print(f"Final position: {simulator.position}")
    print(f"Final velocity: {simulator.velocity}")

    if args.verbose:
        camera = Camera()
        camera.set_target(mesh.bounds.mean(axis=0))
        ball_stream = BodyMeshStream(config.radius)
        print(f"Ball draw stream: {len(ball_stream.at(simulator.position))} vertices")
        plot_surface_with_trajectory(mesh, trajectory.positions, camera=camera)
        plt.show()


if __name__ == "__main__":
    main()
