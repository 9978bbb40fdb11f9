"""
Rolling body dynamics on a triangulated surface.
"""

from dataclasses import dataclass
from enum import Enum
import numpy as np
from numpy.typing import NDArray
from tqdm import trange

from data_types import BodyState
from surface.mesh import SurfaceMesh, WalkResult, NO_TRIANGLE
from .config import SimulationConfig, PhysicsModel, CollisionResponse, CREASE_AXIS_EPSILON
from .physics import (
    tangent_projection_acceleration,
    slope_ratio_acceleration,
    remove_normal_component,
)


class SurfaceStatus(Enum):
    ON_SURFACE = "on_surface"
    OFF_SURFACE = "off_surface"


@dataclass
class Trajectory:
    positions: NDArray[np.float64]  # N x 3, state after each completed step
    velocities: NDArray[np.float64]  # N x 3
    triangles: NDArray[np.int64]  # N
    final_status: SurfaceStatus
    came_to_rest: bool = False

    @property
    def num_steps(self) -> int:
        return len(self.positions)


class RollingBodySimulator:
    """
    A sphere rolling on a shared, read-only SurfaceMesh.

    The simulator owns its BodyState and is either on the surface or off it. It goes
    off the surface when the topological walk cannot find a triangle containing the
    body, and stays there (every step is a no-op) until the caller repositions it.
    """

    def __init__(
        self,
        mesh: SurfaceMesh,
        position: NDArray[np.float64],
        velocity: NDArray[np.float64] = None,
        seed_triangle: int = 0,
        config: SimulationConfig = None,
    ):
        self.mesh = mesh
        self.config = config if config is not None else SimulationConfig()
        if velocity is None:
            velocity = np.zeros(3)
        self.state = BodyState(position, velocity, seed_triangle)
        self.status = SurfaceStatus.ON_SURFACE
        self.last_valid_triangle = seed_triangle if mesh.has_triangle(seed_triangle) else NO_TRIANGLE
        self.last_walk = None
        self.last_acceleration = np.zeros(3)

    @property
    def position(self) -> NDArray[np.float64]:
        return self.state.position.copy()

    @property
    def velocity(self) -> NDArray[np.float64]:
        return self.state.velocity.copy()

    @property
    def current_triangle(self) -> int:
        return self.state.current_triangle

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.state.velocity))

    @property
    def is_on_surface(self) -> bool:
        return self.status is SurfaceStatus.ON_SURFACE

    def acceleration(self, normal: NDArray[np.float64]) -> NDArray[np.float64]:
        """Acceleration of the body on a face with the given unit normal, per the configured model."""
        if self.config.physics_model is PhysicsModel.SLOPE_RATIO:
            return slope_ratio_acceleration(normal, self.config.gravity)
        return tangent_projection_acceleration(normal, self.config.gravity, self.config.friction)

    def step(self, dt: float) -> None:
        """
        Advance the body by `dt`: locate, accelerate, integrate (forward Euler), clamp above
        the surface and apply the crease impulse when the body changed triangle.
        """
        if dt <= 0:
            raise ValueError(f"Time step must be positive, got {dt}")
        if self.status is SurfaceStatus.OFF_SURFACE:
            return

        state = self.state
        start_triangle = state.current_triangle

        walk = self.mesh.walk(state.position, start_triangle)
        self.last_walk = walk
        if not walk.found:
            self.status = SurfaceStatus.OFF_SURFACE
            state.current_triangle = walk.triangle
            return

        triangle = walk.triangle
        normal = self.mesh.normal(triangle)
        acceleration = self.acceleration(normal)
        self.last_acceleration = acceleration

        state.velocity = state.velocity + acceleration * dt
        state.position = state.position + state.velocity * dt

        # keep the sphere resting on top of the face it was located in
        rest_height = self.mesh.surface_height(state.position, triangle) + self.config.radius
        if state.position[2] < rest_height:
            state.position[2] = rest_height
            state.velocity = remove_normal_component(state.velocity, normal, self.config.restitution)

        if triangle != start_triangle:
            self._apply_crease_response(self.mesh.normal(start_triangle), normal)

        state.current_triangle = triangle
        self.last_valid_triangle = triangle

    def _apply_crease_response(self, old_normal: NDArray[np.float64], new_normal: NDArray[np.float64]) -> None:
        response = self.config.collision_response
        if response is CollisionResponse.NONE:
            return

        axis = np.cross(old_normal, new_normal)
        axis_length = np.linalg.norm(axis)
        if axis_length <= CREASE_AXIS_EPSILON:
            return
        axis = axis / axis_length

        if response is CollisionResponse.CREASE_DAMPING_APPROACHING and np.dot(self.state.velocity, axis) >= 0:
            return
        self.state.velocity = remove_normal_component(self.state.velocity, axis, self.config.restitution)

    def reposition(
        self,
        position: NDArray[np.float64],
        velocity: NDArray[np.float64] = None,
        seed_triangle: int = None,
    ) -> WalkResult:
        """
        Move the body to `position` and locate it again, walking from `seed_triangle`
        (or the last triangle that contained the body). The body is back on the surface
        if the walk finds a containing triangle.
        """
        if seed_triangle is None:
            seed_triangle = self.last_valid_triangle if self.mesh.has_triangle(self.last_valid_triangle) else 0

        self.state.position = np.array(position, dtype=np.float64).reshape(3)
        if velocity is not None:
            self.state.velocity = np.array(velocity, dtype=np.float64).reshape(3)

        walk = self.mesh.walk(self.state.position, seed_triangle)
        self.last_walk = walk
        self.state.current_triangle = walk.triangle
        if walk.found:
            self.status = SurfaceStatus.ON_SURFACE
            self.last_valid_triangle = walk.triangle
        else:
            self.status = SurfaceStatus.OFF_SURFACE
        return walk

    def recover_to_last_valid(self) -> bool:
        """
        Put the body at rest on the centroid of the last triangle that contained it.

        Returns:
            bool: False if the body was never on a triangle of the mesh
        """
        triangle = self.last_valid_triangle
        if not self.mesh.has_triangle(triangle):
            return False
        position = self.mesh.centroid(triangle)
        position[2] = self.mesh.surface_height(position, triangle) + self.config.radius
        self.reposition(position, np.zeros(3), triangle)
        return self.is_on_surface

    def run(self, num_steps: int, dt: float = None, stop_speed: float = None,
            progress: bool = False, verbose: bool = False) -> Trajectory:
        """
        Step the simulation up to `num_steps` times with a fixed time step.

        Args:
            num_steps: Maximum number of steps
            dt: Time step, defaults to the configured one
            stop_speed: Stop once the speed drops below this value, None to never stop early
            progress: Show a progress bar for long runs
            verbose: Print the state every 100 steps

        Returns:
            Trajectory: the state after each completed step; stops early when the body
            leaves the surface or comes to rest
        """
        if dt is None:
            dt = self.config.time_step

        positions = []
        velocities = []
        triangles = []
        came_to_rest = False

        range_func = trange if progress and num_steps >= 100 else range
        for i in range_func(num_steps):
            self.step(dt)
            if not self.is_on_surface:
                if verbose:
                    print(f"Step {i}: body left the surface near triangle {self.state.current_triangle}")
                break

            positions.append(self.position)
            velocities.append(self.velocity)
            triangles.append(self.state.current_triangle)

            if verbose and i % 100 == 0:
                print(f"Step {i}: position {self.state.position}, speed {self.speed:.4f}")

            if stop_speed is not None and self.speed < stop_speed:
                came_to_rest = True
                if verbose:
                    print(f"Body came to rest at step {i}")
                break

        return Trajectory(
            positions=np.array(positions).reshape(-1, 3),
            velocities=np.array(velocities).reshape(-1, 3),
            triangles=np.array(triangles, dtype=np.int64),
            final_status=self.status,
            came_to_rest=came_to_rest,
        )
