"""
Simulation settings: physics model, crease response and the constants they use.
"""

from dataclasses import dataclass
from enum import Enum


G = 9.81  # gravity acceleration
FRICTION = 0.5  # fraction of the tangential gravity removed by friction
BALL_RADIUS = 0.1
TIME_STEP = 0.01
RESTITUTION = 0.5  # fraction of a normal velocity component kept after a clamp or crease impulse
NZ_EPSILON = 1e-6  # smallest |nz| used as a divisor by the slope-ratio model
CREASE_AXIS_EPSILON = 1e-12


class PhysicsModel(Enum):
    """How the acceleration on a face is derived from its normal."""
    TANGENT_PROJECTION = "tangent"
    SLOPE_RATIO = "slope"


class CollisionResponse(Enum):
    """Velocity response when the body crosses onto a differently oriented triangle."""
    CREASE_DAMPING = "crease"
    CREASE_DAMPING_APPROACHING = "approaching"
    NONE = "none"


@dataclass
class SimulationConfig:
    """Configuration for a rolling body simulation."""
    physics_model: PhysicsModel = PhysicsModel.TANGENT_PROJECTION
    collision_response: CollisionResponse = CollisionResponse.CREASE_DAMPING
    radius: float = BALL_RADIUS
    gravity: float = G
    friction: float = FRICTION
    restitution: float = RESTITUTION
    time_step: float = TIME_STEP

    def __post_init__(self):
        self.physics_model = PhysicsModel(self.physics_model)
        self.collision_response = CollisionResponse(self.collision_response)
        if self.radius < 0:
            raise ValueError(f"Radius must be non-negative, got {self.radius}")
        if not 0.0 <= self.restitution <= 1.0:
            raise ValueError(f"Restitution must be in [0, 1], got {self.restitution}")
        if self.time_step <= 0:
            raise ValueError(f"Time step must be positive, got {self.time_step}")

    @classmethod
    def from_args(cls, args) -> 'SimulationConfig':
        """Create config from command-line arguments."""
        return cls(
            physics_model=PhysicsModel(args.model),
            collision_response=CollisionResponse(args.collision),
            radius=args.radius,
            friction=args.friction,
            restitution=args.restitution,
            time_step=args.dt,
        )
