from .config import SimulationConfig, PhysicsModel, CollisionResponse
from .physics import tangent_projection_acceleration, slope_ratio_acceleration
from .simulator import RollingBodySimulator, SurfaceStatus, Trajectory
