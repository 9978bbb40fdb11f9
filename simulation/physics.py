import numpy as np
from numpy.typing import NDArray

from .config import G, FRICTION, NZ_EPSILON


def tangent_projection_acceleration(normal: NDArray[np.float64], gravity: float = G,
                                    friction: float = FRICTION) -> NDArray[np.float64]:
    """
    Acceleration on a face from gravity projected onto its tangent plane, minus friction.

    Friction is modelled as a fixed fraction of the tangential gravity itself:
    a = t - friction * t with t = g - n * dot(g, n) and g = (0, 0, -gravity).

    Args:
        normal: Unit normal of the face
        gravity: Magnitude of gravity acceleration
        friction: Friction coefficient

    Returns:
        numpy.ndarray: Acceleration vector
    """
    gravity_vector = np.array([0.0, 0.0, -gravity])
    tangent_acceleration = gravity_vector - normal * np.dot(gravity_vector, normal)
    friction_acceleration = -friction * tangent_acceleration
    return tangent_acceleration + friction_acceleration


def slope_ratio_acceleration(normal: NDArray[np.float64], gravity: float = G) -> NDArray[np.float64]:
    """
    Acceleration on a face from the slope ratios of its normal:
    (g * nx / nz, g * ny / nz, g * (nz^2 - 1)).

    nz is replaced by NZ_EPSILON when its magnitude is smaller, so near-vertical faces
    give very large but finite accelerations.
    """
    nx, ny, nz = normal
    if abs(nz) < NZ_EPSILON:
        nz = NZ_EPSILON
    return np.array([
        gravity * nx / nz,
        gravity * ny / nz,
        gravity * (nz * nz - 1.0),
    ])


def remove_normal_component(velocity: NDArray[np.float64], axis: NDArray[np.float64],
                            restitution: float) -> NDArray[np.float64]:
    """Scale the component of `velocity` along the unit `axis` by `restitution`, keeping the rest."""
    return velocity - axis * np.dot(velocity, axis) * (1.0 - restitution)
