"""
Geometry utilities for triangle queries on a surface mesh.
"""

from enum import Enum
import numpy as np
from numpy.typing import NDArray


DEGENERATE_EPSILON = 1e-8
INSIDE_TOLERANCE = -0.001
UP = np.array([0.0, 0.0, 1.0])
INVALID_BARYCENTRIC = np.array([-1.0, -1.0, -1.0])

UP.setflags(write=False)
INVALID_BARYCENTRIC.setflags(write=False)


class Projection(Enum):
    """Plane in which barycentric coordinates are solved."""
    XY = "xy"
    IN_PLANE = "in_plane"


def normalize(vector: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return `vector` scaled to unit length. A zero vector is returned unchanged."""
    length = np.linalg.norm(vector)
    if length > 0:
        return vector / length
    return vector


def triangle_normal(triangle_verts: NDArray[np.float64]) -> NDArray[np.float64]:
    """Unit normal of a 3D triangle, cross((v1 - v0), (v2 - v0)) normalized."""
    v0, v1, v2 = triangle_verts
    edge1 = v1 - v0
    edge2 = v2 - v0
    return normalize(np.cross(edge1, edge2))


def triangle_normals_vectorized(triangles_verts: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Unit normals for a batch of triangles.

    Args:
        triangles_verts: F x 3 x 3 array of triangle corner positions

    Returns:
        numpy.ndarray: F x 3 array of normals, zero rows for zero-area triangles
    """
    edge1 = triangles_verts[:, 1] - triangles_verts[:, 0]
    edge2 = triangles_verts[:, 2] - triangles_verts[:, 0]
    normals = np.cross(edge1, edge2)
    lengths = np.linalg.norm(normals, axis=1)
    lengths[lengths == 0] = 1.0
    return normals / lengths[:, np.newaxis]


def barycentric_coordinates(
    point: NDArray[np.float64],
    triangle_verts: NDArray[np.float64],
    projection: Projection = Projection.XY,
) -> NDArray[np.float64]:
    """
    Calculate the barycentric weights (u, v, w) of a point in a triangle, so that
    point ~= u * v0 + v * v1 + w * v2 and u + v + w = 1.

    With Projection.XY the point and the triangle are dropped onto the XY plane
    first (z is ignored). With Projection.IN_PLANE the full 3D edge vectors are
    used, which solves for the projection of the point onto the triangle's own
    plane and stays well conditioned on steep faces.

    Returns:
        numpy.ndarray: the weights, or INVALID_BARYCENTRIC (all -1) if the triangle is degenerate
    """
    v0, v1, v2 = triangle_verts
    e0 = v1 - v0
    e1 = v2 - v0
    e2 = point - v0
    if projection is Projection.XY:
        e0, e1, e2 = e0[:2], e1[:2], e2[:2]

    d00 = np.dot(e0, e0)
    d01 = np.dot(e0, e1)
    d11 = np.dot(e1, e1)
    d20 = np.dot(e2, e0)
    d21 = np.dot(e2, e1)

    denom = d00 * d11 - d01 * d01
    if abs(denom) < DEGENERATE_EPSILON:
        return INVALID_BARYCENTRIC.copy()

    v = (d11 * d20 - d01 * d21) / denom
    w = (d00 * d21 - d01 * d20) / denom
    u = 1.0 - v - w
    return np.array([u, v, w])


def barycentric_coordinates_vectorized(
    point: NDArray[np.float64],
    triangles_verts: NDArray[np.float64],
    projection: Projection = Projection.XY,
) -> NDArray[np.float64]:
    """
    Vectorized version of barycentric_coordinates over a batch of triangles.

    Args:
        point: 3D query point
        triangles_verts: F x 3 x 3 array of triangle corner positions
        projection: Plane to solve in

    Returns:
        numpy.ndarray: F x 3 weights, degenerate triangles get INVALID_BARYCENTRIC rows
    """
    e0 = triangles_verts[:, 1] - triangles_verts[:, 0]
    e1 = triangles_verts[:, 2] - triangles_verts[:, 0]
    e2 = point[np.newaxis, :] - triangles_verts[:, 0]
    if projection is Projection.XY:
        e0, e1, e2 = e0[:, :2], e1[:, :2], e2[:, :2]

    d00 = np.einsum("ij,ij->i", e0, e0)
    d01 = np.einsum("ij,ij->i", e0, e1)
    d11 = np.einsum("ij,ij->i", e1, e1)
    d20 = np.einsum("ij,ij->i", e2, e0)
    d21 = np.einsum("ij,ij->i", e2, e1)

    denom = d00 * d11 - d01 * d01
    degenerate = np.abs(denom) < DEGENERATE_EPSILON
    safe_denom = np.where(degenerate, 1.0, denom)

    v = (d11 * d20 - d01 * d21) / safe_denom
    w = (d00 * d21 - d01 * d20) / safe_denom
    u = 1.0 - v - w

    weights = np.stack([u, v, w], axis=1)
    weights[degenerate] = INVALID_BARYCENTRIC
    return weights


def is_inside(weights: NDArray[np.float64], tolerance: float = INSIDE_TOLERANCE) -> bool:
    """True if all barycentric weights are at least `tolerance` (a small negative slack for shared edges)."""
    return bool(np.all(weights >= tolerance))


def is_degenerate(weights: NDArray[np.float64]) -> bool:
    """True if `weights` is the sentinel returned for a degenerate triangle."""
    return bool(np.array_equal(weights, INVALID_BARYCENTRIC))


def interpolate_height(weights: NDArray[np.float64], triangle_verts: NDArray[np.float64]) -> float:
    """Interpolate the z-coordinate of the triangle corners with barycentric weights."""
    return float(np.dot(weights, triangle_verts[:, 2]))
