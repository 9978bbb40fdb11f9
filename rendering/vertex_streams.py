"""
Flat (x, y, z, r, g, b) vertex streams handed to a renderer.
"""

import numpy as np
from numpy.typing import NDArray

from surface.mesh import SurfaceMesh
from surface.geometry import triangle_normals_vectorized
from .colors import height_colors, slope_colors


BALL_COLOR = (0.9, 0.1, 0.1)
SPHERE_STACKS = 16
SPHERE_SLICES = 16


def surface_draw_vertices(mesh: SurfaceMesh, shading: str = "slope") -> NDArray[np.float64]:
    """
    Build the draw stream for a surface, three vertices per triangle in stored order.

    Args:
        mesh: The surface to draw
        shading: "slope" colors each face by its normal's z component, "height" colors
            each vertex by its z over the mesh's height range

    Returns:
        numpy.ndarray: (3 * F) x 6 array of positions and colors
    """
    if mesh.is_empty:
        return np.zeros((0, 6))

    corners = mesh.vertices[mesh.triangles]  # F x 3 x 3
    positions = corners.reshape(-1, 3)

    if shading == "slope":
        face_colors = slope_colors(triangle_normals_vectorized(corners))
        colors = np.repeat(face_colors, 3, axis=0)
    elif shading == "height":
        colors = height_colors(mesh.vertices[:, 2])[mesh.triangles].reshape(-1, 3)
    else:
        raise ValueError(f"Unknown shading {shading!r}, expected 'slope' or 'height'")

    return np.hstack([positions, colors])


def sphere_vertices(radius: float, stacks: int = SPHERE_STACKS, slices: int = SPHERE_SLICES,
                    color=BALL_COLOR) -> NDArray[np.float64]:
    """
    Tessellate a sphere centered at the origin into latitude/longitude quads, two
    triangles (six vertices) per quad.

    Returns:
        numpy.ndarray: (stacks * slices * 6) x 6 array of positions and colors
    """
    theta = np.arange(stacks + 1) * np.pi / stacks
    phi = np.arange(slices + 1) * 2 * np.pi / slices

    def point(t, p):
        return radius * np.stack([
            np.sin(theta[t]) * np.cos(phi[p]),
            np.sin(theta[t]) * np.sin(phi[p]),
            np.cos(theta[t]) * np.ones_like(phi[p]),
        ], axis=-1)

    i, j = np.meshgrid(np.arange(stacks), np.arange(slices), indexing="ij")
    i, j = i.ravel(), j.ravel()
    v0 = point(i, j)
    v1 = point(i + 1, j)
    v2 = point(i + 1, j + 1)
    v3 = point(i, j + 1)

    # quads in stack-major order, each split into (v0, v1, v2) and (v0, v2, v3)
    positions = np.stack([v0, v1, v2, v0, v2, v3], axis=1).reshape(-1, 3)
    colors = np.broadcast_to(np.asarray(color, dtype=np.float64), positions.shape)
    return np.hstack([positions, colors])


def translate_vertices(stream: NDArray[np.float64], offset: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return a copy of a vertex stream with its positions moved by `offset`."""
    moved = stream.copy()
    moved[:, :3] += np.asarray(offset, dtype=np.float64)
    return moved


def body_draw_vertices(sphere: NDArray[np.float64], position: NDArray[np.float64]) -> NDArray[np.float64]:
    """Place a sphere stream built by `sphere_vertices` at a body center."""
    return translate_vertices(sphere, position)


class BodyMeshStream:
    """Sphere stream built once for a radius and placed at the body's position each frame."""

    def __init__(self, radius: float, stacks: int = SPHERE_STACKS, slices: int = SPHERE_SLICES, color=BALL_COLOR):
        self.radius = radius
        self.local_vertices = sphere_vertices(radius, stacks, slices, color)

    def at(self, position: NDArray[np.float64]) -> NDArray[np.float64]:
        return body_draw_vertices(self.local_vertices, position)
