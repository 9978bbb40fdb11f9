"""
Triangulated surface with barycentric queries and topological point location.
"""

from typing import NamedTuple
import numpy as np
from numpy.typing import NDArray
import networkx as nx
import trimesh

from data_types import Triangulation, BOUNDARY
from .adjacency import build_edge_neighbors, check_neighbor_consistency, triangle_graph
from .geometry import (
    INSIDE_TOLERANCE,
    INVALID_BARYCENTRIC,
    UP,
    Projection,
    barycentric_coordinates,
    barycentric_coordinates_vectorized,
    interpolate_height,
    is_degenerate,
    is_inside,
    triangle_normal,
)


MAX_WALK_ITERATIONS = 100
NO_TRIANGLE = -1


class WalkResult(NamedTuple):
    triangle: int  # triangle containing the point, or the last one visited if not found
    found: bool
    steps: int  # number of edges crossed
    hit_boundary: bool


class SurfaceMesh:
    """
    Read-only triangle mesh with per-edge neighbor links.

    Vertices and triangles are stored as contiguous numpy arrays and triangles refer
    to their neighbors by index. The arrays are flagged read-only, so one mesh can be
    shared by any number of simulators.
    """

    def __init__(
        self,
        vertices: NDArray[np.float64],
        triangles: NDArray[np.int64],
        neighbors: NDArray[np.int64],
        projection: Projection = Projection.XY,
        inside_tolerance: float = INSIDE_TOLERANCE,
        max_walk_iterations: int = MAX_WALK_ITERATIONS,
    ):
        vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3)
        triangles = np.array(triangles, dtype=np.int64).reshape(-1, 3)
        neighbors = np.array(neighbors, dtype=np.int64).reshape(-1, 3)
        if len(neighbors) != len(triangles):
            raise ValueError(f"Got {len(neighbors)} neighbor rows for {len(triangles)} triangles")
        if len(triangles) and (triangles.min() < 0 or triangles.max() >= len(vertices)):
            raise ValueError("Triangle vertex indices out of range")

        for array in (vertices, triangles, neighbors):
            array.setflags(write=False)

        self.vertices = vertices
        self.triangles = triangles
        self.neighbors = neighbors
        self.projection = projection
        self.inside_tolerance = inside_tolerance
        self.max_walk_iterations = max_walk_iterations

    @classmethod
    def from_triangulation(cls, triangulation: Triangulation, **kwargs) -> "SurfaceMesh":
        return cls(triangulation.vertices, triangulation.triangles, triangulation.neighbors, **kwargs)

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh, **kwargs) -> "SurfaceMesh":
        """Build a surface from a trimesh mesh, computing the per-edge neighbor table."""
        faces = np.asarray(mesh.faces, dtype=np.int64)
        return cls(np.asarray(mesh.vertices), faces, build_edge_neighbors(faces), **kwargs)

    def to_triangulation(self) -> Triangulation:
        return Triangulation(self.vertices.copy(), self.triangles.copy(), self.neighbors.copy())

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @property
    def is_empty(self) -> bool:
        return self.triangle_count == 0

    @property
    def bounds(self) -> NDArray[np.float64]:
        """2 x 3 array of the minimum and maximum vertex coordinates."""
        if self.vertex_count == 0:
            return np.zeros((2, 3))
        return np.array([self.vertices.min(axis=0), self.vertices.max(axis=0)])

    def has_triangle(self, triangle_index: int) -> bool:
        return 0 <= triangle_index < self.triangle_count

    def triangle_vertices(self, triangle_index: int) -> NDArray[np.float64]:
        """3 x 3 array of the triangle's corner positions in stored order."""
        return self.vertices[self.triangles[triangle_index]]

    def centroid(self, triangle_index: int) -> NDArray[np.float64]:
        return self.triangle_vertices(triangle_index).mean(axis=0)

    def barycentric(self, point: NDArray[np.float64], triangle_index: int) -> NDArray[np.float64]:
        """
        Barycentric weights (u, v, w) of `point` in a triangle, solved in the mesh's projection.

        Degenerate or out-of-range triangles give INVALID_BARYCENTRIC (all -1); check with
        `is_inside` or `geometry.is_degenerate` before trusting the weights.
        """
        if not self.has_triangle(triangle_index):
            return INVALID_BARYCENTRIC.copy()
        return barycentric_coordinates(np.asarray(point, dtype=np.float64),
                                       self.triangle_vertices(triangle_index),
                                       self.projection)

    def is_inside(self, weights: NDArray[np.float64]) -> bool:
        return is_inside(weights, self.inside_tolerance)

    def normal(self, triangle_index: int) -> NDArray[np.float64]:
        """Unit normal following the stored winding; (0, 0, 1) for an out-of-range index."""
        if not self.has_triangle(triangle_index):
            return UP.copy()
        return triangle_normal(self.triangle_vertices(triangle_index))

    def surface_height(self, point: NDArray[np.float64], triangle_index: int) -> float:
        """
        Height of the surface below `point`, interpolated from the triangle's corner z values.

        Out-of-range triangles give 0.0 and degenerate ones the mean corner height.
        """
        if not self.has_triangle(triangle_index):
            return 0.0
        triangle_verts = self.triangle_vertices(triangle_index)
        weights = self.barycentric(point, triangle_index)
        if is_degenerate(weights):
            return float(triangle_verts[:, 2].mean())
        return interpolate_height(weights, triangle_verts)

    def walk(self, point: NDArray[np.float64], seed_triangle: int) -> WalkResult:
        """
        Topological walk from `seed_triangle` to the triangle containing `point`.

        At each triangle the barycentric weights are checked; if any is below the inside
        tolerance the walk crosses the edge opposite the most negative weight. The weight
        of vertex k is negative when the point lies beyond the edge (k+1, k+2), which is
        edge slot (k + 1) % 3. The walk stops at a boundary edge or after
        max_walk_iterations crossings, returning the last triangle tested with found=False.

        This is a greedy rule: on strongly non-convex or inverted meshes it can bounce
        between triangles or stop at the wrong one.
        """
        if self.is_empty:
            return WalkResult(NO_TRIANGLE, False, 0, False)

        point = np.asarray(point, dtype=np.float64)
        current = seed_triangle if self.has_triangle(seed_triangle) else 0

        for step in range(self.max_walk_iterations + 1):
            weights = self.barycentric(point, current)
            if self.is_inside(weights):
                return WalkResult(current, True, step, False)
            if step == self.max_walk_iterations:
                break

            most_negative = int(np.argmin(weights))
            neighbor = int(self.neighbors[current, (most_negative + 1) % 3])
            if neighbor == BOUNDARY or not self.has_triangle(neighbor):
                return WalkResult(current, False, step, True)
            current = neighbor

        return WalkResult(current, False, self.max_walk_iterations, False)

    def locate(self, point: NDArray[np.float64], seed_triangle: int = 0) -> int:
        """Triangle index reached by the topological walk; see `walk` for whether it contains the point."""
        return self.walk(point, seed_triangle).triangle

    def find_triangle_brute_force(self, point: NDArray[np.float64]) -> int:
        """Scan every triangle and return the first containing `point`, or NO_TRIANGLE."""
        if self.is_empty:
            return NO_TRIANGLE
        weights = barycentric_coordinates_vectorized(np.asarray(point, dtype=np.float64),
                                                     self.vertices[self.triangles],
                                                     self.projection)
        inside = np.all(weights >= self.inside_tolerance, axis=1)
        if not np.any(inside):
            return NO_TRIANGLE
        return int(np.argmax(inside))

    def check_neighbor_consistency(self) -> list[str]:
        return check_neighbor_consistency(self.triangles, self.neighbors)

    def triangle_graph(self) -> nx.Graph:
        return triangle_graph(self.neighbors)

    def is_connected(self) -> bool:
        if self.is_empty:
            return False
        return nx.is_connected(self.triangle_graph())

    def __repr__(self):
        return f"SurfaceMesh({self.vertex_count} vertices, {self.triangle_count} triangles)"
