from .geometry import Projection, barycentric_coordinates, is_inside, triangle_normal
from .adjacency import build_edge_neighbors, check_neighbor_consistency
from .mesh import SurfaceMesh, WalkResult, NO_TRIANGLE, MAX_WALK_ITERATIONS
