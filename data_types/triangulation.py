from dataclasses import dataclass
import numpy as np
from numpy.typing import NDArray

BOUNDARY = -1  # neighbor index for an edge with no triangle on the other side


@dataclass
class Triangulation:
    vertices: NDArray[np.float64]  # V x 3 array of vertex coordinates
    triangles: NDArray[np.int64]  # F x 3 array of vertex *indices*, winding defines the normal
    neighbors: NDArray[np.int64]  # F x 3 array of triangle indices, neighbors[i, k] is across edge (k, k+1)
