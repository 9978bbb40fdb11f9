"""
Point-cloud terrain loading (.xyz files) for preview rendering.
"""

from dataclasses import dataclass
from pathlib import Path
import numpy as np
from numpy.typing import NDArray

from rendering.colors import height_colors
from .mesh_loader import MeshFormatError


@dataclass
class TerrainPointCloud:
    points: NDArray[np.float32]  # N x 6 array of x, y, z, r, g, b
    center: NDArray[np.float64]  # bounding box middle of the raw coordinates
    scale: float  # factor applied after centering, 2 / largest extent

    @property
    def positions(self) -> NDArray[np.float32]:
        return self.points[:, :3]

    @property
    def colors(self) -> NDArray[np.float32]:
        return self.points[:, 3:]

    def __len__(self):
        return len(self.points)


def normalize_terrain(raw_points: NDArray[np.float64]) -> TerrainPointCloud:
    """
    Center raw x, y, z points on their bounding box middle, scale them into [-1, 1] by the
    largest extent and color them by their original height.
    """
    raw_points = np.asarray(raw_points, dtype=np.float64).reshape(-1, 3)
    if len(raw_points) == 0:
        return TerrainPointCloud(np.zeros((0, 6), dtype=np.float32), np.zeros(3), 1.0)

    minimum = raw_points.min(axis=0)
    maximum = raw_points.max(axis=0)
    center = (minimum + maximum) / 2.0
    max_range = (maximum - minimum).max()
    scale = 2.0 / max_range if max_range > 0 else 1.0

    points = np.empty((len(raw_points), 6), dtype=np.float32)
    points[:, :3] = (raw_points - center) * scale
    points[:, 3:] = height_colors(raw_points[:, 2])
    return TerrainPointCloud(points=points, center=center, scale=float(scale))


def load_terrain(filepath, verbose: bool = False) -> TerrainPointCloud:
    """
    Load an .xyz point cloud: a point count followed by x y z triples.

    The count is only a hint; all complete triples in the file are read.

    Raises:
        FileNotFoundError: if the file does not exist
        MeshFormatError: if the file is empty or holds non-numeric values
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"The file {filepath} does not exist.")

    tokens = filepath.read_text().split()
    if not tokens:
        raise MeshFormatError(f"{filepath} is empty")
    try:
        expected_points = int(tokens[0])
        values = np.array(tokens[1:], dtype=np.float64)
    except ValueError:
        raise MeshFormatError(f"Non-numeric value in {filepath}") from None

    raw_points = values[:len(values) // 3 * 3].reshape(-1, 3)
    if verbose:
        print(f"Expected {expected_points} points, loaded {len(raw_points)}")
        if len(raw_points):
            for axis, name in enumerate("XYZ"):
                print(f"{name} range: [{raw_points[:, axis].min():.2f}, {raw_points[:, axis].max():.2f}]")
    return normalize_terrain(raw_points)
