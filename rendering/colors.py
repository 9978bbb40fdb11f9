import numpy as np
from numpy.typing import NDArray
import matplotlib.colors as mcolors


# Blue (low) -> cyan -> green -> yellow -> red (high), evenly spaced
HEIGHT_GRADIENT = mcolors.LinearSegmentedColormap.from_list(
    "terrain_height",
    [(0.0, 0.0, 1.0), (0.0, 1.0, 1.0), (0.0, 1.0, 0.0), (1.0, 1.0, 0.0), (1.0, 0.0, 0.0)],
)


def height_colors(heights: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Map heights to RGB with HEIGHT_GRADIENT, normalized over the range of `heights`.

    Returns:
        numpy.ndarray: N x 3 array of RGB values in [0, 1]
    """
    heights = np.asarray(heights, dtype=np.float64)
    if heights.size == 0:
        return np.zeros((0, 3))
    low, high = heights.min(), heights.max()
    if high > low:
        normalized = np.clip((heights - low) / (high - low), 0.0, 1.0)
    else:
        normalized = np.zeros_like(heights)
    return HEIGHT_GRADIENT(normalized)[:, :3]


def slope_colors(normals: NDArray[np.float64]) -> NDArray[np.float64]:
    """Shade faces by how much they point up: f = (nz + 1) / 2, color (0.5 f, 0.8 f, 0.3 f)."""
    factor = (normals[:, 2] + 1.0) * 0.5
    return factor[:, np.newaxis] * np.array([0.5, 0.8, 0.3])
