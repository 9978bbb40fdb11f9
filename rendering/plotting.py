import numpy as np
from numpy.typing import NDArray
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from surface.mesh import SurfaceMesh
from .camera import Camera
from .vertex_streams import surface_draw_vertices, BALL_COLOR


def camera_view_angles(camera: Camera) -> tuple[float, float]:
    """Elevation and azimuth (degrees) of the camera's eye as seen from its target."""
    offset = camera.eye - camera.target
    horizontal = np.hypot(offset[0], offset[1])
    elevation = np.degrees(np.arctan2(offset[2], horizontal))
    azimuth = np.degrees(np.arctan2(offset[1], offset[0]))
    return float(elevation), float(azimuth)


def plot_surface_with_trajectory(mesh: SurfaceMesh, positions: NDArray[np.float64] = None,
                                 camera: Camera = None, shading="slope", title="Rolling Ball",
                                 figsize=(10, 8), ax=None, alpha=0.8):
    """
    Plot the surface with its renderer colors and the path of the body's center.

    Parameters
    ----------
    mesh : SurfaceMesh
        The surface to draw.
    positions : N x 3 array, optional
        Body centers over time, drawn as a line with the final position marked.
    camera : Camera, optional
        Sets the view direction; matplotlib's default view is used if None.
    shading : str
        "slope" or "height", as for surface_draw_vertices.

    Returns
    -------
    fig, ax
    """
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    stream = surface_draw_vertices(mesh, shading)
    if len(stream):
        face_corners = stream[:, :3].reshape(-1, 3, 3)
        face_colors = stream[:, 3:].reshape(-1, 3, 3).mean(axis=1)
        collection = Poly3DCollection(face_corners, alpha=alpha)
        collection.set_facecolor(face_colors)
        collection.set_edgecolor('black')
        collection.set_linewidth(0.2)
        ax.add_collection3d(collection)

        lower, upper = mesh.bounds
        ax.set_xlim(lower[0], upper[0])
        ax.set_ylim(lower[1], upper[1])
        ax.set_zlim(lower[2], max(upper[2], lower[2] + 1e-3))

    if positions is not None and len(positions):
        ax.plot(positions[:, 0], positions[:, 1], positions[:, 2], color=BALL_COLOR, linewidth=1.5, label="ball path")
        ax.scatter(*positions[-1], color=BALL_COLOR, s=40)
        ax.legend(loc='upper right')

    if camera is not None:
        elevation, azimuth = camera_view_angles(camera)
        ax.view_init(elev=elevation, azim=azimuth)

    ax.set_title(title)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')
    plt.tight_layout()
    return fig, ax
