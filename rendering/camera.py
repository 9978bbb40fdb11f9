from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray

from surface.geometry import normalize


@dataclass
class Camera:
    """Eye/target/up camera consumed by the renderer."""
    eye: NDArray[np.float64] = field(default_factory=lambda: np.array([3.0, 3.0, 4.0]))
    target: NDArray[np.float64] = field(default_factory=lambda: np.array([1.0, 1.0, 1.5]))
    up: NDArray[np.float64] = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))

    def __post_init__(self):
        self.eye = np.array(self.eye, dtype=np.float64)
        self.target = np.array(self.target, dtype=np.float64)
        self.up = np.array(self.up, dtype=np.float64)

    def get_eye(self):
        return self.eye.copy()

    def get_target(self):
        return self.target.copy()

    def get_up(self):
        return self.up.copy()

    def set_eye(self, eye):
        self.eye = np.array(eye, dtype=np.float64)

    def set_target(self, target):
        self.target = np.array(target, dtype=np.float64)

    def set_up(self, up):
        self.up = np.array(up, dtype=np.float64)

    def view_matrix(self) -> NDArray[np.float64]:
        """
        Right-handed look-at matrix (row-major, column vectors) mapping world
        coordinates into camera space, with the camera looking down -z.
        """
        forward = normalize(self.target - self.eye)
        right = normalize(np.cross(forward, self.up))
        true_up = np.cross(right, forward)

        view = np.identity(4)
        view[0, :3] = right
        view[1, :3] = true_up
        view[2, :3] = -forward
        view[0, 3] = -np.dot(right, self.eye)
        view[1, 3] = -np.dot(true_up, self.eye)
        view[2, 3] = np.dot(forward, self.eye)
        return view
