from dataclasses import dataclass, field
import numpy as np
from numpy.typing import NDArray


@dataclass
class BodyState:
    position: NDArray[np.float64]  # 3-vector, center of the sphere
    velocity: NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    current_triangle: int = 0  # index into the mesh's triangles, also the next walk seed

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64).reshape(3)
        self.velocity = np.array(self.velocity, dtype=np.float64).reshape(3)
        self.current_triangle = int(self.current_triangle)

    def copy(self):
        return BodyState(self.position.copy(), self.velocity.copy(), self.current_triangle)
