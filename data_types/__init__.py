from .triangulation import Triangulation, BOUNDARY
from .body_state import BodyState
