from .camera import Camera
from .colors import height_colors, slope_colors
from .vertex_streams import (
    surface_draw_vertices,
    sphere_vertices,
    translate_vertices,
    body_draw_vertices,
    BodyMeshStream,
)
