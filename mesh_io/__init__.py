from .mesh_loader import (
    MeshFormatError,
    parse_triangulation,
    format_triangulation,
    load_triangulation,
    save_triangulation,
    load_surface_mesh,
    load_trimesh_surface,
    load_any_surface,
)
from .terrain_loader import TerrainPointCloud, load_terrain, normalize_terrain
