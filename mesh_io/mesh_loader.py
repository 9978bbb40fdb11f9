"""
Reading and writing triangulated surfaces in the plain-text mesh format:

    <vertex count>
    x y z            (one line per vertex)
    <triangle count>
    i0 i1 i2 n0 n1 n2  (vertex indices, then the neighbor across each edge, -1 for boundary)

Tokens are whitespace separated; line breaks carry no meaning.
"""

from pathlib import Path
import numpy as np
import trimesh

from data_types import Triangulation, BOUNDARY
from surface.geometry import Projection
from surface.mesh import SurfaceMesh


class MeshFormatError(ValueError):
    """Raised when mesh text does not follow the vertex/triangle/neighbor layout."""


def _read_count(tokens, position: int, what: str) -> int:
    if position >= len(tokens):
        raise MeshFormatError(f"Missing {what} count")
    try:
        count = int(tokens[position])
    except ValueError:
        raise MeshFormatError(f"Invalid {what} count: {tokens[position]!r}") from None
    if count < 0:
        raise MeshFormatError(f"Negative {what} count: {count}")
    return count


def _read_block(tokens, position: int, rows: int, columns: int, dtype, what: str) -> np.ndarray:
    end = position + rows * columns
    if end > len(tokens):
        raise MeshFormatError(f"Expected {rows} {what} records but the input ends early")
    try:
        values = np.array(tokens[position:end], dtype=dtype)
    except ValueError:
        raise MeshFormatError(f"Non-numeric value in {what} records") from None
    return values.reshape(rows, columns)


def parse_triangulation(text: str) -> Triangulation:
    """
    Parse mesh text into a Triangulation.

    Raises:
        MeshFormatError: if counts are missing, records are short or non-numeric, trailing
            tokens remain, or an index points outside the vertex/triangle lists
    """
    tokens = text.split()

    num_vertices = _read_count(tokens, 0, "vertex")
    vertices = _read_block(tokens, 1, num_vertices, 3, np.float64, "vertex")
    position = 1 + num_vertices * 3

    num_triangles = _read_count(tokens, position, "triangle")
    records = _read_block(tokens, position + 1, num_triangles, 6, np.int64, "triangle")
    position += 1 + num_triangles * 6

    if position != len(tokens):
        raise MeshFormatError(f"{len(tokens) - position} unexpected tokens after the triangle records")

    triangles = records[:, :3]
    neighbors = records[:, 3:]

    if num_triangles and (triangles.min() < 0 or triangles.max() >= num_vertices):
        raise MeshFormatError("Triangle vertex index out of range")
    bad_neighbors = (neighbors != BOUNDARY) & ((neighbors < 0) | (neighbors >= num_triangles))
    if np.any(bad_neighbors):
        raise MeshFormatError("Neighbor index out of range (use -1 for a boundary edge)")

    return Triangulation(vertices=vertices, triangles=triangles, neighbors=neighbors)


def format_triangulation(triangulation: Triangulation) -> str:
    """Format a Triangulation as mesh text, the inverse of parse_triangulation."""
    lines = [str(len(triangulation.vertices))]
    lines += [" ".join(repr(float(c)) for c in vertex) for vertex in triangulation.vertices]
    lines.append(str(len(triangulation.triangles)))
    for triangle, neighbor_row in zip(triangulation.triangles, triangulation.neighbors):
        lines.append(" ".join(str(int(i)) for i in (*triangle, *neighbor_row)))
    return "\n".join(lines) + "\n"


def load_triangulation(filepath, verbose: bool = False) -> Triangulation:
    """
    Load a mesh text file.

    Raises:
        FileNotFoundError: if the file does not exist
        MeshFormatError: if the contents are malformed
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"The file {filepath} does not exist.")
    triangulation = parse_triangulation(filepath.read_text())
    if verbose:
        print(f"Loaded {len(triangulation.vertices)} vertices and {len(triangulation.triangles)} triangles from {filepath}")
    return triangulation


def save_triangulation(filepath, triangulation: Triangulation) -> None:
    Path(filepath).write_text(format_triangulation(triangulation))


def load_surface_mesh(filepath, projection: Projection = Projection.XY, verbose: bool = False) -> SurfaceMesh:
    """Load a mesh text file straight into a SurfaceMesh."""
    return SurfaceMesh.from_triangulation(load_triangulation(filepath, verbose), projection=projection)


def load_trimesh_surface(filepath, projection: Projection = Projection.XY, verbose: bool = False) -> SurfaceMesh:
    """
    Load any mesh format trimesh understands (STL, OBJ, PLY, ...) and compute its neighbor links.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not a single triangle mesh or has non-manifold edges
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"The file {filepath} does not exist.")
    mesh = trimesh.load(str(filepath), force="mesh")
    if not isinstance(mesh, trimesh.Trimesh):
        raise ValueError(f"{filepath} does not contain a triangle mesh")
    surface = SurfaceMesh.from_trimesh(mesh, projection=projection)
    if verbose:
        print(f"Loaded {surface.vertex_count} vertices and {surface.triangle_count} triangles from {filepath}")
    return surface


def load_any_surface(filepath, projection: Projection = Projection.XY, verbose: bool = False) -> SurfaceMesh:
    """Dispatch on extension: .txt/.mesh files use the text format, everything else goes through trimesh."""
    if Path(filepath).suffix.lower() in (".txt", ".mesh", ""):
        return load_surface_mesh(filepath, projection, verbose)
    return load_trimesh_surface(filepath, projection, verbose)
