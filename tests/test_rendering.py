"""
Test script to verify the renderer vertex streams, colors and camera.
"""

import os
import sys
import numpy as np
import pytest
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

# Add the parent directory to the Python path so we can import the rendering module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from rendering import (
    BodyMeshStream,
    body_draw_vertices,
    Camera,
    height_colors,
    slope_colors,
    sphere_vertices,
    surface_draw_vertices,
    translate_vertices,
)
from rendering.plotting import camera_view_angles, plot_surface_with_trajectory
from rendering.vertex_streams import BALL_COLOR
from surface.mesh import SurfaceMesh


def create_flat_square():
    vertices = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    return SurfaceMesh(vertices, [[0, 1, 2], [0, 2, 3]], [[-1, -1, 1], [0, -1, -1]])


def create_ramp():
    """Two triangles rising from z = 0 at x = 0 to z = 2 at x = 1."""
    vertices = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 2.0],
        [1.0, 1.0, 2.0],
        [0.0, 1.0, 0.0],
    ])
    return SurfaceMesh(vertices, [[0, 1, 2], [0, 2, 3]], [[-1, -1, 1], [0, -1, -1]])


def test_slope_colors():
    normals = np.array([
        [0.0, 0.0, 1.0],
        [1.0, 0.0, 0.0],
        [0.0, 0.0, -1.0],
    ])
    colors = slope_colors(normals)
    assert np.allclose(colors[0], [0.5, 0.8, 0.3])
    assert np.allclose(colors[1], [0.25, 0.4, 0.15])
    assert np.allclose(colors[2], 0.0)


def test_height_colors_gradient():
    colors = height_colors(np.array([0.0, 0.25, 0.5, 0.75, 1.0]))
    expected = [
        [0.0, 0.0, 1.0],  # blue
        [0.0, 1.0, 1.0],  # cyan
        [0.0, 1.0, 0.0],  # green
        [1.0, 1.0, 0.0],  # yellow
        [1.0, 0.0, 0.0],  # red
    ]
    assert colors.shape == (5, 3)
    assert np.allclose(colors, expected, atol=0.02)


def test_height_colors_constant_and_empty():
    assert np.allclose(height_colors(np.full(4, 2.5)), [0.0, 0.0, 1.0], atol=0.02)
    assert height_colors(np.array([])).shape == (0, 3)


def test_surface_stream_slope_shading():
    mesh = create_flat_square()
    stream = surface_draw_vertices(mesh)
    assert stream.shape == (6, 6)
    # Three vertices per triangle, in stored order
    assert np.array_equal(stream[:3, :3], mesh.vertices[[0, 1, 2]])
    assert np.array_equal(stream[3:, :3], mesh.vertices[[0, 2, 3]])
    assert np.allclose(stream[:, 3:], [0.5, 0.8, 0.3])


def test_surface_stream_height_shading():
    mesh = create_ramp()
    stream = surface_draw_vertices(mesh, shading="height")
    assert stream.shape == (6, 6)
    low = stream[:, 2] == 0.0
    assert np.allclose(stream[low, 3:], [0.0, 0.0, 1.0], atol=0.02)
    assert np.allclose(stream[~low, 3:], [1.0, 0.0, 0.0], atol=0.02)


def test_surface_stream_edge_cases():
    empty = SurfaceMesh(np.zeros((0, 3)), np.zeros((0, 3)), np.zeros((0, 3)))
    assert surface_draw_vertices(empty).shape == (0, 6)
    with pytest.raises(ValueError):
        surface_draw_vertices(create_flat_square(), shading="wireframe")


def test_sphere_vertices():
    radius = 0.1
    stream = sphere_vertices(radius)
    assert stream.shape == (16 * 16 * 6, 6)
    assert np.allclose(np.linalg.norm(stream[:, :3], axis=1), radius)
    assert np.allclose(stream[:, 3:], BALL_COLOR)

    # Each quad's two triangles share their first vertex and the diagonal
    quad = stream[:6, :3]
    assert np.array_equal(quad[0], quad[3])
    assert np.array_equal(quad[2], quad[4])


def test_sphere_vertices_custom_resolution():
    stream = sphere_vertices(2.0, stacks=4, slices=8, color=(0.0, 1.0, 0.0))
    assert stream.shape == (4 * 8 * 6, 6)
    assert np.allclose(stream[:, :3].max(axis=0), [2.0, 2.0, 2.0])


def test_translate_vertices():
    stream = sphere_vertices(1.0, stacks=2, slices=4)
    moved = translate_vertices(stream, np.array([1.0, 2.0, 3.0]))
    assert np.allclose(moved[:, :3] - stream[:, :3], [1.0, 2.0, 3.0])
    assert np.array_equal(moved[:, 3:], stream[:, 3:])


def test_body_draw_vertices_leaves_sphere_unchanged():
    sphere = sphere_vertices(0.5, stacks=4, slices=4)
    original = sphere.copy()
    placed = body_draw_vertices(sphere, [0.0, 0.0, 2.0])
    assert np.array_equal(sphere, original)
    assert np.allclose(placed[:, 2].min(), 1.5)


def test_body_mesh_stream():
    body = BodyMeshStream(0.25)
    center = np.array([1.0, -1.0, 0.5])
    stream = body.at(center)
    assert np.allclose(np.linalg.norm(stream[:, :3] - center, axis=1), 0.25)
    # The local sphere is reused unchanged
    assert np.allclose(np.linalg.norm(body.local_vertices[:, :3], axis=1), 0.25)


def test_camera_defaults_and_setters():
    camera = Camera()
    assert np.array_equal(camera.get_eye(), [3.0, 3.0, 4.0])
    assert np.array_equal(camera.get_target(), [1.0, 1.0, 1.5])
    assert np.array_equal(camera.get_up(), [0.0, 0.0, 1.0])

    camera.set_eye([0.0, -5.0, 2.0])
    camera.set_target([0.0, 0.0, 0.0])
    assert np.array_equal(camera.get_eye(), [0.0, -5.0, 2.0])

    # Getters return copies
    eye = camera.get_eye()
    eye[0] = 100.0
    assert camera.get_eye()[0] == 0.0


def test_camera_view_matrix():
    camera = Camera()
    view = camera.view_matrix()
    rotation = view[:3, :3]
    assert np.allclose(rotation @ rotation.T, np.eye(3))
    assert np.isclose(np.linalg.det(rotation), 1.0)

    # The eye maps to the origin and the target lies straight ahead (down -z)
    eye = view @ np.append(camera.eye, 1.0)
    target = view @ np.append(camera.target, 1.0)
    assert np.allclose(eye[:3], 0.0)
    assert np.allclose(target[:2], 0.0)
    assert target[2] < 0


def test_camera_view_angles():
    camera = Camera(eye=[1.0, 0.0, 1.0], target=[0.0, 0.0, 0.0])
    elevation, azimuth = camera_view_angles(camera)
    assert np.isclose(elevation, 45.0)
    assert np.isclose(azimuth, 0.0)


def test_plot_surface_with_trajectory():
    mesh = create_ramp()
    positions = np.array([[0.2, 0.5, 0.5], [0.4, 0.5, 0.9]])
    fig, ax = plot_surface_with_trajectory(mesh, positions, camera=Camera())
    assert len(ax.collections) >= 1
    assert ax.get_title() == "Rolling Ball"
    plt.close(fig)
