"""
Test script to verify the geometry functions in the surface module.
"""

import os
import sys
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the surface module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from surface.geometry import (
    INVALID_BARYCENTRIC,
    Projection,
    barycentric_coordinates,
    barycentric_coordinates_vectorized,
    interpolate_height,
    is_degenerate,
    is_inside,
    normalize,
    triangle_normal,
    triangle_normals_vectorized,
)


def test_barycentric_interior_point():
    """Weights of an interior point are non-negative and sum to 1."""
    triangle = np.array([
        [0.0, 0.0, 0.0],
        [2.0, 0.0, 1.0],
        [0.0, 2.0, 3.0],
    ])
    rng = np.random.default_rng(7)
    for _ in range(20):
        # Random convex combination strictly inside the triangle
        weights = rng.uniform(0.05, 1.0, size=3)
        weights /= weights.sum()
        point = weights @ triangle
        result = barycentric_coordinates(point, triangle)
        assert np.all(result >= 0.0)
        assert np.isclose(result.sum(), 1.0, atol=1e-5)
        assert np.allclose(result, weights, atol=1e-9)


def test_barycentric_at_vertices():
    """Each corner gets a unit weight on itself."""
    triangle = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    for i in range(3):
        assert np.allclose(barycentric_coordinates(triangle[i], triangle), np.eye(3)[i])


def test_barycentric_xy_ignores_z():
    """The default projection drops the z coordinate of the point and the triangle."""
    triangle = np.array([
        [0.0, 0.0, 5.0],
        [1.0, 0.0, -2.0],
        [0.0, 1.0, 0.5],
    ])
    low = barycentric_coordinates(np.array([0.25, 0.25, -100.0]), triangle)
    high = barycentric_coordinates(np.array([0.25, 0.25, 100.0]), triangle)
    assert np.allclose(low, high)
    assert np.allclose(low, [0.5, 0.25, 0.25])


def test_barycentric_outside_point_has_negative_weight():
    triangle = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    result = barycentric_coordinates(np.array([1.0, 1.0, 0.0]), triangle)
    # u is the weight of vertex 0, which is negative beyond the edge (v1, v2)
    assert np.allclose(result, [-1.0, 1.0, 1.0])
    assert not is_inside(result)


def test_degenerate_triangle_returns_sentinel():
    """Collinear corners (in the XY projection) give the invalid result instead of dividing by ~0."""
    triangle = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [2.0, 0.0, 1.0],
    ])
    result = barycentric_coordinates(np.array([0.5, 0.0, 0.0]), triangle)
    assert np.array_equal(result, INVALID_BARYCENTRIC)
    assert is_degenerate(result)
    assert not is_inside(result)


def test_in_plane_projection_handles_vertical_triangle():
    """A vertical face is degenerate in XY but well defined in its own plane."""
    triangle = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 0.0, 1.0],
    ])
    point = np.array([0.25, 0.0, 0.25])

    assert is_degenerate(barycentric_coordinates(point, triangle, Projection.XY))

    result = barycentric_coordinates(point, triangle, Projection.IN_PLANE)
    assert np.allclose(result, [0.5, 0.25, 0.25])


def test_barycentric_vectorized_matches_scalar():
    triangles = np.array([
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
        [[1.0, 0.0, 0.0], [1.0, 1.0, 1.0], [0.0, 1.0, 0.5]],
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]],  # degenerate
    ])
    point = np.array([0.4, 0.3, 0.2])
    batch = barycentric_coordinates_vectorized(point, triangles)
    for i, triangle in enumerate(triangles):
        assert np.allclose(batch[i], barycentric_coordinates(point, triangle))


def test_triangle_normal():
    """Counter-clockwise winding seen from above points up; reversing it points down."""
    triangle = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
    ])
    assert np.allclose(triangle_normal(triangle), [0.0, 0.0, 1.0])
    assert np.allclose(triangle_normal(triangle[::-1]), [0.0, 0.0, -1.0])

    tilted = np.array([
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 1.0],
        [0.0, 1.0, 0.0],
    ])
    normal = triangle_normal(tilted)
    assert np.isclose(np.linalg.norm(normal), 1.0)
    assert np.allclose(normal, np.array([-1.0, 0.0, 1.0]) / np.sqrt(2))


def test_triangle_normals_vectorized():
    triangles = np.array([
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
        [[0.0, 0.0, 0.0], [1.0, 0.0, 1.0], [0.0, 1.0, 0.0]],
        [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [2.0, 0.0, 0.0]],  # zero area
    ])
    normals = triangle_normals_vectorized(triangles)
    assert np.allclose(normals[0], triangle_normal(triangles[0]))
    assert np.allclose(normals[1], triangle_normal(triangles[1]))
    assert np.allclose(normals[2], 0.0)


def test_normalize_zero_vector():
    assert np.array_equal(normalize(np.zeros(3)), np.zeros(3))
    assert np.allclose(normalize(np.array([3.0, 0.0, 4.0])), [0.6, 0.0, 0.8])


def test_interpolate_height():
    triangle = np.array([
        [0.0, 0.0, 1.0],
        [1.0, 0.0, 2.0],
        [0.0, 1.0, 3.0],
    ])
    assert np.isclose(interpolate_height(np.array([0.5, 0.25, 0.25]), triangle), 1.75)


@pytest.mark.parametrize("weights, expected", [
    (np.array([0.2, 0.3, 0.5]), True),
    (np.array([-0.0005, 0.5, 0.5005]), True),
    (np.array([-0.002, 0.5, 0.502]), False),
])
def test_is_inside_tolerance(weights, expected):
    assert is_inside(weights) == expected
