"""
Per-edge triangle adjacency: building the neighbor table and checking it.
"""

import numpy as np
from numpy.typing import NDArray
import networkx as nx

from data_types import BOUNDARY


def edge_key(v1: int, v2: int) -> tuple:
    return (v1, v2) if v1 < v2 else (v2, v1)


def build_edge_to_triangles(triangles: NDArray[np.int64]) -> dict:
    """Map each undirected edge (sorted vertex pair) to the list of (triangle, edge slot) pairs using it."""
    edge_to_triangles = {}
    for triangle_idx, triangle in enumerate(triangles):
        for k in range(3):
            key = edge_key(int(triangle[k]), int(triangle[(k + 1) % 3]))
            edge_to_triangles.setdefault(key, []).append((triangle_idx, k))
    return edge_to_triangles


def build_edge_neighbors(triangles: NDArray[np.int64]) -> NDArray[np.int64]:
    """
    Build the F x 3 neighbor table for a triangle list.

    neighbors[i, k] is the triangle sharing edge (triangles[i, k], triangles[i, (k+1) % 3])
    with triangle i, or BOUNDARY if no other triangle uses that edge.

    Raises:
        ValueError: if an edge is shared by more than two triangles
    """
    neighbors = np.full((len(triangles), 3), BOUNDARY, dtype=np.int64)
    for key, users in build_edge_to_triangles(triangles).items():
        if len(users) > 2:
            raise ValueError(f"Edge {key} is shared by {len(users)} triangles, mesh is not manifold")
        if len(users) == 2:
            (t1, k1), (t2, k2) = users
            neighbors[t1, k1] = t2
            neighbors[t2, k2] = t1
    return neighbors


def check_neighbor_consistency(triangles: NDArray[np.int64], neighbors: NDArray[np.int64]) -> list[str]:
    """
    Check that every non-boundary neighbor link is mutual and sits on a shared edge.

    Returns:
        list[str]: a description of each problem found, empty if the table is consistent
    """
    problems = []
    num_triangles = len(triangles)
    for triangle_idx in range(num_triangles):
        for k in range(3):
            neighbor = int(neighbors[triangle_idx, k])
            if neighbor == BOUNDARY:
                continue
            if neighbor < 0 or neighbor >= num_triangles:
                problems.append(f"Triangle {triangle_idx} edge {k}: neighbor {neighbor} out of range")
                continue

            key = edge_key(int(triangles[triangle_idx, k]), int(triangles[triangle_idx, (k + 1) % 3]))
            neighbor_edges = [
                edge_key(int(triangles[neighbor, j]), int(triangles[neighbor, (j + 1) % 3]))
                for j in range(3)
            ]
            if key not in neighbor_edges:
                problems.append(f"Triangle {triangle_idx} edge {k}: triangle {neighbor} does not contain edge {key}")
                continue

            back_link = int(neighbors[neighbor, neighbor_edges.index(key)])
            if back_link != triangle_idx:
                problems.append(
                    f"Triangle {triangle_idx} edge {k}: triangle {neighbor} links back to {back_link} across edge {key}"
                )
    return problems


def triangle_graph(neighbors: NDArray[np.int64]) -> nx.Graph:
    """Graph with one node per triangle and an edge for each neighbor link."""
    graph = nx.Graph()
    graph.add_nodes_from(range(len(neighbors)))
    for triangle_idx, row in enumerate(neighbors):
        for neighbor in row:
            if neighbor != BOUNDARY:
                graph.add_edge(triangle_idx, int(neighbor))
    return graph


def count_boundary_edges(neighbors: NDArray[np.int64]) -> int:
    return int(np.count_nonzero(neighbors == BOUNDARY))
