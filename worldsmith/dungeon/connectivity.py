"""Room graph: complete graph, spanning tree and loop-edge selection.

Rooms are graph nodes by list index. Edge weight is the Manhattan distance
between room centers; edges are ``(weight, i, j)`` tuples with ``i < j`` so
sorting them applies the lowest-index tie-break for free.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Sequence, Tuple

from .layout import Room

Edge = Tuple[int, int, int]


def complete_graph(rooms: Sequence[Room]) -> List[Edge]:
    centers = [r.center for r in rooms]
    edges: List[Edge] = []
    for i in range(len(centers)):
        x1, y1 = centers[i]
        for j in range(i + 1, len(centers)):
            x2, y2 = centers[j]
            edges.append((abs(x1 - x2) + abs(y1 - y2), i, j))
    edges.sort()
    return edges


def minimum_spanning_tree(node_count: int, edges: Sequence[Edge]) -> List[Edge]:
    """Kruskal over pre-sorted edges with a path-halving union-find."""
    parent = list(range(node_count))

    def find(a):
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    tree: List[Edge] = []
    for edge in edges:
        _, i, j = edge
        fi, fj = find(i), find(j)
        if fi != fj:
            parent[fi] = fj
            tree.append(edge)
            if len(tree) == node_count - 1:
                break
    return tree


def select_loop_edges(edges: Sequence[Edge], tree: Sequence[Edge], ratio: float) -> List[Edge]:
    """Shortest non-tree edges, ``floor(len(tree) * ratio)`` of them."""
    count = int(len(tree) * max(0.0, ratio))
    if count <= 0:
        return []
    in_tree = {(i, j) for _, i, j in tree}
    return [e for e in edges if (e[1], e[2]) not in in_tree][:count]


def adjacency(node_count: int, edges: Sequence[Edge]) -> Dict[int, List[int]]:
    adj: Dict[int, List[int]] = {i: [] for i in range(node_count)}
    for _, i, j in edges:
        adj[i].append(j)
        adj[j].append(i)
    return adj


def hop_distances(node_count: int, edges: Sequence[Edge], start: int) -> Dict[int, int]:
    adj = adjacency(node_count, edges)
    dist = {start: 0}
    q = deque([start])
    while q:
        cur = q.popleft()
        for nxt in adj[cur]:
            if nxt not in dist:
                dist[nxt] = dist[cur] + 1
                q.append(nxt)
    return dist


__all__ = [
    "Edge",
    "complete_graph",
    "minimum_spanning_tree",
    "select_loop_edges",
    "adjacency",
    "hop_distances",
]
