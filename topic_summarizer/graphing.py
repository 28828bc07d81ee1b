from __future__ import annotations
import logging
from typing import List

import networkx as nx
import numpy as np

from .datatypes import Graph, Edge, Sentence

logger = logging.getLogger(__name__)

def similarity_matrix(dist: np.ndarray, scale: float = 100.0) -> np.ndarray:
    """similarity = (1 - distance) * scale, no self-similarity."""
    S = (1.0 - np.asarray(dist, dtype=float)) * scale
    np.fill_diagonal(S, 0.0)
    return S

def prune_to_neighbors(sim: np.ndarray, k: int = 3) -> np.ndarray:
    """
    Keep, for each row, only the k largest off-diagonal similarities.

    The result is directed: row i lists the nodes i counts among its k nearest
    neighbours. Ties go to the lower column index.
    """
    n = sim.shape[0]
    if n - 1 <= k:
        # every other node is already a neighbour
        P = sim.copy()
        np.fill_diagonal(P, 0.0)
        return P

    P = np.zeros_like(sim)
    for i in range(n):
        row = sim[i].copy()
        row[i] = -np.inf
        keep = np.argsort(-row, kind="stable")[:k]
        P[i, keep] = sim[i, keep]
    return P

def symmetrize(sim: np.ndarray) -> np.ndarray:
    # an edge survives if either endpoint kept it
    return np.maximum(sim, sim.T)

def build_graph(nodes: List[Sentence], weights: np.ndarray) -> Graph:
    edges: List[Edge] = []
    n = len(nodes)
    for i in range(n):
        for j in range(i+1, n):
            w = float(weights[i, j])
            if w > 0:
                edges.append(Edge(i=i, j=j, weight=w))
    logger.debug("graph has %d nodes and %d edges", n, len(edges))
    return Graph(nodes=nodes, edges=edges)

def build_similarity_graph(nodes: List[Sentence],
                           dist: np.ndarray,
                           neighbor_k: int = 3,
                           scale: float = 100.0) -> Graph:
    """Distance matrix -> k-nearest-neighbour similarity graph."""
    S = similarity_matrix(dist, scale=scale)
    S = symmetrize(prune_to_neighbors(S, k=neighbor_k))
    return build_graph(nodes, S)

def build_adjacency(graph: Graph) -> np.ndarray:
    n = len(graph.nodes)
    A = np.zeros((n, n))
    for e in graph.edges:
        A[e.i, e.j] = e.weight
        A[e.j, e.i] = e.weight
    return A

def to_networkx(graph: Graph) -> nx.Graph:
    G = nx.Graph()
    for i, s in enumerate(graph.nodes):
        G.add_node(i, idx=s.idx, text=s.text)
    for e in graph.edges:
        G.add_edge(e.i, e.j, weight=e.weight)
    return G
