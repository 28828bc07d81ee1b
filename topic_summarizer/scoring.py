from __future__ import annotations
import logging

import numpy as np

from .datatypes import Graph
from .graphing import build_adjacency

logger = logging.getLogger(__name__)

def eigenvector_centrality(A: np.ndarray, max_iter: int = 1000, tol: float = 1e-10) -> np.ndarray:
    """
    Eigenvector centrality of a weighted undirected graph.

    Power iteration x <- (A + I) x starting from all ones; the shift by I has
    the same dominant eigenvector as A but also converges on bipartite graphs.

    Args:
        A: symmetric, non-negative weighted adjacency matrix
        max_iter: maximum number of iterations
        tol: convergence tolerance on the summed absolute change

    Returns:
        Scores scaled so the largest is 1. Nodes without edges score 0, and
        a graph without edges scores 0 everywhere.
    """
    A = np.asarray(A, dtype=float)
    n = A.shape[0]
    if n == 0:
        return np.zeros(0)

    isolated = ~(A > 0).any(axis=1)
    if isolated.all():
        return np.zeros(n)

    M = A + np.eye(n)
    x = np.ones(n)
    x[isolated] = 0.0
    x /= x.max()

    for iteration in range(max_iter):
        x_new = M @ x
        x_new /= x_new.max()
        diff = np.abs(x_new - x).sum()
        x = x_new
        if diff < n * tol:
            logger.debug("centrality converged after %d iterations", iteration + 1)
            break
    else:
        logger.warning("eigenvector centrality did not converge in %d iterations", max_iter)

    x[isolated] = 0.0
    return x

def score_sentences(graph: Graph, max_iter: int = 1000, tol: float = 1e-10) -> np.ndarray:
    """Centrality score for every node of the sentence graph, in node order."""
    return eigenvector_centrality(build_adjacency(graph), max_iter=max_iter, tol=tol)
