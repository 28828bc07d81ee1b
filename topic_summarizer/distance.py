from __future__ import annotations
from typing import Sequence

import numpy as np

METRICS = ("hellinger", "cosine")

def hellinger_distance(p: np.ndarray, q: np.ndarray) -> float:
    """
    Hellinger distance between two probability distributions:
      H(p, q) = sqrt(1 - sum_d sqrt(p[d] * q[d]))
    Bounded in [0, 1], 0 only when p == q.
    """
    p = np.asarray(p, dtype=float)
    q = np.asarray(q, dtype=float)
    bc = np.sum(np.sqrt(p * q))
    return float(np.sqrt(min(1.0, max(0.0, 1.0 - bc))))

def _hellinger_matrix(X: np.ndarray) -> np.ndarray:
    R = np.sqrt(X)
    bc = R @ R.T  # Bhattacharyya coefficients
    return np.sqrt(np.clip(1.0 - bc, 0.0, 1.0))

def _cosine_matrix(X: np.ndarray) -> np.ndarray:
    # (1 - cos) / 2 keeps the distance in [0, 1] for vectors of any sign
    norms = np.linalg.norm(X, axis=1, keepdims=True)
    U = X / np.where(norms == 0, 1.0, norms)
    return np.clip((1.0 - U @ U.T) / 2.0, 0.0, 1.0)

def pairwise_distances(vectors: Sequence[np.ndarray], metric: str = "hellinger") -> np.ndarray:
    """N x N distance matrix: symmetric, zero diagonal, entries in [0, 1]."""
    n = len(vectors)
    if n == 0:
        return np.zeros((0, 0))
    X = np.vstack([np.asarray(v, dtype=float) for v in vectors])

    if metric == "hellinger":
        if (X < 0).any():
            raise ValueError("hellinger distance needs non-negative vectors; use metric='cosine'")
        D = _hellinger_matrix(X)
    elif metric == "cosine":
        D = _cosine_matrix(X)
    else:
        raise ValueError(f"Unknown metric: {metric}")

    # float round-off can leave tiny asymmetries and a non-zero diagonal
    D = (D + D.T) / 2.0
    np.fill_diagonal(D, 0.0)
    return D
