"""Numba kernels for per-zone permutation inference.

Layer 2: Primitives - Pure operations.
"""

import numpy as np
from numba import njit, prange


@njit(parallel=True, cache=True)
def conditional_permutation_lisa(
    centered: np.ndarray,
    neighbor_weights: np.ndarray,
    neighbor_counts: np.ndarray,
    random_ids: np.ndarray,
    variance: float,
) -> np.ndarray:
    """Simulated local Moran values under conditional permutation.

    Zone ``i`` keeps its own value; its ``k_i`` neighbor slots are filled
    from the other n - 1 zones using row ``p`` of ``random_ids`` (indices in
    0..n-2, shifted past ``i``). Zones run in parallel.

    Args:
        centered: Mean-centered values (n,).
        neighbor_weights: Non-zero weights of each row, left-packed (n, k_max).
        neighbor_counts: Number of neighbors per zone (n,).
        random_ids: Draws without replacement from 0..n-2 (n_permutations, k_max).
        variance: Population variance of the values.

    Returns:
        Simulated LISA values (n, n_permutations); rows of isolated zones are 0.
    """
    n = centered.shape[0]
    n_permutations = random_ids.shape[0]
    out = np.zeros((n, n_permutations))
    for i in prange(n):
        k = neighbor_counts[i]
        if k == 0:
            continue
        scale = centered[i] / variance
        for p in range(n_permutations):
            acc = 0.0
            for m in range(k):
                j = random_ids[p, m]
                if j >= i:
                    j += 1
                acc += neighbor_weights[i, m] * centered[j]
            out[i, p] = scale * acc
    return out
