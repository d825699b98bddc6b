"""Information-theoretic divergences between flow distributions."""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray


def _as_distribution(
    values: Sequence[float] | NDArray[np.float64], *, normalize: bool
) -> NDArray[np.float64]:
    dist = np.asarray(values, dtype=np.float64)
    if normalize:
        total = dist.sum()
        if total > 0:
            dist = dist / total
    return dist


def kl_divergence(p: NDArray[np.float64], q: NDArray[np.float64]) -> float:
    """Kullback-Leibler divergence D(p || q) in bits. Terms with p == 0 contribute 0."""
    mask = p > 0
    return float(np.sum(p[mask] * np.log2(p[mask] / q[mask])))


def js_divergence(
    x: Sequence[float] | NDArray[np.float64],
    y: Sequence[float] | NDArray[np.float64],
    *,
    normalize: bool = True,
) -> float:
    """Jensen-Shannon divergence in bits, bounded to [0, 1].

    Args:
        x: First distribution.
        y: Second distribution over the same support as ``x``.
        normalize: Scale both inputs to sum to one first.

    Returns:
        0 for identical distributions, 1 for distributions with disjoint support.
    """
    p = _as_distribution(x, normalize=normalize)
    q = _as_distribution(y, normalize=normalize)
    if p.shape != q.shape:
        msg = f"Distributions must have the same length, got {p.shape} and {q.shape}"
        raise ValueError(msg)
    m = 0.5 * (p + q)
    divergence = 0.5 * kl_divergence(p, m) + 0.5 * kl_divergence(q, m)
    return float(np.clip(divergence, 0.0, 1.0))
