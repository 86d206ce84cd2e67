"""Small numeric helpers shared by the analysis stages."""

import numpy as np

# Floor for denominators that may collapse to zero
EPSILON = 1e-9


def lower_percentile(values: np.ndarray, percentile: float) -> float:
    """
    Percentile taken as the sorted value at floor(p/100 * (n - 1)).

    Non-finite values are ignored; an empty input gives 0.
    """
    values = np.asarray(values, dtype=np.float64)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return 0.0
    return float(np.percentile(values, percentile, method="lower"))


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Cosine similarity between rows of ``a`` [n, d] and rows of ``b`` [m, d].

    A zero vector has similarity 0 with everything.

    Returns:
        Similarity matrix [n, m]
    """
    a = np.atleast_2d(np.asarray(a, dtype=np.float64))
    b = np.atleast_2d(np.asarray(b, dtype=np.float64))
    norm_a = np.linalg.norm(a, axis=1)
    norm_b = np.linalg.norm(b, axis=1)
    norm_a[norm_a == 0] = 1.0
    norm_b[norm_b == 0] = 1.0
    return (a @ b.T) / np.outer(norm_a, norm_b)
