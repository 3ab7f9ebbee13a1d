from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float] | None, b: Sequence[float] | None) -> float | None:
    """Calculate cosine similarity between two vectors.

    Returns None instead of a NaN when the vectors cannot be compared
    (missing, empty, different lengths, zero magnitude or non-finite values);
    callers treat that as "no similarity" and drop the candidate.

    Args:
        a (Sequence[float] | None): First vector.
        b (Sequence[float] | None): Second vector.

    Returns:
        float | None: Similarity in [-1, 1], or None.
    """
    if a is None or b is None:
        return None
    try:
        va = np.asarray(a, dtype=float)
        vb = np.asarray(b, dtype=float)
    except (TypeError, ValueError):
        return None
    if va.ndim != 1 or va.shape != vb.shape or va.size == 0:
        return None
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0 or not np.isfinite(denom):
        return None
    score = float(np.dot(va, vb) / denom)
    if not np.isfinite(score):
        return None
    return float(np.clip(score, -1.0, 1.0))
