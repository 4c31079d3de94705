import math
from typing import AbstractSet


def cosine_similarity(a: AbstractSet, b: AbstractSet) -> float:
    """Cosine similarity of two liker sets seen as binary vectors over listener ids.

    |a & b| / (sqrt|a| * sqrt|b|), 0.0 when either set is empty. The overlap is
    an exact integer count; the only float operation is the final division.
    """
    if not a or not b:
        return 0.0
    small, large = (a, b) if len(a) <= len(b) else (b, a)
    overlap = sum(1 for member in small if member in large)
    if overlap == 0:
        return 0.0
    if overlap == len(a) == len(b):
        return 1.0
    return min(1.0, overlap / math.sqrt(len(a) * len(b)))
