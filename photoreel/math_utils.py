"""Pure math utilities - no external dependencies."""

from __future__ import annotations
from typing import List


def wrap_index(idx: int, count: int) -> int:
    """Wrap any integer into [0, count). Returns 0 when count is 0."""
    if count <= 0:
        return 0
    return ((idx % count) + count) % count


def neighbor_indices(idx: int, count: int) -> List[int]:
    """Wrapped previous/next indices, without duplicates or idx itself."""
    result: List[int] = []
    for delta in (-1, 1):
        j = wrap_index(idx + delta, count)
        if j != idx and j not in result:
            result.append(j)
    return result
