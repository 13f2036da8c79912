"""
partitioning.py

Split [1..limit] into one contiguous block per worker.

Blocks use a ceiling block size, so trailing workers may receive an empty
range when the limit is small. They still run; they just find nothing.
"""

from typing import List, NamedTuple, Optional

DEFAULT_WORKERS = 2


class Range(NamedTuple):
    """
    Inclusive bounds [start..end]. start > end denotes an empty range.
    """
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def contains(self, value: int) -> bool:
        return self.start <= value <= self.end


def ceil_div(a: int, b: int) -> int:
    return (a + b - 1) // b


def resolve_worker_count(limit: int, requested: Optional[int]) -> int:
    """
    Turn a requested (or detected) worker count into the count actually used.

      - None or 0 (nothing detected) becomes DEFAULT_WORKERS
      - never more workers than numbers to check: capped at max(1, limit)
      - limit < 2 always runs a single worker
    """
    if not requested or requested < 1:
        requested = DEFAULT_WORKERS
    count = min(requested, max(1, limit))
    if limit < 2:
        count = 1
    return max(1, count)


def partition(limit: int, worker_count: Optional[int]) -> List[Range]:
    """
    Return exactly resolve_worker_count(limit, worker_count) ranges covering
    [1..limit] with no gaps and no overlaps.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    count = resolve_worker_count(limit, worker_count)
    block = ceil_div(limit, count)

    ranges = []
    for i in range(count):
        start = i * block + 1
        end = min(limit, (i + 1) * block)
        ranges.append(Range(start, end))
    return ranges
