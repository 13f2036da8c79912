"""
merge.py

Merge-reduce stage: absorb every worker's partial result, sort, dedup.
Only call this after every worker has finished.
"""

import logging

from chunked_primes.handoff import SOURCE_FILE

logger = logging.getLogger(__name__)


class MergeResult:
    """
    Final ordered primes plus where each worker's values came from.

    Attributes:
      - primes (list[int]): sorted, duplicate-free
      - sources (dict[int, str]): worker_id -> "file" | "memory"
      - duplicates (int): how many values dedup removed
    """
    def __init__(self, primes, sources=None, duplicates=0):
        self.primes = primes
        self.sources = sources or {}
        self.duplicates = duplicates

    @property
    def fallback_workers(self):
        return sorted(wid for wid, src in self.sources.items() if src != SOURCE_FILE)


def merge_sequences(partials):
    """
    Concatenate, sort ascending and drop adjacent duplicates.
    Returns (merged, duplicates_removed).
    """
    accumulator = []
    for part in partials:
        accumulator.extend(part)
    accumulator.sort()

    merged = []
    for value in accumulator:
        if not merged or merged[-1] != value:
            merged.append(value)
    return merged, len(accumulator) - len(merged)


def merge_handoffs(handoffs):
    """
    Collect each WorkerHandoff in increasing worker order and merge the values.
    """
    partials = []
    sources = {}
    for handoff in sorted(handoffs, key=lambda h: h.worker_id):
        values, source = handoff.collect()
        logger.info("Worker %d: merged %d prime(s) from %s.",
                    handoff.worker_id + 1, len(values), source)
        partials.append(values)
        sources[handoff.worker_id] = source

    merged, duplicates = merge_sequences(partials)
    if duplicates:
        # disjoint blocks should make this impossible
        logger.warning("Merge dropped %d duplicate value(s); worker ranges overlap.",
                       duplicates)
    return MergeResult(merged, sources=sources, duplicates=duplicates)
