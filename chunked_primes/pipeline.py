"""
pipeline.py

Partition -> compute -> merge, end to end.

  1) resolve the worker count and split [1..limit] into blocks
  2) run one worker per block concurrently; each writes its own artifact
  3) wait for every worker (the only synchronisation point)
  4) merge the artifacts, falling back to in-memory results per worker
"""

import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed

from chunked_primes.handoff import FileHandoff, MemoryHandoff, WorkerHandoff, artifact_name
from chunked_primes.merge import merge_handoffs
from chunked_primes.partitioning import partition, resolve_worker_count
from chunked_primes.worker import run_worker

logger = logging.getLogger(__name__)

EXECUTORS = {
    "process": ProcessPoolExecutor,
    "thread": ThreadPoolExecutor,
}


class PipelineResult:
    """
    Everything a caller may want to know about one run.
    """
    def __init__(self, limit, run_id, ranges, reports, merge, elapsed):
        self.limit = limit
        self.run_id = run_id
        self.ranges = ranges
        self.reports = reports
        self.primes = merge.primes
        self.sources = merge.sources
        self.duplicates = merge.duplicates
        self.elapsed = elapsed

    @property
    def worker_count(self):
        return len(self.ranges)

    @property
    def has_primes(self):
        return self.limit >= 2 and bool(self.primes)


def artifact_paths(results_dir, run_id, worker_count):
    """
    One artifact path per worker id, fixed before any worker starts.
    """
    return [os.path.join(results_dir, artifact_name(run_id, i)) for i in range(worker_count)]


def run_workers(ranges, paths, executor="process"):
    """
    Run one worker per range concurrently and return their reports ordered by
    worker id. Returns only once every worker has finished.
    """
    executor_cls = EXECUTORS[executor]
    reports = [None] * len(ranges)
    with executor_cls(max_workers=len(ranges)) as pool:
        futures = [pool.submit(run_worker, i, rng, paths[i]) for i, rng in enumerate(ranges)]
        for fut in as_completed(futures):
            report = fut.result()  # Propagate exceptions if any
            reports[report.worker_id] = report
            logger.info("Worker %d finished [%d..%d]: %d prime(s) in %.2fs.",
                        report.worker_id + 1, report.rng.start, report.rng.end,
                        len(report.primes), report.elapsed)
    return reports


def build_handoffs(reports):
    """
    A worker whose write failed gets no durable backend: whatever it left on
    disk is not trusted over its in-memory primes.
    """
    return [
        WorkerHandoff(r.worker_id,
                      FileHandoff(r.artifact_path) if r.persisted else None,
                      MemoryHandoff(r.primes), rng=r.rng)
        for r in reports
    ]


def write_master_list(primes, output_path):
    with open(output_path, "w") as mf:
        for prime in primes:
            mf.write(f"{prime}\n")


def run_pipeline(limit, worker_count=None, results_dir="results", run_id=None,
                 executor="process", cleanup=False, output_path=None):
    """
    Compute all primes in [1..limit].

    Arguments:
      limit (int): validated, non-negative upper bound
      worker_count (int|None): requested/detected parallelism; None or 0 means default
      results_dir (str): where the per-worker artifacts are written
      run_id (str|None): tags artifact names, defaults to a timestamp
      executor (str): "process" (true parallelism) or "thread"
      cleanup (bool): delete the artifacts after merging
      output_path (str|None): also write the final primes, one per line

    Returns:
      PipelineResult
    """
    t0 = time.time()
    run_id = run_id or str(int(time.time()))

    count = resolve_worker_count(limit, worker_count)
    ranges = partition(limit, count)
    logger.info("run_id=%s, limit=%d, workers=%d, subranges=%s",
                run_id, limit, count, [(r.start, r.end) for r in ranges])
    idle = [i + 1 for i, r in enumerate(ranges) if r.is_empty]
    if idle:
        logger.info("Worker(s) %s have an empty range.", idle)

    try:
        os.makedirs(results_dir, exist_ok=True)
    except OSError as e:
        # workers will fail to write and fall back to memory
        logger.warning("Could not create results directory %s: %s", results_dir, e)

    paths = artifact_paths(results_dir, run_id, count)
    if count == 1:
        logger.info("Creating 1 temp file: %s", paths[0])
    else:
        logger.info("Creating %d temp files: %s ... %s", count, paths[0], paths[-1])

    reports = run_workers(ranges, paths, executor=executor)

    logger.info("Merging results...")
    handoffs = build_handoffs(reports)
    merge = merge_handoffs(handoffs)
    if merge.fallback_workers:
        logger.warning("Used in-memory results for worker(s) %s.",
                       ", ".join(str(wid + 1) for wid in merge.fallback_workers))

    if cleanup:
        for r in reports:
            FileHandoff(r.artifact_path).remove()
        logger.info("Removed %d artifact(s) from %s.", len(reports), results_dir)

    if output_path:
        write_master_list(merge.primes, output_path)
        logger.info("Master prime list written to %s", output_path)

    elapsed = time.time() - t0
    logger.info("Found %d prime(s) <= %d in %.2fs.", len(merge.primes), limit, elapsed)
    return PipelineResult(limit, run_id, ranges, reports, merge, elapsed)
