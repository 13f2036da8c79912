"""
worker.py

One worker: scan its block, write the artifact, hand the primes back.

run_worker is the function submitted to the executor, so it and WorkerReport
live at module level to stay picklable for ProcessPoolExecutor.
"""

import logging
import time

from chunked_primes.find_primes import primes_in_range
from chunked_primes.handoff import FileHandoff

logger = logging.getLogger(__name__)


class WorkerReport:
    """
    What a worker returns to the driver.

    Attributes:
      - worker_id (int): 0-based worker index
      - rng (Range): the block this worker scanned
      - primes (list[int]): ascending primes found, the in-memory fallback
      - artifact_path (str): where the primes were (supposed to be) written
      - persisted (bool): True if the artifact was written
      - error (str|None): why the artifact could not be written
      - elapsed (float): seconds spent scanning and writing
    """
    def __init__(self, worker_id, rng, primes, artifact_path,
                 persisted=True, error=None, elapsed=0.0):
        self.worker_id = worker_id
        self.rng = rng
        self.primes = primes
        self.artifact_path = artifact_path
        self.persisted = persisted
        self.error = error
        self.elapsed = elapsed

    def __repr__(self):
        return (f"WorkerReport(worker_id={self.worker_id}, rng={self.rng}, "
                f"found={len(self.primes)}, persisted={self.persisted})")


def run_worker(worker_id, rng, artifact_path):
    """
    Compute the primes in rng and persist them to artifact_path.

    A failed write is not fatal: it is logged as a warning and the report
    still carries the primes, which the merge stage falls back to.
    """
    t0 = time.time()
    primes = primes_in_range(rng.start, rng.end)

    persisted = True
    error = None
    try:
        FileHandoff(artifact_path).write(primes)
    except OSError as e:
        persisted = False
        error = str(e)
        logger.warning("Worker %d: could not write %s: %s",
                       worker_id + 1, artifact_path, e)

    elapsed = time.time() - t0
    return WorkerReport(worker_id, rng, primes, artifact_path,
                        persisted=persisted, error=error, elapsed=elapsed)
