"""
handoff.py

How a worker's partial result reaches the merge stage.

Every worker has a durable backend (a text file of space-separated integers)
and an in-memory fallback (the list it returned to the driver). The merge
stage asks a WorkerHandoff for its values; the file is tried first and the
in-memory copy is used only when the file cannot be read back.
"""

import logging
import os

logger = logging.getLogger(__name__)

SOURCE_FILE = "file"
SOURCE_MEMORY = "memory"


class HandoffUnavailable(Exception):
    """
    Raised by a handoff backend whose data cannot be read back.
    """


def artifact_name(run_id, worker_id):
    """
    File name for a worker's artifact. worker_id is 0-based, the name is 1-based.
    """
    return f"run_{run_id}_primes_thread_{worker_id + 1}.txt"


def serialize_primes(primes):
    return " ".join(str(p) for p in primes) + "\n"


def parse_primes(text):
    """
    Parse whitespace-separated integers. Raises ValueError on anything else.
    """
    values = []
    for token in text.split():
        if not token.isdigit():
            raise ValueError(f"unexpected token {token!r}")
        values.append(int(token))
    return values


class FileHandoff:
    """
    Durable backend: one text file per worker.
    """
    source = SOURCE_FILE

    def __init__(self, path):
        self.path = path

    def write(self, primes):
        """
        Write via a temp file in the same directory and rename it into place,
        so a failed write never leaves a truncated artifact behind.
        """
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="ascii") as f:
                f.write(serialize_primes(primes))
            os.replace(tmp_path, self.path)
        except OSError:
            try:
                os.remove(tmp_path)
            except OSError:
                pass
            raise

    def read(self):
        try:
            with open(self.path, "r", encoding="ascii") as f:
                text = f.read()
        except OSError as e:
            raise HandoffUnavailable(f"cannot read {self.path}: {e}") from e
        except UnicodeDecodeError as e:
            raise HandoffUnavailable(f"undecodable artifact {self.path}: {e}") from e
        try:
            return parse_primes(text)
        except ValueError as e:
            raise HandoffUnavailable(f"malformed artifact {self.path}: {e}") from e

    def remove(self):
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass


class MemoryHandoff:
    """
    Fallback backend: the partial result the worker handed back directly.
    """
    source = SOURCE_MEMORY

    def __init__(self, primes):
        self.primes = list(primes)

    def read(self):
        return list(self.primes)

class WorkerHandoff:
    """
    Pairs a worker's durable backend with its fallback.

    durable is None when the worker reported a failed write; the fallback is
    then the only source for that worker. If rng is given, durable values
    outside it count as corruption, so a damaged file cannot leak numbers
    from another worker's block.
    """

    def __init__(self, worker_id, durable, fallback, rng=None):
        self.worker_id = worker_id
        self.durable = durable
        self.fallback = fallback
        self.rng = rng

    def _read_durable(self):
        if self.durable is None:
            raise HandoffUnavailable("artifact was not persisted")
        values = self.durable.read()
        if self.rng is not None:
            for v in values:
                if not self.rng.contains(v):
                    raise HandoffUnavailable(
                        f"value {v} outside [{self.rng.start}..{self.rng.end}]")
        return values

    def collect(self):
        """
        Return (values, source) where source is "file" or "memory".
        """
        try:
            return self._read_durable(), self.durable.source
        except HandoffUnavailable as e:
            logger.warning("Worker %d: %s; using in-memory result instead.",
                           self.worker_id + 1, e)
            return self.fallback.read(), self.fallback.source
