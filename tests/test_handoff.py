import errno
import logging

import pytest

from chunked_primes import handoff as handoff_module
from chunked_primes.handoff import (
    FileHandoff,
    HandoffUnavailable,
    MemoryHandoff,
    WorkerHandoff,
    artifact_name,
    parse_primes,
    serialize_primes,
)
from chunked_primes.partitioning import Range


def test_artifact_names_are_one_based_and_distinct():
    names = [artifact_name("42", i) for i in range(4)]
    assert names[0] == "run_42_primes_thread_1.txt"
    assert names[3] == "run_42_primes_thread_4.txt"
    assert len(set(names)) == 4


def test_serialized_format():
    assert serialize_primes([2, 3, 5]) == "2 3 5\n"
    assert serialize_primes([]) == "\n"


def test_parse_rejects_non_integers():
    assert parse_primes(" 17 19\n23 ") == [17, 19, 23]
    with pytest.raises(ValueError):
        parse_primes("17 x 19")
    with pytest.raises(ValueError):
        parse_primes("-3")


def test_file_handoff_reads_what_was_written(tmp_path):
    handoff = FileHandoff(str(tmp_path / "a.txt"))
    handoff.write([17, 19, 23])
    assert (tmp_path / "a.txt").read_text() == "17 19 23\n"
    assert handoff.read() == [17, 19, 23]


def test_file_handoff_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    assert FileHandoff(str(path)).read() == []


def test_file_handoff_missing_file(tmp_path):
    with pytest.raises(HandoffUnavailable):
        FileHandoff(str(tmp_path / "nope.txt")).read()


def test_file_handoff_remove_is_idempotent(tmp_path):
    handoff = FileHandoff(str(tmp_path / "a.txt"))
    handoff.write([2])
    handoff.remove()
    handoff.remove()
    assert not (tmp_path / "a.txt").exists()


def test_worker_handoff_prefers_file(tmp_path):
    durable = FileHandoff(str(tmp_path / "a.txt"))
    durable.write([2, 3, 5])
    handoff = WorkerHandoff(0, durable, MemoryHandoff([7]))
    assert handoff.collect() == ([2, 3, 5], "file")


def test_worker_handoff_falls_back_when_missing(tmp_path, caplog):
    handoff = WorkerHandoff(1, FileHandoff(str(tmp_path / "gone.txt")), MemoryHandoff([17, 19, 23]))
    with caplog.at_level(logging.WARNING):
        assert handoff.collect() == ([17, 19, 23], "memory")
    assert "Worker 2" in caplog.text


def test_worker_handoff_falls_back_when_corrupted(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("17 19 garbage")
    handoff = WorkerHandoff(0, FileHandoff(str(path)), MemoryHandoff([17, 19, 23]))
    assert handoff.collect() == ([17, 19, 23], "memory")


def test_worker_handoff_rejects_values_outside_range(tmp_path):
    path = tmp_path / "other.txt"
    path.write_text("2 3 5 7\n")
    handoff = WorkerHandoff(1, FileHandoff(str(path)), MemoryHandoff([17, 19, 23]), rng=Range(14, 26))
    assert handoff.collect() == ([17, 19, 23], "memory")


def test_failed_write_leaves_no_partial_artifact(tmp_path, monkeypatch):
    path = tmp_path / "a.txt"
    handoff = FileHandoff(str(path))

    def refuse(src, dst):
        raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(handoff_module.os, "replace", refuse)
    with pytest.raises(OSError):
        handoff.write([2, 3, 5])
    assert list(tmp_path.iterdir()) == []


def test_undecodable_file_is_unavailable(tmp_path):
    path = tmp_path / "bin.txt"
    path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(HandoffUnavailable):
        FileHandoff(str(path)).read()


def test_unpersisted_worker_uses_memory_only(tmp_path):
    handoff = WorkerHandoff(2, None, MemoryHandoff([29, 31, 37]), rng=Range(27, 39))
    assert handoff.collect() == ([29, 31, 37], "memory")
