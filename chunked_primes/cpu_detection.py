"""
cpu_detection.py

Work out how many worker processes this host can run in parallel.

Sources, in order:
  1) a Slurm allocation (SLURM_CPUS_PER_TASK, then SLURM_CPUS_ON_NODE)
  2) NUMA topology through py-libnuma, if both it and libnuma.so are present
  3) os.cpu_count()

The result is only ever an input to the partitioner; a zero answer is left
for resolve_worker_count() to replace with its default.
"""

import os

try:
    from numa import info
    has_pynuma = True
except (ImportError, OSError):
    # OSError: the bindings load libnuma.so at import time
    has_pynuma = False

SLURM_CPU_VARS = ("SLURM_CPUS_PER_TASK", "SLURM_CPUS_ON_NODE")

# where libnuma.so is looked for before py-libnuma is queried
LIBNUMA_PATHS = (
    "/usr/lib/libnuma.so",
    "/usr/lib64/libnuma.so",
    "/lib/x86_64-linux-gnu/libnuma.so",
    "/lib64/libnuma.so",
)


def slurm_cpu_count(environ=None):
    environ = os.environ if environ is None else environ
    for var in SLURM_CPU_VARS:
        raw = environ.get(var, "").strip()
        if raw.isdigit() and int(raw) > 0:
            return int(raw), var
    return 0, None


def describe_numa_topology():
    """
    Return {node_id: [cpu, ...]} or {} when NUMA info is unavailable.
    """
    if not has_pynuma or not any(os.path.exists(p) for p in LIBNUMA_PATHS):
        return {}
    node_count = info.get_max_node() + 1
    return {nid: list(info.node_to_cpus(nid)) for nid in range(node_count)}


def numa_cpu_count():
    return sum(len(cpus) for cpus in describe_numa_topology().values())


def detect_cpu_count(environ=None):
    """
    Return (count, source). count is 0 if nothing could be detected.
    """
    count, var = slurm_cpu_count(environ)
    if count:
        return count, f"slurm:{var}"

    count = numa_cpu_count()
    if count > 0:
        return count, "numa"

    return os.cpu_count() or 0, "os.cpu_count"
