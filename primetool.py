#!/usr/bin/env python3
"""
primetool.py

CLI for the chunked prime finder, with subcommands:
  1) primes <limit>   -> Split [1..limit] into one block per core, find the primes
                         in each block in parallel, write one result file per
                         worker, then merge the files into the final sorted list.
       --workers N    => Override the detected core count
       --results-dir  => Where per-worker result files go (default ./results)
       --run-id       => Tag for result and log file names (default timestamp)
       --threads      => Use threads instead of processes
       --cleanup      => Delete the per-worker result files after merging
       --output FILE  => Also write the merged primes, one per line
  2) inspect-cpus     -> Show the detected core count, its source and the NUMA
                         topology (if py-libnuma is installed)

Environment:
  PRIMES_RESULTS_DIR, PRIMES_LOGS_DIR, PRIMES_WORKERS provide defaults for
  --results-dir, the log directory and --workers.
"""

import argparse
import os
import sys
import time

from chunked_primes.cpu_detection import describe_numa_topology, detect_cpu_count
from chunked_primes.log_setup import configure_logging
from chunked_primes.partitioning import DEFAULT_WORKERS
from chunked_primes.pipeline import run_pipeline

EXIT_OK = 0
EXIT_INVALID = 1

RESULTS_DIR_NAME = "results"
LOGS_DIR_NAME = "logs"


class InvalidLimitError(ValueError):
    pass


def parse_limit(text):
    """
    Strictly parse a non-negative integer: ASCII digits only, no sign, no spaces.
    """
    if not text or not (text.isascii() and text.isdigit()):
        raise InvalidLimitError(f"not a non-negative integer: {text!r}")
    return int(text)


def positive_int(text):
    try:
        value = parse_limit(text)
    except InvalidLimitError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return value


def results_dir_default():
    return os.environ.get("PRIMES_RESULTS_DIR") or os.path.join(os.getcwd(), RESULTS_DIR_NAME)


def logs_dir_default():
    return os.environ.get("PRIMES_LOGS_DIR") or os.path.join(os.getcwd(), LOGS_DIR_NAME)


def format_primes(result):
    """
    Final console output: either a "no primes" line or a header plus the list.
    """
    if not result.has_primes:
        return f"No primes <= {result.limit}."
    return f"Prime numbers <= {result.limit}:\n" + " ".join(str(p) for p in result.primes)


def build_parser():
    parser = argparse.ArgumentParser(description="Parallel chunked prime finder")
    subparsers = parser.add_subparsers(dest="command")

    sp_primes = subparsers.add_parser("primes", help="Find all primes <= LIMIT")
    sp_primes.add_argument("limit", help="Upper bound (inclusive), a non-negative integer")
    sp_primes.add_argument("--workers", type=positive_int, default=None,
                           help="Number of workers (default: detected cores)")
    sp_primes.add_argument("--results-dir", default=None, help="Directory for per-worker result files")
    sp_primes.add_argument("--run-id", default=None, help="Optional run ID (default timestamp)")
    sp_primes.add_argument("--threads", action="store_true", help="Use threads instead of processes")
    sp_primes.add_argument("--cleanup", action="store_true", help="Delete per-worker result files after merging")
    sp_primes.add_argument("--output", default=None, help="Also write merged primes to this file")
    sp_primes.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    subparsers.add_parser("inspect-cpus", help="Show detected cores and NUMA topology")
    return parser


def cmd_inspect_cpus():
    count, source = detect_cpu_count()
    print("=== Detected CPUs ===")
    print(f"Cores: {count or 'none'} (source: {source})")
    if not count:
        print(f"Falling back to {DEFAULT_WORKERS} workers.")
    topology = describe_numa_topology()
    if topology:
        print(f"System has {len(topology)} NUMA node(s).")
        for node_id, cpus in topology.items():
            print(f" - Node {node_id}, CPUs={cpus}")
    else:
        print("NUMA topology unavailable (py-libnuma or libnuma.so missing).")
    return EXIT_OK


def cmd_primes(args):
    try:
        limit = parse_limit(args.limit)
    except InvalidLimitError:
        print("Error: limit must be a non-negative integer.", file=sys.stderr)
        return EXIT_INVALID

    workers = args.workers
    if workers is None and os.environ.get("PRIMES_WORKERS"):
        try:
            workers = positive_int(os.environ["PRIMES_WORKERS"])
        except argparse.ArgumentTypeError as e:
            print(f"Error: PRIMES_WORKERS {e}.", file=sys.stderr)
            return EXIT_INVALID

    run_id = args.run_id or str(int(time.time()))
    configure_logging(logs_dir_default(), run_id, verbose=args.verbose)

    if workers is None:
        workers, source = detect_cpu_count()
        if workers:
            print(f"Detected {workers} hardware threads ({source}).", file=sys.stderr)
        else:
            print(f"No hardware threads detected ({source}); "
                  f"falling back to {DEFAULT_WORKERS} workers.", file=sys.stderr)

    result = run_pipeline(
        limit,
        worker_count=workers,
        results_dir=args.results_dir or results_dir_default(),
        run_id=run_id,
        executor="thread" if args.threads else "process",
        cleanup=args.cleanup,
        output_path=args.output,
    )
    plural = "" if result.worker_count == 1 else "s"
    print(f"Using {result.worker_count} worker{plural}.", file=sys.stderr)
    print(format_primes(result))
    return EXIT_OK


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return EXIT_OK

    if args.command == "inspect-cpus":
        return cmd_inspect_cpus()
    elif args.command == "primes":
        return cmd_primes(args)
    else:
        parser.print_help()
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
