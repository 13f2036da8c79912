"""
log_setup.py

Logging for a primes run: a per-run log file under the logs directory,
plus warnings (or everything, with verbose) on stderr.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


def configure_logging(log_dir, run_id, verbose=False):
    """
    Attach handlers to the 'chunked_primes' logger and return the log file path,
    or None if the log file could not be opened (stderr logging still works).
    Safe to call more than once; earlier handlers are replaced.
    """
    logger = logging.getLogger("chunked_primes")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.INFO)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.INFO if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console)

    log_file = os.path.join(log_dir, f"run_{run_id}.log")
    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as e:
        logger.warning("Could not open log file %s: %s", log_file, e)
        return None
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)

    return log_file
