"""
Logging setup for command-line runs.

Library modules only create module-level loggers; the entry point calls
``setup_logging`` once so every job writes to the same run log.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """Configure the root logger to write to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    # urllib3 connection chatter drowns out the run log at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
