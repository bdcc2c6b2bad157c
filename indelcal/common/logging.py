"""Sets up logging"""

__all__ = ['setup_logging', 'LOG_DETAIL']

import sys
import logging

from pathlib import Path
from typing import Any

LOG_DETAIL = {
    "LOW": "%(levelname)s:%(name)s:%(message)s",
    "MEDIUM": "%(asctime)s:%(levelname)s:%(name)s:%(message)s",
    "HIGH": "%(asctime)s:%(levelname)s:%(name)s:line %(lineno)s:%(message)s",
}


def setup_logging(
        omit_log: bool,
        directory: str,
        filename: str,
        severity: str,
        verbosity: str,
        silent_mode: bool = False) -> Path | None:
    """
    Configure logging for a run of indelcal

    :param omit_log: Whether to skip writing a log file
    :param directory: Directory to store the log. Default is the current working directory.
    :param filename: Name to give the log. If this is an absolute path, directory is ignored.
    :param severity: Severity of events that will be tracked. Defaults to "INFO."
    :param verbosity: Changes the amount of information in the log output.
    :param silent_mode: Default is to echo the log to stdout in addition to writing the file.
                        Setting this flag will cause it to not print to stdout.
    :return: The path of the log file, or None if no file is written.
    """

    kwargs: dict[str, Any] = {
        "force": True,
        "format": LOG_DETAIL.get(verbosity.upper(), LOG_DETAIL['MEDIUM'])
    }

    log_file = Path(directory) / filename

    kwargs['handlers'] = []

    if not silent_mode:
        kwargs['handlers'].append(logging.StreamHandler(sys.stdout))

    if not omit_log:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        kwargs['handlers'].append(logging.FileHandler(log_file))

    # without any handler, warnings would still reach stderr through logging.lastResort
    if not kwargs['handlers']:
        kwargs['handlers'].append(logging.NullHandler())

    level = getattr(logging, severity.upper(), logging.INFO)
    kwargs['level'] = level

    logging.basicConfig(**kwargs)

    return None if omit_log else log_file
