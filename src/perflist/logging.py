"""Logging for perflist runs.

The report itself goes to stdout through ``click.echo``; logging carries
everything around it on stderr: which benchmark files ran, where the
ledger was read from and written to, the detected version, and per
scenario timings (DEBUG).  ``-v`` shows all of that, ``-q`` keeps only
warnings such as skipped ledger keys, and ``--log-file`` keeps a full
DEBUG trace of the run regardless of console verbosity.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "perflist"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the ``perflist`` logger for one CLI invocation.

    Calling it again replaces the handlers of the previous call, so
    repeated invocations in one process (as under ``CliRunner``) do not
    stack console output.

    Args:
        verbose: Show DEBUG output, including per-scenario timings.
        quiet: Show only warnings and errors. Ignored if *verbose* is set.
        log_file: Also record the whole run at DEBUG level in this file.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for one perflist module, e.g. ``get_logger("ledger")``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
