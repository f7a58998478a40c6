"""Logging configuration for LotLedger.

Provides dual-output logging: console (INFO+) and file (DEBUG+). Engine
modules only obtain module loggers; handlers are installed here, by the
command line entry point or by the embedding application.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path


def _setup_logging_base(log_path: Path, console_level: int) -> None:
    """Configure dual-output logging with a given console level.

    Sets up a StreamHandler on stdout at ``console_level`` and a
    FileHandler at DEBUG level. Clears existing handlers first to
    prevent duplicate entries on repeated calls.

    Args:
        log_path: Path to the log file (e.g., ledger_log.txt).
        console_level: Minimum level for console output (logging.INFO
            for normal mode, logging.DEBUG for diagnostic mode).
    """
    logging.root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

    logging.root.setLevel(logging.DEBUG)
    logging.root.addHandler(console_handler)

    try:
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logging.root.addHandler(file_handler)
    except OSError as e:
        # Console logging still works without the file
        logging.warning("Failed to create log file at %s: %s", log_path, e)


def setup_logging(log_path: Path) -> None:
    """Configure console (INFO) and file (DEBUG) logging.

    Args:
        log_path: Path to the log file.
    """
    _setup_logging_base(log_path, logging.INFO)


def setup_diagnostic_logging(log_path: Path) -> None:
    """Configure console (DEBUG) and file (DEBUG) logging.

    Same as setup_logging() but echoes computed totals and per-issue
    detail to the console.

    Args:
        log_path: Path to the log file.
    """
    _setup_logging_base(log_path, logging.DEBUG)
