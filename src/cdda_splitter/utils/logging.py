"""
Logging configuration for the CDDA track splitter.

Console output goes to standard error through rich so standard output
stays free; an optional log file records the full DEBUG stream.
"""

import logging
import platform
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.highlighter import NullHighlighter
from rich.logging import RichHandler

FILE_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
FILE_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  console: Optional[Console] = None) -> None:
    """
    Configure logging for a command-line run.

    Installs a rich console handler on standard error at the requested
    level and, when log_file is given, a DEBUG file handler alongside it.
    Calling this again replaces the handlers installed by a previous call.

    Args:
        level: Console logging level (default: logging.INFO)
        log_file: Optional path of a log file
        console: Optional rich Console (default: one writing to stderr)

    Example:
        >>> setup_logging(logging.DEBUG, log_file="split.log")
        >>> logging.info("Splitting disc.mdf")
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, '_cdda_splitter', False):
            root.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        level=level,
        show_time=False,
        show_path=False,
        markup=False,
        highlighter=NullHighlighter(),
    )
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    console_handler._cdda_splitter = True
    root.addHandler(console_handler)

    root_level = level
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        file_handler._cdda_splitter = True
        root.addHandler(file_handler)
        root_level = logging.DEBUG

    root.setLevel(root_level)
    log_system_info()


def log_system_info() -> None:
    """Log interpreter and platform details at DEBUG level."""
    logging.debug(f"Platform: {platform.system()} {platform.release()} ({platform.machine()})")
    logging.debug(f"Python version: {sys.version.split()[0]}")


def log_operation(operation: str, details: str, level: int = logging.INFO) -> None:
    """
    Log an operation with details.

    Example:
        >>> log_operation("open_track", "track_03.wav at sector 41250")
    """
    logging.log(level, f"{operation}: {details}")


def log_error(operation: str, filepath: str, cause: str) -> None:
    """Log a failed operation with the file involved and its cause."""
    logging.error(f"{operation}: \"{filepath}\": {cause}")


def log_track_summary(summary) -> None:
    """
    Log the diagnostic line for a finalized track.

    Args:
        summary: TrackSummary of the track

    Example:
        >>> log_track_summary(summary)
        track_01.wav: duration_s:215 start_offset:0 end_offset:16163
    """
    logging.info(
        f"{summary.path.name}: duration_s:{summary.duration_s} "
        f"start_offset:{summary.start_offset} end_offset:{summary.end_offset}"
    )
