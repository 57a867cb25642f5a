"""
Utility functions for the CDDA track splitter.

This module provides error types, error reporting and logging helpers.
"""

from cdda_splitter.utils.error_handler import (
    SplitterError,
    TrackExistsError,
    TrackIOError,
    TrackCreateError,
    TrackWriteError,
    TrackTooLargeError,
    WavHeaderError,
    SettingsError,
    describe_os_error,
    is_fatal_error,
    format_error_report,
)

from cdda_splitter.utils.logging import (
    setup_logging,
    log_system_info,
    log_operation,
    log_error,
    log_track_summary,
)

__all__ = [
    # Errors
    "SplitterError",
    "TrackExistsError",
    "TrackIOError",
    "TrackCreateError",
    "TrackWriteError",
    "TrackTooLargeError",
    "WavHeaderError",
    "SettingsError",

    # Error handling
    "describe_os_error",
    "is_fatal_error",
    "format_error_report",

    # Logging
    "setup_logging",
    "log_system_info",
    "log_operation",
    "log_error",
    "log_track_summary",
]
