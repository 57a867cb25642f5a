"""
Error types and error reporting helpers for the CDDA track splitter.

Every failure that aborts a run is raised as a SplitterError subclass
carrying the output path involved, and OSError causes are translated into
actionable messages for the console.
"""

import errno
from typing import Optional


# =============================================================================
# Custom Exceptions
# =============================================================================

class SplitterError(Exception):
    """Base exception for track splitting errors."""

    def __init__(self, message: str, filepath: Optional[str] = None):
        self.message = message
        self.filepath = filepath
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.filepath:
            return f"{self.message} [File: {self.filepath}]"
        return self.message


class TrackExistsError(SplitterError):
    """Raised when a track file already exists and would be overwritten."""

    def __init__(self, filepath: str):
        super().__init__("file already exists, won't overwrite", filepath)


class TrackIOError(SplitterError):
    """Raised when an operation on a track file fails at the OS level."""

    operation = "track I/O"

    def __init__(self, filepath: str, cause: OSError):
        self.cause = cause
        super().__init__(describe_os_error(cause, self.operation), filepath)


class TrackCreateError(TrackIOError):
    """Raised when a track file cannot be created."""

    operation = "create"


class TrackWriteError(TrackIOError):
    """Raised when writing, patching or closing a track file fails."""

    operation = "write"


class TrackTooLargeError(SplitterError):
    """Raised when a track outgrows the 32-bit size fields of its header."""

    def __init__(self, filepath: str, limit: int):
        self.limit = limit
        super().__init__(f"track exceeds the WAVE size limit of {limit} payload bytes", filepath)


class WavHeaderError(SplitterError):
    """Raised when a WAVE header is short or malformed."""
    pass


class SettingsError(SplitterError):
    """Raised when splitter settings fail validation."""
    pass


# =============================================================================
# Error Classification
# =============================================================================

_ERROR_MESSAGES = {
    errno.EEXIST: "File already exists",
    errno.EACCES: (
        "Permission denied. Check:\n"
        "1. Output directory is writable?\n"
        "2. Existing file permissions?"
    ),
    errno.EPERM: "Operation not permitted",
    errno.ENOENT: "Output directory does not exist",
    errno.ENOTDIR: "Output path is not a directory",
    errno.EISDIR: "Output path is a directory",
    errno.ENOSPC: "No space left on device",
    errno.EDQUOT: "Disk quota exceeded",
    errno.EROFS: "Output file system is read-only",
    errno.EMFILE: "Too many open files",
    errno.EIO: "I/O error on output device",
}

_FATAL_ERRORS = {
    errno.EEXIST,
    errno.EACCES,
    errno.EPERM,
    errno.ENOENT,
    errno.ENOTDIR,
    errno.EISDIR,
    errno.ENOSPC,
    errno.EDQUOT,
    errno.EROFS,
}


def describe_os_error(error: OSError, operation: str = "operation") -> str:
    """
    Build a context-aware message for an OSError.

    Args:
        error: The OSError raised by the failing call
        operation: Description of the operation that failed

    Returns:
        Formatted message naming the operation and the cause

    Example:
        >>> describe_os_error(PermissionError(errno.EACCES, "Permission denied"), "create")
        'create failed: Permission denied. Check:...'
    """
    code = error.errno
    if code in _ERROR_MESSAGES:
        message = _ERROR_MESSAGES[code]
    elif code is not None:
        code_name = errno.errorcode.get(code, 'UNKNOWN')
        message = f"{error.strerror or code_name} ({code_name})"
    else:
        message = str(error) or type(error).__name__
    return f"{operation} failed: {message}"


def is_fatal_error(error_code: Optional[int]) -> bool:
    """
    Determine if an errno value means retrying cannot help.

    Args:
        error_code: errno value (may be None for synthetic OSErrors)

    Returns:
        True for conditions that need user action (permissions, space,
        existing files), False otherwise
    """
    return error_code in _FATAL_ERRORS


def format_error_report(error: BaseException) -> str:
    """
    Render an error for the console.

    SplitterError instances already carry the operation, path and cause;
    anything else is reported with its type name.
    """
    if isinstance(error, SplitterError):
        return str(error)
    return f"{type(error).__name__}: {error}"
