"""
Command-line entry point for the CDDA track splitter.

Reads a raw CDDA image with subchannel data from standard input (or a
file) and writes track_XX.wav files into the current directory (or the
directory given with --output-dir):

    cdda-split < disc.mdf
"""

import argparse
import logging
import sys
from typing import List, Optional

from cdda_splitter import __version__
from cdda_splitter.core.demuxer import TrackDemuxer
from cdda_splitter.core.settings import load_settings
from cdda_splitter.core.track_sink import TrackSinkFactory, existing_track_files
from cdda_splitter.utils import (
    SettingsError,
    SplitterError,
    TrackIOError,
    describe_os_error,
    format_error_report,
    is_fatal_error,
    log_error,
    log_operation,
    setup_logging,
)

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cdda-split",
        description=(
            "Split a raw CDDA image with subchannel data into track_XX.wav "
            "files, using the subchannel P flag to find track starts."
        ),
    )
    parser.add_argument(
        "-i", "--input", metavar="PATH",
        help="Raw image to read (default: standard input)",
    )
    parser.add_argument(
        "-o", "--output-dir", metavar="DIR",
        help="Existing directory for track files (default: current directory)",
    )
    parser.add_argument(
        "--log-file", metavar="PATH",
        help="Also write a DEBUG log to this file",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true",
        help="Show debug output",
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true",
        help="Only show warnings and errors",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser


def _console_level(args: argparse.Namespace) -> int:
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.WARNING
    return logging.INFO


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the splitter.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Process exit status: 0 on success, 1 on failure, 130 if interrupted
    """
    args = build_parser().parse_args(argv)
    setup_logging(_console_level(args), args.log_file)

    try:
        settings = load_settings({"output_dir": args.output_dir})
    except SettingsError as e:
        logger.error(format_error_report(e))
        return EXIT_FAILURE

    if not settings.output_dir.is_dir():
        log_error("output", str(settings.output_dir), "not a directory")
        return EXIT_FAILURE

    factory = TrackSinkFactory.from_settings(settings)
    existing = existing_track_files(factory)
    if existing:
        logger.warning(
            f"{len(existing)} track file(s) already present in {settings.output_dir}; "
            f"the run stops at the first name collision"
        )

    demuxer = TrackDemuxer.from_settings(settings)
    source = args.input or "<stdin>"
    log_operation("split", f"reading {source}", logging.DEBUG)

    try:
        if args.input:
            try:
                stream = open(args.input, 'rb')
            except OSError as e:
                log_error("open", args.input, e.strerror or str(e))
                return EXIT_FAILURE
            with stream:
                result = demuxer.run(stream, factory)
        else:
            result = demuxer.run(sys.stdin.buffer, factory)
    except TrackIOError as e:
        log_error(e.operation, e.filepath, describe_os_error(e.cause, e.operation))
        if not is_fatal_error(e.cause.errno):
            logger.info(
                "This error may be transient; remove the track files written so far "
                "and run again"
            )
        return EXIT_FAILURE
    except SplitterError as e:
        log_error("split", e.filepath or source, e.message)
        return EXIT_FAILURE
    except OSError as e:
        log_error("read", source, describe_os_error(e, "read"))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED

    if result.track_count == 0:
        logger.warning(f"No track start found in {result.sectors_read} sectors")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
