"""
Unit tests for logging helpers.
"""

import io
import logging
from pathlib import Path

from rich.console import Console

from cdda_splitter.core import TrackSummary
from cdda_splitter.utils import log_error, log_operation, log_track_summary, setup_logging


def make_summary(**overrides):
    values = dict(
        track_number=3,
        path=Path("out") / "track_03.wav",
        num_samples=588 * 150,
        payload_bytes=2352 * 150,
        duration_s=2,
        start_offset=1000,
        end_offset=1150,
    )
    values.update(overrides)
    return TrackSummary(**values)


def our_handlers():
    return [h for h in logging.getLogger().handlers if getattr(h, '_cdda_splitter', False)]


class TestHelpers:
    """Test message formats of the logging helpers."""

    def test_track_summary_line(self, caplog):
        caplog.set_level(logging.INFO)

        log_track_summary(make_summary())

        assert caplog.messages == [
            "track_03.wav: duration_s:2 start_offset:1000 end_offset:1150"
        ]

    def test_log_error(self, caplog):
        log_error("create", "track_01.wav", "Permission denied")

        assert caplog.records[-1].levelno == logging.ERROR
        assert caplog.messages[-1] == 'create: "track_01.wav": Permission denied'

    def test_log_operation(self, caplog):
        caplog.set_level(logging.DEBUG)

        log_operation("split", "reading <stdin>", logging.DEBUG)

        assert caplog.messages[-1] == "split: reading <stdin>"


class TestSetupLogging:
    """Test setup_logging()."""

    def test_console_output(self):
        buffer = io.StringIO()
        setup_logging(logging.INFO, console=Console(file=buffer, width=120))

        logging.getLogger("cdda_splitter.test").info("hello splitter")
        logging.getLogger("cdda_splitter.test").debug("hidden detail")

        assert "hello splitter" in buffer.getvalue()
        assert "hidden detail" not in buffer.getvalue()

    def test_repeat_calls_replace_handlers(self, tmp_path):
        setup_logging(logging.INFO)
        setup_logging(logging.INFO, log_file=str(tmp_path / "a.log"))

        assert len(our_handlers()) == 2

        setup_logging(logging.WARNING)

        assert len(our_handlers()) == 1

    def test_file_gets_debug(self, tmp_path):
        log_file = tmp_path / "nested" / "split.log"
        setup_logging(logging.WARNING, log_file=str(log_file),
                      console=Console(file=io.StringIO()))

        logging.getLogger("cdda_splitter.test").debug("debug detail")

        text = log_file.read_text()
        assert "DEBUG - cdda_splitter.test - debug detail" in text
