"""
Test fixtures for the CDDA track splitter.

Provides synthetic raw sectors and streams, and track files that fail on
demand, for testing without real disc images.
"""

from tests.fixtures.mock_streams import (
    ChunkedReader,
    FailingTrackFile,
    RecordingSinkFactory,
    build_image,
    build_stream,
    make_boundary_sector,
    make_partial_p_sector,
    make_payload,
    make_payload_sector,
    payloads_for,
    track_paths,
)

__all__ = [
    "ChunkedReader",
    "FailingTrackFile",
    "RecordingSinkFactory",
    "build_image",
    "build_stream",
    "make_boundary_sector",
    "make_partial_p_sector",
    "make_payload",
    "make_payload_sector",
    "payloads_for",
    "track_paths",
]
