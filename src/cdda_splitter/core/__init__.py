"""
Core functionality for the CDDA track splitter.

This module provides the raw sector layout and track-start detection,
the WAVE header codec, track output files, run settings and the track
demultiplexer that ties them together.
"""

from cdda_splitter.core.sector import (
    SectorLayout,
    CDDA_LAYOUT,
    CDDA_PAYLOAD_SIZE,
    CDDA_SUBCHANNEL_SIZE,
    CDDA_SECTOR_SIZE,
    SUBCHANNEL_P,
    is_track_start,
    is_track_start_sector,
    iter_sectors,
    read_full,
)

from cdda_splitter.core.wav_header import (
    AudioFormat,
    WavHeader,
    CDDA_AUDIO,
    WAV_HEADER_SIZE,
    MAX_PAYLOAD_LENGTH,
    build_wav_header,
    parse_wav_header,
    read_wav_header,
)

from cdda_splitter.core.track_sink import (
    TrackFile,
    TrackSinkFactory,
    existing_track_files,
)

from cdda_splitter.core.settings import (
    SplitterSettings,
    LayoutSettings,
    AudioSettings,
    load_settings,
)

from cdda_splitter.core.demuxer import (
    TrackDemuxer,
    TrackSession,
    TrackSummary,
    DemuxResult,
    split_tracks,
)

__all__ = [
    # Sectors
    "SectorLayout",
    "CDDA_LAYOUT",
    "CDDA_PAYLOAD_SIZE",
    "CDDA_SUBCHANNEL_SIZE",
    "CDDA_SECTOR_SIZE",
    "SUBCHANNEL_P",
    "is_track_start",
    "is_track_start_sector",
    "iter_sectors",
    "read_full",

    # WAVE header
    "AudioFormat",
    "WavHeader",
    "CDDA_AUDIO",
    "WAV_HEADER_SIZE",
    "MAX_PAYLOAD_LENGTH",
    "build_wav_header",
    "parse_wav_header",
    "read_wav_header",

    # Output files
    "TrackFile",
    "TrackSinkFactory",
    "existing_track_files",

    # Settings
    "SplitterSettings",
    "LayoutSettings",
    "AudioSettings",
    "load_settings",

    # Demultiplexer
    "TrackDemuxer",
    "TrackSession",
    "TrackSummary",
    "DemuxResult",
    "split_tracks",
]
