"""
CDDA Track Splitter - raw audio disc images to per-track WAVE files.

Splits a raw CDDA image carrying subchannel data (2352 + 96 byte sectors)
into uncompressed track_XX.wav files, using the subchannel P flag to find
where each track starts.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from cdda_splitter.core.demuxer import (
    TrackDemuxer,
    TrackSummary,
    DemuxResult,
    split_tracks,
)
from cdda_splitter.core.sector import (
    SectorLayout,
    is_track_start,
)
from cdda_splitter.core.settings import (
    SplitterSettings,
    load_settings,
)
from cdda_splitter.core.track_sink import TrackSinkFactory
from cdda_splitter.core.wav_header import (
    build_wav_header,
    parse_wav_header,
)

__all__ = [
    "__version__",

    # Splitting
    "TrackDemuxer",
    "TrackSummary",
    "DemuxResult",
    "split_tracks",
    "TrackSinkFactory",

    # Sectors
    "SectorLayout",
    "is_track_start",

    # Settings
    "SplitterSettings",
    "load_settings",

    # WAVE header
    "build_wav_header",
    "parse_wav_header",
]
