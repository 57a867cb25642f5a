"""
Track demultiplexer for raw CDDA images with subchannel data.

Reads the image one sector at a time, opens a new track file whenever a
sector's subchannel P plane is all ones, and appends each sector's audio
payload to the track that is currently open. Audio preceding the first
track-start sector is not written anywhere.

Track file lifecycle:

    closed --(track-start sector)--> open, placeholder header written
    open   --(any sector)----------> payload appended
    open   --(next track start / end of stream / error)--> header patched, closed
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from cdda_splitter.core.sector import (
    CDDA_LAYOUT,
    SectorLayout,
    is_track_start,
    iter_sectors,
)
from cdda_splitter.core.settings import SplitterSettings
from cdda_splitter.core.track_sink import TrackFile, TrackSinkFactory
from cdda_splitter.core.wav_header import CDDA_AUDIO, AudioFormat
from cdda_splitter.utils.error_handler import SplitterError
from cdda_splitter.utils.logging import log_track_summary

logger = logging.getLogger(__name__)

SinkFactory = Callable[[int], TrackFile]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class TrackSession:
    """
    State of the track currently being written.

    Attributes:
        track_number: 1-based track number
        output: Open track file
        num_samples: Sample frames appended so far
        start_offset: Stream offset of the track-start sector (sectors)
        end_offset: Stream offset just past the last sector (sectors),
            set when the session is finalized
    """
    track_number: int
    output: TrackFile
    num_samples: int = 0
    start_offset: int = 0
    end_offset: Optional[int] = None

    @property
    def path(self) -> Path:
        return self.output.path


@dataclass(frozen=True)
class TrackSummary:
    """
    Outcome of one finalized track.

    Attributes:
        track_number: 1-based track number
        path: Output file
        num_samples: Sample frames written
        payload_bytes: PCM bytes written after the header
        duration_s: Duration in whole seconds (truncated)
        start_offset: First sector of the track
        end_offset: Sector just past the end of the track
    """
    track_number: int
    path: Path
    num_samples: int
    payload_bytes: int
    duration_s: int
    start_offset: int
    end_offset: int

    @property
    def sector_count(self) -> int:
        return self.end_offset - self.start_offset


@dataclass
class DemuxResult:
    """
    Outcome of a complete run.

    Attributes:
        tracks: Summaries of finalized tracks, in track order
        sectors_read: Full sectors consumed from the stream
        skipped_sectors: Sectors read before the first track start
    """
    tracks: List[TrackSummary] = field(default_factory=list)
    sectors_read: int = 0
    skipped_sectors: int = 0

    @property
    def track_count(self) -> int:
        return len(self.tracks)


# =============================================================================
# Demultiplexer
# =============================================================================

class TrackDemuxer:
    """
    Splits a raw sector stream into per-track WAVE files.

    Attributes:
        layout: Sector layout of the input
        audio: PCM format of the payload

    Example:
        >>> demuxer = TrackDemuxer()
        >>> with open("disc.mdf", "rb") as image:
        ...     result = demuxer.run(image, TrackSinkFactory("."))
        >>> result.track_count
        12
    """

    def __init__(self, layout: SectorLayout = CDDA_LAYOUT, audio: AudioFormat = CDDA_AUDIO):
        if layout.payload_size % audio.block_align:
            raise ValueError(
                f"payload size {layout.payload_size} is not a multiple of "
                f"the frame size {audio.block_align}"
            )
        self.layout = layout
        self.audio = audio

    @classmethod
    def from_settings(cls, settings: SplitterSettings) -> "TrackDemuxer":
        return cls(settings.sector_layout, settings.audio_format)

    @property
    def samples_per_sector(self) -> int:
        """Sample frames carried by one sector's payload."""
        return self.layout.payload_size // self.audio.block_align

    def run(self, stream: BinaryIO, sink_factory: SinkFactory) -> DemuxResult:
        """
        Split the stream into track files.

        Args:
            stream: Binary stream of raw sectors; a short final read ends it
            sink_factory: Callable creating the TrackFile for a track number

        Returns:
            DemuxResult describing every finalized track

        Raises:
            TrackExistsError: A track file already exists (nothing is overwritten)
            TrackCreateError: A track file could not be created
            TrackWriteError: Writing to a track file failed
            TrackTooLargeError: A track outgrew the WAVE size fields

        Tracks finalized before an error stay on disk, and the track open at
        the time of the error is finalized before the error propagates.
        """
        result = DemuxResult()
        session: Optional[TrackSession] = None
        track_number = 0
        offset = 0

        try:
            for sector in iter_sectors(stream, self.layout):
                if is_track_start(self.layout.subchannel(sector), self.layout.p_channel_mask):
                    track_number += 1
                    if session is not None:
                        previous, session = session, None
                        result.tracks.append(self._finalize(previous, offset))
                    session = self._open(sink_factory, track_number, offset)

                if session is not None:
                    self._append(session, sector)
                else:
                    result.skipped_sectors += 1

                offset += 1
                result.sectors_read = offset
        except BaseException:
            if session is not None:
                self._finalize_after_error(session, offset, result)
            raise

        if session is not None:
            result.tracks.append(self._finalize(session, offset))

        if result.skipped_sectors:
            logger.info(f"Skipped {result.skipped_sectors} sectors before the first track start")
        logger.info(f"Read {result.sectors_read} sectors, wrote {result.track_count} tracks")
        return result

    # =========================================================================
    # Session Lifecycle
    # =========================================================================

    def _open(self, sink_factory: SinkFactory, track_number: int, offset: int) -> TrackSession:
        output = sink_factory(track_number)
        try:
            output.write_header_placeholder()
        except Exception:
            output.close()
            raise
        logger.debug(f"Track {track_number:02d} starts at sector {offset}: {output.path}")
        return TrackSession(track_number=track_number, output=output, start_offset=offset)

    def _append(self, session: TrackSession, sector) -> None:
        session.output.append(self.layout.payload(sector))
        session.num_samples += self.samples_per_sector

    def _finalize(self, session: TrackSession, offset: int) -> TrackSummary:
        session.end_offset = offset
        try:
            session.output.patch_header_with_final_size()
        finally:
            session.output.close()

        summary = TrackSummary(
            track_number=session.track_number,
            path=session.path,
            num_samples=session.num_samples,
            payload_bytes=session.output.payload_length,
            duration_s=self.duration_seconds(session.end_offset - session.start_offset),
            start_offset=session.start_offset,
            end_offset=session.end_offset,
        )
        log_track_summary(summary)
        return summary

    def _finalize_after_error(self, session: TrackSession, offset: int, result: DemuxResult) -> None:
        # The error already propagating is the one reported; a second
        # failure while finalizing is only logged.
        try:
            result.tracks.append(self._finalize(session, offset))
        except SplitterError as e:
            logger.error(f"Could not finalize {session.path} after an earlier error: {e}")

    def duration_seconds(self, sector_count: int) -> int:
        """Whole seconds of audio in a run of sectors (truncated)."""
        return (sector_count * self.layout.payload_size) // self.audio.byte_rate


def split_tracks(stream: BinaryIO, settings: Optional[SplitterSettings] = None,
                 sink_factory: Optional[SinkFactory] = None) -> DemuxResult:
    """
    Split a raw image stream using settings.

    Args:
        stream: Binary stream of raw sectors
        settings: SplitterSettings (default: CDDA defaults, current directory)
        sink_factory: Optional override for creating track files

    Returns:
        DemuxResult for the run
    """
    if settings is None:
        settings = SplitterSettings()

    demuxer = TrackDemuxer.from_settings(settings)
    if sink_factory is None:
        sink_factory = TrackSinkFactory.from_settings(settings)
    return demuxer.run(stream, sink_factory)
