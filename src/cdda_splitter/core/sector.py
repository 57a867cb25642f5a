"""
Raw CDDA sector layout, sector reading and track-start detection.

A raw audio disc image with subchannel data is a flat run of fixed-size
sectors. Each sector carries 2352 bytes of 16-bit stereo PCM followed by
96 bytes of raw (deinterleaved-per-byte) subchannel data, where every
subchannel byte holds one bit of each of the P..W channels:

    bit 7   6   5   4   3   2   1   0
        P   Q   R   S   T   U   V   W

Only the P channel is consulted. A sector whose P bits are all set marks
the start of a new track.
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Iterator

import numpy as np

logger = logging.getLogger(__name__)


# =============================================================================
# Red Book Constants
# =============================================================================

# Audio payload per sector (588 stereo frames of 16-bit samples)
CDDA_PAYLOAD_SIZE = 2352

# Raw subchannel bytes appended to each sector
CDDA_SUBCHANNEL_SIZE = 96

# Complete sector as stored in the image
CDDA_SECTOR_SIZE = CDDA_PAYLOAD_SIZE + CDDA_SUBCHANNEL_SIZE  # 2448

# Subchannel bit-plane masks
SUBCHANNEL_P = 0x80
SUBCHANNEL_Q = 0x40


# =============================================================================
# Sector Layout
# =============================================================================


@dataclass(frozen=True)
class SectorLayout:
    """
    Byte layout of one raw sector.

    Attributes:
        payload_size: Audio bytes at the start of each sector (2352 for CDDA)
        subchannel_size: Subchannel bytes following the payload (96 for CDDA)
        p_channel_mask: Bit mask selecting the P channel in each subchannel byte

    Calculated Properties:
        sector_size: Total bytes per sector

    Example:
        >>> layout = SectorLayout()
        >>> layout.sector_size
        2448
    """
    payload_size: int = CDDA_PAYLOAD_SIZE
    subchannel_size: int = CDDA_SUBCHANNEL_SIZE
    p_channel_mask: int = SUBCHANNEL_P

    @property
    def sector_size(self) -> int:
        """Total bytes per sector (payload + subchannel)."""
        return self.payload_size + self.subchannel_size

    def payload(self, sector) -> memoryview:
        """Return the audio payload region of a sector."""
        return memoryview(sector)[:self.payload_size]

    def subchannel(self, sector) -> memoryview:
        """Return the subchannel region of a sector."""
        return memoryview(sector)[self.payload_size:self.sector_size]


CDDA_LAYOUT = SectorLayout()


# =============================================================================
# Track Start Detection
# =============================================================================


def is_track_start(subchannel, p_channel_mask: int = SUBCHANNEL_P) -> bool:
    """
    Check whether a sector starts a new track.

    A sector is a track start when the P channel bit is set in every byte
    of its subchannel region. The result depends only on the bytes passed
    in, so classifying the same sector twice always gives the same answer.

    Real discs drive P as a square wave through pauses and lead-in; this
    check only fires on a sector whose P plane is entirely ones.

    Args:
        subchannel: Subchannel bytes of one sector (bytes, bytearray or memoryview)
        p_channel_mask: Bit mask of the P channel (default: 0x80)

    Returns:
        True if every subchannel byte has the P bit set, False otherwise.
        An empty subchannel region is never a track start.

    Example:
        >>> is_track_start(bytes([0x80] * 96))
        True
        >>> is_track_start(bytes([0x80] * 95 + [0x00]))
        False
    """
    if len(subchannel) == 0:
        return False
    plane = np.frombuffer(subchannel, dtype=np.uint8)
    return bool(np.all(plane & p_channel_mask))


def is_track_start_sector(sector, layout: SectorLayout = CDDA_LAYOUT) -> bool:
    """Classify a complete sector using its subchannel P plane."""
    return is_track_start(layout.subchannel(sector), layout.p_channel_mask)


# =============================================================================
# Sector Reading
# =============================================================================


def read_full(stream: BinaryIO, buffer: bytearray) -> int:
    """
    Fill a buffer from a binary stream.

    Pipes and sockets may return fewer bytes than requested even when more
    data follows, so reads are repeated until the buffer is full or the
    stream reports end-of-file.

    Args:
        stream: Binary stream opened for reading
        buffer: Pre-allocated buffer to fill

    Returns:
        Number of bytes placed in the buffer (less than len(buffer) only at
        end-of-file)
    """
    view = memoryview(buffer)
    filled = 0
    while filled < len(buffer):
        count = stream.readinto(view[filled:])
        if not count:
            break
        filled += count
    return filled


def iter_sectors(stream: BinaryIO, layout: SectorLayout = CDDA_LAYOUT) -> Iterator[memoryview]:
    """
    Yield complete sectors from a raw image stream.

    A single buffer of exactly one sector is reused for every read, so each
    yielded view is only valid until the next iteration. A short or empty
    final read ends the stream; trailing bytes that do not form a whole
    sector are discarded.

    Args:
        stream: Binary stream positioned at the first sector
        layout: Sector layout (default: CDDA 2352+96)

    Yields:
        memoryview over one full sector

    Example:
        >>> with open("disc.mdf", "rb") as image:
        ...     for sector in iter_sectors(image):
        ...         handle(sector)
    """
    buffer = bytearray(layout.sector_size)
    view = memoryview(buffer)
    while True:
        count = read_full(stream, buffer)
        if count < layout.sector_size:
            if count:
                logger.debug(f"Discarding {count} trailing bytes (short final sector)")
            return
        yield view
