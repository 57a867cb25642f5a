"""
RIFF/WAVE header encoding for PCM track files.

Track files use the canonical 44-byte header: a RIFF chunk wrapping one
"fmt " subchunk (16 bytes, linear PCM) and one "data" subchunk. Only the
two size fields depend on the amount of audio, so a header can be written
up front with a zero length and rewritten once the track is complete.
"""

import struct
from dataclasses import dataclass

from cdda_splitter.utils.error_handler import WavHeaderError


# =============================================================================
# Constants
# =============================================================================

WAV_HEADER_SIZE = 44

# Bytes counted by chunk size besides the data payload
# ("WAVE" + "fmt " subchunk header and body + "data" subchunk header)
WAV_CHUNK_OVERHEAD = 36

# Largest payload whose chunk size still fits the 32-bit field
MAX_PAYLOAD_LENGTH = 0xFFFFFFFF - WAV_CHUNK_OVERHEAD

WAV_SUBCHUNK1_PCM = 16
WAV_FORMAT_PCM = 1

RIFF_TAG = b'RIFF'
WAVE_TAG = b'WAVE'
FMT_TAG = b'fmt '
DATA_TAG = b'data'

# Little-endian layout of the whole header, offsets 0..43
_HEADER_STRUCT = struct.Struct('<4sI4s4sIHHIIHH4sI')

# CDDA audio: 44.1 kHz, 16-bit, stereo
CDDA_SAMPLE_RATE = 44100
CDDA_CHANNELS = 2
CDDA_BITS_PER_SAMPLE = 16


# =============================================================================
# Audio Format
# =============================================================================


@dataclass(frozen=True)
class AudioFormat:
    """
    PCM sample format written into the header.

    Attributes:
        sample_rate: Frames per second
        channels: Interleaved channel count
        bits_per_sample: Bits per single-channel sample

    Calculated Properties:
        bytes_per_sample: Bytes per single-channel sample
        block_align: Bytes per frame (all channels)
        byte_rate: Bytes per second
    """
    sample_rate: int = CDDA_SAMPLE_RATE
    channels: int = CDDA_CHANNELS
    bits_per_sample: int = CDDA_BITS_PER_SAMPLE

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


CDDA_AUDIO = AudioFormat()


# =============================================================================
# Header Record
# =============================================================================


@dataclass(frozen=True)
class WavHeader:
    """Decoded fields of a 44-byte PCM WAVE header."""
    chunk_size: int
    subchunk1_size: int
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    subchunk2_size: int

    @property
    def data_size(self) -> int:
        """Payload bytes declared by the data subchunk."""
        return self.subchunk2_size

    @property
    def num_samples(self) -> int:
        """Sample frames declared by the data subchunk."""
        if self.block_align == 0:
            return 0
        return self.subchunk2_size // self.block_align


# =============================================================================
# Encoding / Decoding
# =============================================================================


def build_wav_header(payload_length: int, audio: AudioFormat = CDDA_AUDIO) -> bytes:
    """
    Encode the 44-byte header for a PCM payload of the given length.

    Args:
        payload_length: Bytes of PCM data following the header
        audio: Sample format (default: CDDA 44.1 kHz / 16-bit / stereo)

    Returns:
        Header bytes, always WAV_HEADER_SIZE long

    Raises:
        ValueError: If payload_length is negative or does not fit the
            32-bit size fields

    Example:
        >>> header = build_wav_header(0)
        >>> len(header), header[:4]
        (44, b'RIFF')
    """
    if payload_length < 0:
        raise ValueError(f"payload length must not be negative: {payload_length}")
    if payload_length > MAX_PAYLOAD_LENGTH:
        raise ValueError(f"payload length too large for RIFF: {payload_length}")

    return _HEADER_STRUCT.pack(
        RIFF_TAG,
        WAV_CHUNK_OVERHEAD + payload_length,
        WAVE_TAG,
        FMT_TAG,
        WAV_SUBCHUNK1_PCM,
        WAV_FORMAT_PCM,
        audio.channels,
        audio.sample_rate,
        audio.byte_rate,
        audio.block_align,
        audio.bits_per_sample,
        DATA_TAG,
        payload_length,
    )


def parse_wav_header(data: bytes) -> WavHeader:
    """
    Decode a 44-byte PCM header.

    Args:
        data: At least the first WAV_HEADER_SIZE bytes of a file

    Returns:
        WavHeader with the decoded fields

    Raises:
        WavHeaderError: If the data is short or a chunk tag is wrong
    """
    if len(data) < WAV_HEADER_SIZE:
        raise WavHeaderError(
            f"WAVE header truncated: {len(data)} of {WAV_HEADER_SIZE} bytes"
        )

    (riff, chunk_size, wave, fmt, subchunk1_size, audio_format, channels,
     sample_rate, byte_rate, block_align, bits_per_sample, data_tag,
     subchunk2_size) = _HEADER_STRUCT.unpack_from(data)

    for found, expected in ((riff, RIFF_TAG), (wave, WAVE_TAG),
                            (fmt, FMT_TAG), (data_tag, DATA_TAG)):
        if found != expected:
            raise WavHeaderError(f"Bad chunk tag {found!r}, expected {expected!r}")

    return WavHeader(
        chunk_size=chunk_size,
        subchunk1_size=subchunk1_size,
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        subchunk2_size=subchunk2_size,
    )


def read_wav_header(filepath) -> WavHeader:
    """Read and decode the header at the start of a track file."""
    with open(filepath, 'rb') as f:
        data = f.read(WAV_HEADER_SIZE)
    try:
        return parse_wav_header(data)
    except WavHeaderError as e:
        raise WavHeaderError(e.message, str(filepath)) from e
