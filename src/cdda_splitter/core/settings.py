"""
Settings for a track splitting run.

Defaults describe a standard CDDA image with raw subchannel data
(2352 + 96 byte sectors, 44.1 kHz 16-bit stereo audio) written as
track_XX.wav files in the current directory. Settings are validated
pydantic models, so a bad override fails before any file is created.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from cdda_splitter.core.sector import (
    CDDA_PAYLOAD_SIZE,
    CDDA_SUBCHANNEL_SIZE,
    SUBCHANNEL_P,
    SectorLayout,
)
from cdda_splitter.core.wav_header import (
    CDDA_BITS_PER_SAMPLE,
    CDDA_CHANNELS,
    CDDA_SAMPLE_RATE,
    AudioFormat,
)
from cdda_splitter.utils.error_handler import SettingsError

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_NAME_TEMPLATE = "track_{number:02d}.wav"


# =============================================================================
# Settings Models
# =============================================================================

class LayoutSettings(BaseModel):
    """Sector layout of the input image."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    payload_size: int = Field(default=CDDA_PAYLOAD_SIZE, gt=0)
    subchannel_size: int = Field(default=CDDA_SUBCHANNEL_SIZE, gt=0)
    p_channel_mask: int = Field(default=SUBCHANNEL_P, ge=1, le=0xFF)

    def to_layout(self) -> SectorLayout:
        return SectorLayout(
            payload_size=self.payload_size,
            subchannel_size=self.subchannel_size,
            p_channel_mask=self.p_channel_mask,
        )


class AudioSettings(BaseModel):
    """PCM format of the audio payload."""
    model_config = ConfigDict(frozen=True, extra='forbid')

    sample_rate: int = Field(default=CDDA_SAMPLE_RATE, gt=0)
    channels: int = Field(default=CDDA_CHANNELS, ge=1, le=8)
    bits_per_sample: int = CDDA_BITS_PER_SAMPLE

    @field_validator('bits_per_sample')
    @classmethod
    def _whole_bytes(cls, value: int) -> int:
        if value <= 0 or value % 8:
            raise ValueError("bits_per_sample must be a positive multiple of 8")
        return value

    def to_audio_format(self) -> AudioFormat:
        return AudioFormat(
            sample_rate=self.sample_rate,
            channels=self.channels,
            bits_per_sample=self.bits_per_sample,
        )


class SplitterSettings(BaseModel):
    """
    Complete configuration for one run.

    Attributes:
        layout: Sector layout of the input image
        audio: PCM format of the payload and the output headers
        output_dir: Existing directory receiving the track files
        name_template: str.format template taking the 1-based track number

    Example:
        >>> settings = SplitterSettings()
        >>> settings.track_filename(1)
        'track_01.wav'
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    output_dir: Path = Path('.')
    name_template: str = DEFAULT_NAME_TEMPLATE

    @field_validator('name_template')
    @classmethod
    def _template_uses_number(cls, value: str) -> str:
        if '{number' not in value:
            raise ValueError("name_template must contain a {number} field")
        try:
            name = value.format(number=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"name_template is not a valid format string: {e}") from e
        if not name or '/' in name or name in ('.', '..'):
            raise ValueError("name_template must produce a plain file name")
        return value

    @model_validator(mode='after')
    def _payload_holds_whole_frames(self) -> 'SplitterSettings':
        block_align = self.audio.channels * (self.audio.bits_per_sample // 8)
        if self.layout.payload_size % block_align:
            raise ValueError(
                f"payload_size {self.layout.payload_size} is not a multiple of "
                f"the frame size {block_align}"
            )
        return self

    @property
    def sector_layout(self) -> SectorLayout:
        return self.layout.to_layout()

    @property
    def audio_format(self) -> AudioFormat:
        return self.audio.to_audio_format()

    def track_filename(self, track_number: int) -> str:
        """File name for a 1-based track number."""
        return self.name_template.format(number=track_number)


# =============================================================================
# Loading
# =============================================================================

def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> SplitterSettings:
    """
    Build validated settings from a mapping of overrides.

    Keys mirror the model fields; nested sections are plain dicts, and
    None values are ignored so optional CLI flags can be passed through.

    Args:
        overrides: Optional mapping such as {"output_dir": "out"}

    Returns:
        SplitterSettings instance

    Raises:
        SettingsError: If any value fails validation

    Example:
        >>> load_settings({"audio": {"sample_rate": 48000}}).audio.sample_rate
        48000
    """
    values: Dict[str, Any] = {
        key: value for key, value in (overrides or {}).items() if value is not None
    }
    try:
        settings = SplitterSettings.model_validate(values)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}") from e

    logger.debug(f"Settings: {settings.model_dump()}")
    return settings
