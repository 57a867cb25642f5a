"""
Output files for split tracks.

A TrackFile is created exclusively (an existing file is never replaced),
receives a placeholder header straight away so it is a valid WAVE file
from the first byte written, has PCM appended sequentially, and finally
gets its header rewritten in place with the real payload length.
"""

import logging
import os
from pathlib import Path
from typing import List, Union

from cdda_splitter.core.settings import SplitterSettings
from cdda_splitter.core.wav_header import (
    CDDA_AUDIO,
    MAX_PAYLOAD_LENGTH,
    AudioFormat,
    build_wav_header,
)
from cdda_splitter.utils.error_handler import (
    TrackCreateError,
    TrackExistsError,
    TrackTooLargeError,
    TrackWriteError,
)

logger = logging.getLogger(__name__)


class TrackFile:
    """
    One exclusively created track file.

    Attributes:
        path: Location of the file
        audio: Sample format written into the header
        payload_length: PCM bytes appended so far

    Example:
        >>> with TrackFile.create("track_01.wav") as track:
        ...     track.write_header_placeholder()
        ...     track.append(pcm)
        ...     track.patch_header_with_final_size()
    """

    def __init__(self, path: Path, handle, audio: AudioFormat = CDDA_AUDIO):
        self.path = path
        self.audio = audio
        self.payload_length = 0
        self._handle = handle

    @classmethod
    def create(cls, path: Union[str, Path], audio: AudioFormat = CDDA_AUDIO) -> "TrackFile":
        """
        Create a new track file, refusing to overwrite.

        Raises:
            TrackExistsError: If the path already exists
            TrackCreateError: If the file cannot be created for any other reason
        """
        path = Path(path)
        try:
            handle = open(path, 'xb')
        except FileExistsError:
            raise TrackExistsError(str(path)) from None
        except OSError as e:
            raise TrackCreateError(str(path), e) from e

        logger.debug(f"Created {path}")
        return cls(path, handle, audio)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def _require_open(self):
        if self._handle is None:
            raise ValueError(f"I/O operation on closed track file {self.path}")
        return self._handle

    def write_header_placeholder(self) -> None:
        """Write a header declaring an empty payload at the start of the file."""
        handle = self._require_open()
        try:
            handle.seek(0)
            handle.write(build_wav_header(0, self.audio))
        except OSError as e:
            raise TrackWriteError(str(self.path), e) from e

    def append(self, payload) -> None:
        """
        Append PCM bytes after everything written so far.

        Raises:
            TrackTooLargeError: If the payload would no longer fit the header;
                nothing is written in that case
            TrackWriteError: If the write fails
        """
        handle = self._require_open()
        if self.payload_length + len(payload) > MAX_PAYLOAD_LENGTH:
            raise TrackTooLargeError(str(self.path), MAX_PAYLOAD_LENGTH)
        try:
            handle.seek(0, os.SEEK_END)
            handle.write(payload)
        except OSError as e:
            raise TrackWriteError(str(self.path), e) from e
        self.payload_length += len(payload)

    def patch_header_with_final_size(self) -> None:
        """
        Rewrite the header with the real payload length.

        Only the first WAV_HEADER_SIZE bytes are overwritten; the PCM data
        that follows is left untouched.
        """
        handle = self._require_open()
        if self.payload_length > MAX_PAYLOAD_LENGTH:
            raise TrackTooLargeError(str(self.path), MAX_PAYLOAD_LENGTH)
        header = build_wav_header(self.payload_length, self.audio)
        try:
            handle.seek(0)
            handle.write(header)
            handle.flush()
        except OSError as e:
            raise TrackWriteError(str(self.path), e) from e

    def close(self) -> None:
        """Close the file. Safe to call more than once."""
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as e:
            raise TrackWriteError(str(self.path), e) from e
        logger.debug(f"Closed {self.path} ({self.payload_length} payload bytes)")

    def __enter__(self) -> "TrackFile":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class TrackSinkFactory:
    """
    Creates track files in one directory from their track numbers.

    Attributes:
        directory: Directory receiving the files (must exist)
        name_template: str.format template taking the 1-based track number
        audio: Sample format written into every header

    Example:
        >>> factory = TrackSinkFactory(".")
        >>> factory.filename(1)
        'track_01.wav'
    """

    def __init__(self, directory: Union[str, Path] = ".",
                 name_template: str = "track_{number:02d}.wav",
                 audio: AudioFormat = CDDA_AUDIO):
        self.directory = Path(directory)
        self.name_template = name_template
        self.audio = audio

    @classmethod
    def from_settings(cls, settings: SplitterSettings) -> "TrackSinkFactory":
        return cls(settings.output_dir, settings.name_template, settings.audio_format)

    def filename(self, track_number: int) -> str:
        return self.name_template.format(number=track_number)

    def path_for(self, track_number: int) -> Path:
        return self.directory / self.filename(track_number)

    def create(self, track_number: int) -> TrackFile:
        """Create the file for a track number; see TrackFile.create."""
        return TrackFile.create(self.path_for(track_number), self.audio)

    def __call__(self, track_number: int) -> TrackFile:
        return self.create(track_number)


def existing_track_files(factory: TrackSinkFactory, limit: int = 99) -> List[Path]:
    """
    List track paths that already exist in the factory's directory.

    Used to warn before a run that is bound to stop at a name collision.
    """
    found = []
    for number in range(1, limit + 1):
        path = factory.path_for(number)
        if path.exists():
            found.append(path)
    return found

