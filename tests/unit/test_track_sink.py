"""
Unit tests for track output files.

Tests exclusive creation, the placeholder/patch header contract and
error translation.
"""

import errno
import os

import pytest

from cdda_splitter.core import (
    MAX_PAYLOAD_LENGTH,
    WAV_HEADER_SIZE,
    AudioFormat,
    TrackFile,
    TrackSinkFactory,
    build_wav_header,
    existing_track_files,
    read_wav_header,
)
from cdda_splitter.utils import (
    SplitterError,
    TrackCreateError,
    TrackExistsError,
    TrackTooLargeError,
    TrackWriteError,
)


class TestTrackFileCreate:
    """Test TrackFile.create()."""

    def test_creates_new_file(self, tmp_path):
        """Test a new file is created empty."""
        path = tmp_path / "track_01.wav"

        with TrackFile.create(path) as track:
            assert track.path == path
            assert track.payload_length == 0
            assert not track.closed

        assert path.exists()
        assert track.closed

    def test_refuses_existing_file(self, tmp_path):
        """Test an existing file is neither opened nor modified."""
        path = tmp_path / "track_01.wav"
        path.write_bytes(b'keep me')

        with pytest.raises(TrackExistsError) as excinfo:
            TrackFile.create(path)

        assert excinfo.value.filepath == str(path)
        assert "won't overwrite" in str(excinfo.value)
        assert path.read_bytes() == b'keep me'

    def test_missing_directory(self, tmp_path):
        """Test other failures raise TrackCreateError with the cause."""
        path = tmp_path / "missing" / "track_01.wav"

        with pytest.raises(TrackCreateError) as excinfo:
            TrackFile.create(path)

        assert excinfo.value.filepath == str(path)
        assert excinfo.value.cause.errno == errno.ENOENT
        assert "create failed" in str(excinfo.value)

    @pytest.mark.skipif(os.name != 'posix' or os.geteuid() == 0,
                        reason="needs POSIX permissions and a non-root user")
    def test_read_only_directory(self, tmp_path):
        """Test permission errors raise TrackCreateError."""
        directory = tmp_path / "ro"
        directory.mkdir()
        directory.chmod(0o555)
        try:
            with pytest.raises(TrackCreateError) as excinfo:
                TrackFile.create(directory / "track_01.wav")
            assert excinfo.value.cause.errno == errno.EACCES
        finally:
            directory.chmod(0o755)


class TestHeaderContract:
    """Test placeholder header, append and header patch."""

    def test_placeholder_only(self, tmp_path):
        """Test a file with only a placeholder is a valid empty WAVE file."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()

        assert path.read_bytes() == build_wav_header(0)

    def test_append_follows_header(self, tmp_path):
        """Test payload bytes are written after the header in order."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.append(b'\x01' * 8)
            track.append(memoryview(b'\x02' * 4))

            assert track.payload_length == 12

        data = path.read_bytes()
        assert data[WAV_HEADER_SIZE:] == b'\x01' * 8 + b'\x02' * 4

    def test_header_unpatched_before_finalize(self, tmp_path):
        """Test the placeholder stays until the patch call."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.append(bytes(2352))

        assert read_wav_header(path).data_size == 0

    def test_patch_rewrites_sizes(self, tmp_path):
        """Test the patch writes the real sizes without touching the payload."""
        path = tmp_path / "track_01.wav"
        payload = bytes(range(256)) * 20
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.append(payload)
            track.patch_header_with_final_size()

        data = path.read_bytes()
        header = read_wav_header(path)
        assert len(data) == WAV_HEADER_SIZE + len(payload)
        assert data[WAV_HEADER_SIZE:] == payload
        assert header.subchunk2_size == len(payload)
        assert header.chunk_size == len(payload) + 36

    def test_append_after_patch(self, tmp_path):
        """Test appends after a patch still land at the end of the file."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.append(b'a' * 4)
            track.patch_header_with_final_size()
            track.append(b'b' * 4)
            track.patch_header_with_final_size()

        assert path.read_bytes()[WAV_HEADER_SIZE:] == b'aaaabbbb'
        assert read_wav_header(path).data_size == 8

    def test_header_uses_audio_format(self, tmp_path):
        """Test the file's audio format reaches the header."""
        path = tmp_path / "track_01.wav"
        audio = AudioFormat(sample_rate=48000)
        with TrackFile.create(path, audio) as track:
            track.write_header_placeholder()
            track.patch_header_with_final_size()

        assert read_wav_header(path).sample_rate == 48000

    def test_closed_file_rejects_writes(self, tmp_path):
        """Test writes after close raise ValueError."""
        track = TrackFile.create(tmp_path / "track_01.wav")
        track.close()
        track.close()

        with pytest.raises(ValueError):
            track.append(b'x')

    def test_write_error_is_wrapped(self, tmp_path):
        """Test OSErrors during writes become TrackWriteError."""

        class BrokenHandle:
            def seek(self, *args):
                return 0

            def write(self, data):
                raise OSError(errno.ENOSPC, "No space left on device")

            def flush(self):
                pass

            def close(self):
                pass

        track = TrackFile(tmp_path / "track_01.wav", BrokenHandle())

        with pytest.raises(TrackWriteError) as excinfo:
            track.append(b'x')

        assert excinfo.value.cause.errno == errno.ENOSPC
        assert "No space left" in str(excinfo.value)
        assert track.payload_length == 0


class TestSizeLimit:
    """Test the 32-bit size limit of the WAVE header."""

    def test_append_past_limit_is_refused(self, tmp_path):
        """Test an append that would overflow the header writes nothing."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.payload_length = MAX_PAYLOAD_LENGTH - 10

            with pytest.raises(TrackTooLargeError) as excinfo:
                track.append(bytes(2352))

            assert track.payload_length == MAX_PAYLOAD_LENGTH - 10

        assert path.stat().st_size == WAV_HEADER_SIZE
        assert excinfo.value.filepath == str(path)
        assert "track_01.wav" in str(excinfo.value)

    def test_append_up_to_limit(self, tmp_path):
        """Test the largest representable payload is still patched."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.payload_length = MAX_PAYLOAD_LENGTH - 4
            track.append(b'abcd')
            track.patch_header_with_final_size()

        header = read_wav_header(path)
        assert header.subchunk2_size == MAX_PAYLOAD_LENGTH
        assert header.chunk_size == 0xFFFFFFFF

    def test_patch_past_limit_is_splitter_error(self, tmp_path):
        """Test an oversized payload length is reported with the path."""
        path = tmp_path / "track_01.wav"
        with TrackFile.create(path) as track:
            track.write_header_placeholder()
            track.payload_length = 0xFFFFFFFF

            with pytest.raises(SplitterError) as excinfo:
                track.patch_header_with_final_size()

        assert isinstance(excinfo.value, TrackTooLargeError)
        assert excinfo.value.filepath == str(path)
        assert read_wav_header(path).data_size == 0


class TestTrackSinkFactory:
    """Test TrackSinkFactory naming and creation."""

    def test_default_names(self, tmp_path):
        """Test two-digit, 1-based names."""
        factory = TrackSinkFactory(tmp_path)

        assert factory.filename(1) == "track_01.wav"
        assert factory.filename(9) == "track_09.wav"
        assert factory.filename(10) == "track_10.wav"
        assert factory.filename(99) == "track_99.wav"
        assert factory.path_for(2) == tmp_path / "track_02.wav"

    def test_create_by_number(self, tmp_path):
        """Test the factory is callable with a track number."""
        factory = TrackSinkFactory(tmp_path)

        with factory(3) as track:
            assert track.path == tmp_path / "track_03.wav"

    def test_custom_template(self, tmp_path):
        """Test a custom name template."""
        factory = TrackSinkFactory(tmp_path, name_template="disc1-{number:03d}.wav")
        assert factory.filename(7) == "disc1-007.wav"

    def test_default_directory_is_cwd(self, tmp_path, monkeypatch):
        """Test files land in the current directory by default."""
        monkeypatch.chdir(tmp_path)

        with TrackSinkFactory().create(1):
            pass

        assert (tmp_path / "track_01.wav").exists()

    def test_existing_track_files(self, tmp_path):
        """Test listing track files that would collide."""
        factory = TrackSinkFactory(tmp_path)
        (tmp_path / "track_02.wav").write_bytes(b'')
        (tmp_path / "track_05.wav").write_bytes(b'')
        (tmp_path / "other.wav").write_bytes(b'')

        assert existing_track_files(factory) == [
            tmp_path / "track_02.wav",
            tmp_path / "track_05.wav",
        ]
