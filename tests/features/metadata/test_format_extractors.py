"""
Summary: Tests for the mutagen-backed extractors of non-MP3 formats.
Why: Each container maps its own tag keys onto the shared metadata fields.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from mutagen.flac import FLAC, Picture
from mutagen.id3 import APIC, ID3, TALB, TDRC, TIT2, TPE1, TRCK
from mutagen.mp4 import MP4Cover
from mutagen.wave import WAVE
from pytest_mock import MockerFixture

from audio_samples import JPEG_BYTES, PNG_BYTES, WriteSample, flac_bytes, write_wav
from audiosniff.features.metadata import ArtworkType
from audiosniff.features.metadata.usecases.extraction import (
    AacExtractor,
    FlacExtractor,
    M4aExtractor,
    OggVorbisExtractor,
    OpusExtractor,
    WaveExtractor,
)
from audiosniff.shared.errors import CorruptedMetadataError, NoMetadataFoundError


def test_supported_extensions_follow_the_registry() -> None:
    assert "flac" in FlacExtractor().supported_formats
    assert "m4a" in M4aExtractor().supported_formats
    assert "ogg" in OggVorbisExtractor().supported_formats
    assert "opus" in OpusExtractor().supported_formats
    assert "wav" in WaveExtractor().supported_formats


class TestFlacExtractor:
    @pytest.fixture
    def flac_path(self, write_sample: WriteSample) -> Path:
        return write_sample("album.flac", flac_bytes())

    def test_vorbis_comments(self, flac_path: Path) -> None:
        audio = FLAC(str(flac_path))
        audio["title"] = "Song"
        audio["artist"] = "Singer"
        audio["albumartist"] = "Various"
        audio["album"] = "Record"
        audio["tracknumber"] = "4"
        audio["tracktotal"] = "10"
        audio["discnumber"] = "2/3"
        audio["date"] = "2001-02-03"
        audio["genre"] = "(13)"
        audio["bpm"] = "128"
        audio["organization"] = "Label"
        audio.save()

        metadata = FlacExtractor().extract_metadata(flac_path)

        assert (metadata.title, metadata.artist, metadata.album) == ("Song", "Singer", "Record")
        assert metadata.album_artist == "Various"
        assert (metadata.track_number, metadata.track_total) == (4, 10)
        assert (metadata.disc_number, metadata.disc_total) == (2, 3)
        assert metadata.year == 2001
        assert metadata.genre == "Pop"
        assert metadata.bpm == 128
        assert metadata.publisher == "Label"
        assert metadata.file_format == "FLAC"
        assert metadata.has_artwork is False

    def test_pictures(self, flac_path: Path) -> None:
        audio = FLAC(str(flac_path))
        audio["title"] = "Pictured"
        picture = Picture()
        picture.type = 4
        picture.mime = "image/jpeg"
        picture.data = JPEG_BYTES
        audio.add_picture(picture)
        audio.save()

        extractor = FlacExtractor()

        assert extractor.extract_metadata(flac_path).has_artwork is True
        (artwork,) = extractor.extract_artwork(flac_path)
        assert artwork.data == JPEG_BYTES
        assert artwork.mime_type == "image/jpeg"
        assert artwork.type is ArtworkType.BACK_COVER

    def test_untagged_file(self, flac_path: Path) -> None:
        with pytest.raises(NoMetadataFoundError):
            _ = FlacExtractor().extract_metadata(flac_path)

    def test_not_a_flac_file(self, write_sample: WriteSample) -> None:
        path = write_sample("fake.flac", b"definitely not flac" * 10)

        with pytest.raises(CorruptedMetadataError):
            _ = FlacExtractor().extract_metadata(path)


class _FakeMP4(dict[str, Any]):
    """Stands in for an opened ``mutagen.mp4.MP4``; both are key/value mappings."""


class TestM4aExtractor:
    def test_atoms(self, mocker: MockerFixture, tmp_path: Path) -> None:
        tags = _FakeMP4(
            {
                "\xa9nam": ["Track"],
                "\xa9ART": ["Artist"],
                "aART": ["Album Artist"],
                "\xa9alb": ["Album"],
                "trkn": [(3, 12)],
                "disk": [(1, 0)],
                "\xa9day": ["2010-01-01T00:00:00Z"],
                "\xa9gen": ["Electronic"],
                "tmpo": [96],
                "cprt": ["(c) Someone"],
                "covr": [MP4Cover(PNG_BYTES, imageformat=MP4Cover.FORMAT_PNG)],
            }
        )
        extractor = M4aExtractor()
        _ = mocker.patch.object(extractor, "_open_file", return_value=tags)

        metadata = extractor.extract_metadata(tmp_path / "song.m4a")
        artwork = extractor.extract_artwork(tmp_path / "song.m4a")

        assert (metadata.title, metadata.artist, metadata.album) == ("Track", "Artist", "Album")
        assert metadata.album_artist == "Album Artist"
        assert (metadata.track_number, metadata.track_total) == (3, 12)
        assert (metadata.disc_number, metadata.disc_total) == (1, None)
        assert metadata.year == 2010
        assert metadata.genre == "Electronic"
        assert metadata.bpm == 96
        assert metadata.copyright == "(c) Someone"
        assert metadata.isrc is None
        assert metadata.file_format == "M4A"
        assert metadata.has_artwork is True
        assert artwork[0].mime_type == "image/png"
        assert artwork[0].data == PNG_BYTES

    def test_missing_core_atoms(self, mocker: MockerFixture, tmp_path: Path) -> None:
        extractor = M4aExtractor()
        _ = mocker.patch.object(extractor, "_open_file", return_value=_FakeMP4({"tmpo": [120]}))

        with pytest.raises(NoMetadataFoundError):
            _ = extractor.extract_metadata(tmp_path / "song.m4a")


class TestId3ContainerExtractors:
    def test_wave_id3_chunk(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "voice.wav")
        audio = WAVE(str(path))
        audio.add_tags()
        assert audio.tags is not None
        audio.tags.add(TIT2(encoding=3, text=["Wave Title"]))
        audio.tags.add(TPE1(encoding=3, text=["Wave Artist"]))
        audio.tags.add(TRCK(encoding=3, text=["2/5"]))
        audio.tags.add(TDRC(encoding=3, text=["2015"]))
        audio.tags.add(APIC(encoding=3, mime="image/png", type=3, desc="", data=PNG_BYTES))
        audio.save()

        extractor = WaveExtractor()
        metadata = extractor.extract_metadata(path)

        assert (metadata.title, metadata.artist) == ("Wave Title", "Wave Artist")
        assert (metadata.track_number, metadata.track_total) == (2, 5)
        assert metadata.year == 2015
        assert metadata.file_format == "WAV"
        assert [item.data for item in extractor.extract_artwork(path)] == [PNG_BYTES]

    def test_wave_without_tags(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "plain.wav")

        with pytest.raises(NoMetadataFoundError):
            _ = WaveExtractor().extract_metadata(path)
        assert WaveExtractor().extract_artwork(path) == []

    def test_aac_with_leading_id3_tag(self, write_sample: WriteSample) -> None:
        path = write_sample("stream.aac", b"\xff\xf1\x50\x80" + bytes(2048))
        tags = ID3()
        tags.add(TALB(encoding=3, text=["ADTS Album"]))
        tags.save(str(path))

        metadata = AacExtractor().extract_metadata(path)

        assert metadata.album == "ADTS Album"
        assert metadata.file_format == "AAC"

    def test_aac_without_tag(self, write_sample: WriteSample) -> None:
        path = write_sample("bare.aac", b"\xff\xf1\x50\x80" + bytes(2048))

        with pytest.raises(NoMetadataFoundError):
            _ = AacExtractor().extract_metadata(path)
        assert AacExtractor().extract_artwork(path) == []
