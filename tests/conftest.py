"""
Pytest configuration and shared fixtures.
"""

import pytest
import wave
from pathlib import Path
from mutagen.wave import WAVE
from mutagen.id3 import TIT2, TPE1, TALB, TDRC, TCON, TRCK, TXXX

from tagalyzer.core import Metadata, NativeTag, DecodeError

# ---------- Constants ----------

TAGS = {
    "title": "Test Title",
    "artist": ["Artist A", "Artist B"],
    "album": "Test Album",
    "date": "2024-05-01",
    "genre": "TestGenre",
    "tracknumber": "3/12",
    "mb_albumid": "f3b2c1a0-1111-2222-3333-444455556666",
}

# ---------- Helper Functions ----------

def write_silence(path: Path, seconds: float = 0.1, rate: int = 44100, channels: int = 2):
    """Write a short 16-bit PCM WAV file of silence."""
    with wave.open(str(path), 'wb') as w:
        w.setnchannels(channels)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(b'\x00\x00' * channels * int(rate * seconds))

def write_wav_tags(path: Path):
    """Write ID3 tags into a WAV file."""
    audio = WAVE(str(path))
    if audio.tags is None:
        audio.add_tags()

    audio.tags.add(TIT2(encoding=3, text=TAGS["title"]))
    audio.tags.add(TPE1(encoding=3, text=TAGS["artist"]))
    audio.tags.add(TALB(encoding=3, text=TAGS["album"]))
    audio.tags.add(TDRC(encoding=3, text=TAGS["date"]))
    audio.tags.add(TCON(encoding=3, text=TAGS["genre"]))
    audio.tags.add(TRCK(encoding=3, text=TAGS["tracknumber"]))
    audio.tags.add(TXXX(encoding=3, desc="MusicBrainz Album Id", text=TAGS["mb_albumid"]))
    audio.save()

def make_metadata(title: str = "Song A") -> Metadata:
    """Decoder output for a plain stereo file with a title."""
    return Metadata(
        format={'container': 'WAVE', 'codec': 'PCM', 'sample_rate': 44100, 'number_of_channels': 2},
        common={'title': title},
        native={'ID3v2.4': [NativeTag('TIT2', title)]},
    )


class FakeDecoder:
    """
    Decoder stand-in. Sources named in `failures` raise the mapped exception;
    every other source decodes to make_metadata(source.name).
    Records the order in which sources were decoded.
    """

    def __init__(self, failures=None, results=None):
        self.failures = failures or {}
        self.results = results or {}
        self.calls = []

    def __call__(self, source):
        self.calls.append(source.name)
        if source.name in self.failures:
            raise self.failures[source.name]
        if source.name in self.results:
            return self.results[source.name]
        return make_metadata(source.name)

# ---------- Fixtures ----------

@pytest.fixture
def tagged_wav(tmp_path):
    """A real WAV file carrying ID3 tags."""
    path = tmp_path / "tagged.wav"
    write_silence(path)
    write_wav_tags(path)
    return path

@pytest.fixture
def untagged_wav(tmp_path):
    """A real WAV file without any tags."""
    path = tmp_path / "plain.wav"
    write_silence(path, channels=1, rate=22050)
    return path

@pytest.fixture
def corrupt_file(tmp_path):
    """A file with an audio extension but no audio content."""
    path = tmp_path / "broken.mp3"
    path.write_bytes(b"this is not audio at all" * 8)
    return path

@pytest.fixture
def music_dir(tmp_path):
    """A directory with two good files, one broken file and a non-audio file."""
    music = tmp_path / "music"
    music.mkdir()
    for name in ("a.wav", "c.wav"):
        write_silence(music / name)
    write_wav_tags(music / "a.wav")
    (music / "b.mp3").write_bytes(b"garbage" * 32)
    (music / "notes.txt").write_text("not audio")

    sub = music / "sub"
    sub.mkdir()
    write_silence(sub / "d.wav")
    return music

@pytest.fixture
def fake_decoder():
    return FakeDecoder()

@pytest.fixture
def failing_decoder():
    """Fails on the second of three sources."""
    return FakeDecoder(failures={'two.mp3': DecodeError("Unsupported file format or corrupted file")})

@pytest.fixture
def make_decoder():
    """Build a FakeDecoder with custom failures/results."""
    return FakeDecoder

@pytest.fixture
def wav_tags():
    """Tag values written by tagged_wav."""
    return dict(TAGS)
