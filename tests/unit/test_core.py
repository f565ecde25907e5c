"""Unit tests for tagalyzer.core module."""

import io
import shutil
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace

import mutagen.apev2 as apev2
import mutagen.asf as asf
import mutagen.id3 as id3
import mutagen.mp4 as mp4
from mutagen._vorbis import VCommentDict

from tagalyzer.core import (
    DecodeError,
    NativeTag,
    TransformError,
    native_text,
    parse_bool,
    parse_position,
    read_common,
    read_format,
    read_metadata,
    read_native,
    safe_int,
    tag_family,
)


class FLAC:
    """Stand-in named like the mutagen class it imitates."""
    def __init__(self, info, tags=None):
        self.info = info
        self.tags = tags


class OggVorbis(FLAC):
    pass


class TestValueHelpers(unittest.TestCase):

    def test_safe_int(self):
        self.assertEqual(safe_int("123"), 123)
        self.assertEqual(safe_int(" 7 "), 7)
        self.assertIsNone(safe_int("invalid"))
        self.assertIsNone(safe_int(None))

    def test_parse_position(self):
        self.assertEqual(parse_position("3/12"), {'no': 3, 'of': 12})
        self.assertEqual(parse_position("5"), {'no': 5, 'of': None})
        self.assertEqual(parse_position((2, 0)), {'no': 2, 'of': None})
        self.assertEqual(parse_position((0, 9)), {'no': None, 'of': 9})
        self.assertEqual(parse_position("x/y"), {'no': None, 'of': None})

    def test_parse_bool(self):
        self.assertTrue(parse_bool("1"))
        self.assertTrue(parse_bool(True))
        self.assertFalse(parse_bool("0"))
        self.assertFalse(parse_bool(""))

    def test_native_text(self):
        self.assertEqual(native_text(b"abc"), "abc")
        self.assertEqual(native_text(b"\xff\xfe\x00"), "<3 bytes>")
        self.assertEqual(native_text((3, 12)), "3/12")
        self.assertEqual(native_text(42), "42")

    def test_transform_error_message(self):
        err = TransformError('rating', 'x', ValueError("bad"))
        self.assertEqual(err.key, 'rating')
        self.assertIn("'rating'", str(err))
        self.assertIn("bad", str(err))


class TestID3(unittest.TestCase):

    def setUp(self):
        self.tags = id3.ID3()
        self.tags.add(id3.TIT2(encoding=3, text="Song A"))
        self.tags.add(id3.TPE1(encoding=3, text=["A", "B"]))
        self.tags.add(id3.TRCK(encoding=3, text="3/12"))
        self.tags.add(id3.TDRC(encoding=3, text="1999-04-01"))
        self.tags.add(id3.TCON(encoding=3, text="Rock"))
        self.tags.add(id3.POPM(email="x@example.com", rating=255))
        self.tags.add(id3.TXXX(encoding=3, desc="MusicBrainz Album Id", text="abc-123"))
        self.mfile = SimpleNamespace(tags=self.tags)

    def test_tag_family(self):
        self.assertEqual(tag_family(self.mfile), "ID3v2.4")
        self.assertIsNone(tag_family(SimpleNamespace(tags=None)))

    def test_read_common(self):
        common = read_common(self.mfile)
        self.assertEqual(common['title'], ["Song A"])
        self.assertEqual(common['artist'], ["A", "B"])
        self.assertEqual(common['track'], {'no': 3, 'of': 12})
        self.assertEqual(common['date'], ["1999-04-01"])
        self.assertEqual(common['year'], 1999)
        self.assertEqual(common['genre'], ["Rock"])
        self.assertEqual(common['rating'], 1.0)
        self.assertEqual(common['musicbrainz_albumid'], ["abc-123"])
        self.assertNotIn('album', common)

    def test_read_native(self):
        native = read_native(self.mfile)
        self.assertEqual(list(native), ["ID3v2.4"])
        tags = native["ID3v2.4"]
        self.assertIn(NativeTag("TIT2", "Song A"), tags)
        self.assertIn(NativeTag("TPE1", "B"), tags)
        self.assertIn(NativeTag("TXXX:MusicBrainz Album Id", "abc-123"), tags)

    def test_no_tags(self):
        mfile = SimpleNamespace(tags=None)
        self.assertEqual(read_common(mfile), {})
        self.assertEqual(read_native(mfile), {})

    def test_itunes_comments_skipped(self):
        self.tags.add(id3.COMM(encoding=3, lang='eng', desc='', text="Great song"))
        self.tags.add(id3.COMM(encoding=3, lang='eng', desc='iTunNORM', text=" 00000A2B 00000C3D"))
        self.tags.add(id3.COMM(encoding=3, lang='eng', desc='iTunSMPB', text=" 00000000 00000210"))
        common = read_common(self.mfile)
        self.assertEqual(common['comment'], ["Great song"])

    def test_only_itunes_comments(self):
        self.tags.add(id3.COMM(encoding=3, lang='eng', desc='iTunNORM', text=" 00000A2B"))
        self.assertNotIn('comment', read_common(self.mfile))


class TestID3v1(unittest.TestCase):
    """Files carrying only the 128-byte ID3v1 trailer."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp(prefix="tagalyzer_test_"))
        self.path = self.test_dir / "old.mp3"
        trailer = (
            b"TAG"
            + b"Old Song".ljust(30, b"\x00")
            + b"Old Artist".ljust(30, b"\x00")
            + b"Old Album".ljust(30, b"\x00")
            + b"1987"
            + b"\x00" * 28 + b"\x00" + bytes([5])
            + bytes([17])
        )
        self.assertEqual(len(trailer), 128)
        self.path.write_bytes(b"\x00" * 512 + trailer)
        self.mfile = SimpleNamespace(tags=id3.ID3(str(self.path)))

    def tearDown(self):
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_tag_family(self):
        self.assertEqual(tag_family(self.mfile), "ID3v1")

    def test_native_namespace(self):
        native = read_native(self.mfile)
        self.assertEqual(list(native), ["ID3v1"])
        self.assertIn(NativeTag("TIT2", "Old Song"), native["ID3v1"])

    def test_read_common(self):
        common = read_common(self.mfile)
        self.assertEqual(common['title'], ["Old Song"])
        self.assertEqual(common['artist'], ["Old Artist"])
        self.assertEqual(common['track'], {'no': 5, 'of': None})
        self.assertEqual(common['year'], 1987)
        self.assertEqual(common['genre'], ["Rock"])


class TestMP4(unittest.TestCase):

    def setUp(self):
        self.tags = mp4.MP4Tags()
        self.tags['\xa9nam'] = ["Song C"]
        self.tags['\xa9ART'] = ["A", "B"]
        self.tags['trkn'] = [(3, 12)]
        self.tags['disk'] = [(1, 0)]
        self.tags['tmpo'] = [120]
        self.tags['cpil'] = True
        self.tags['----:com.apple.iTunes:MusicBrainz Album Id'] = [mp4.MP4FreeForm(b"abc-123")]
        self.tags['covr'] = [mp4.MP4Cover(b"\xff\xd8\xff\xe0data", imageformat=mp4.MP4Cover.FORMAT_JPEG)]
        self.mfile = SimpleNamespace(tags=self.tags)

    def test_tag_family(self):
        self.assertEqual(tag_family(self.mfile), "iTunes")

    def test_read_common(self):
        common = read_common(self.mfile)
        self.assertEqual(common['title'], ["Song C"])
        self.assertEqual(common['artist'], ["A", "B"])
        self.assertEqual(common['track'], {'no': 3, 'of': 12})
        self.assertEqual(common['disk'], {'no': 1, 'of': None})
        self.assertEqual(common['bpm'], 120)
        self.assertIs(common['compilation'], True)
        self.assertEqual(common['musicbrainz_albumid'], ["abc-123"])

    def test_read_native(self):
        tags = read_native(self.mfile)["iTunes"]
        self.assertIn(NativeTag('trkn', "3/12"), tags)
        self.assertIn(NativeTag('\xa9ART', "B"), tags)
        self.assertIn(NativeTag('----:com.apple.iTunes:MusicBrainz Album Id', "abc-123"), tags)
        self.assertIn(NativeTag('covr', "<image/jpeg, 8 bytes>"), tags)

    def test_native_text_png_cover(self):
        cover = mp4.MP4Cover(b"\x89PNG", imageformat=mp4.MP4Cover.FORMAT_PNG)
        self.assertEqual(native_text(cover), "<image/png, 4 bytes>")

    def test_native_text_binary_freeform(self):
        self.assertEqual(native_text(mp4.MP4FreeForm(b"\xff\xfe\xfd")), "<3 bytes>")


class TestASF(unittest.TestCase):

    def setUp(self):
        self.tags = asf.ASFTags()
        self.tags['Title'] = [asf.ASFUnicodeAttribute("Song D")]
        self.tags['Author'] = [asf.ASFUnicodeAttribute("A"), asf.ASFUnicodeAttribute("B")]
        self.tags['WM/TrackNumber'] = [asf.ASFDWordAttribute(7)]
        self.tags['WM/BeatsPerMinute'] = [asf.ASFUnicodeAttribute("98")]
        self.mfile = SimpleNamespace(tags=self.tags)

    def test_tag_family(self):
        self.assertEqual(tag_family(self.mfile), "asf")

    def test_read_common(self):
        common = read_common(self.mfile)
        self.assertEqual(common['title'], ["Song D"])
        self.assertEqual(common['artist'], ["A", "B"])
        self.assertEqual(common['track'], {'no': 7, 'of': None})
        self.assertEqual(common['bpm'], 98)

    def test_read_native(self):
        tags = read_native(self.mfile)["asf"]
        self.assertIn(NativeTag('Title', "Song D"), tags)
        self.assertIn(NativeTag('Author', "B"), tags)
        self.assertIn(NativeTag('WM/TrackNumber', "7"), tags)


class TestAPEv2(unittest.TestCase):

    def setUp(self):
        self.tags = apev2.APEv2()
        self.tags['Title'] = "Song E"
        self.tags['Artist'] = ["A", "B"]
        self.tags['Track'] = "3/12"
        self.tags['Cover Art (Front)'] = apev2.APEValue(b"cover.jpg\x00\xff\xd8", apev2.BINARY)
        self.tags['Website'] = apev2.APEValue("https://band.example", apev2.EXTERNAL)
        self.mfile = SimpleNamespace(tags=self.tags)

    def test_tag_family(self):
        self.assertEqual(tag_family(self.mfile), "APEv2")

    def test_read_common(self):
        common = read_common(self.mfile)
        self.assertEqual(common['title'], ["Song E"])
        self.assertEqual(common['artist'], ["A", "B"])
        self.assertEqual(common['track'], {'no': 3, 'of': 12})

    def test_read_native(self):
        tags = read_native(self.mfile)["APEv2"]
        self.assertIn(NativeTag('Artist', "A"), tags)
        self.assertIn(NativeTag('Artist', "B"), tags)
        self.assertIn(NativeTag('Cover Art (Front)', "<12 bytes>"), tags)
        self.assertIn(NativeTag('Website', "https://band.example"), tags)


class TestVorbis(unittest.TestCase):

    def setUp(self):
        self.tags = VCommentDict()
        self.tags['title'] = ['Song B']
        self.tags['tracknumber'] = ['4']
        self.tags['tracktotal'] = ['10']
        self.tags['artist'] = ['X', 'Y']

    def test_totals_from_separate_field(self):
        common = read_common(SimpleNamespace(tags=self.tags))
        self.assertEqual(common['track'], {'no': 4, 'of': 10})
        self.assertEqual(common['artist'], ['X', 'Y'])

    def test_native_keeps_pairs(self):
        native = read_native(SimpleNamespace(tags=self.tags))
        self.assertEqual(native['vorbis'][0], NativeTag('title', 'Song B'))
        self.assertEqual(len(native['vorbis']), 5)


class TestReadFormat(unittest.TestCase):

    def test_lossless_container(self):
        info = SimpleNamespace(channels=2, bits_per_sample=24, sample_rate=96000,
                               bitrate=0, length=12.5)
        fmt = read_format(FLAC(info), [])
        self.assertEqual(fmt, {
            'container': 'FLAC',
            'codec': 'FLAC',
            'lossless': True,
            'number_of_channels': 2,
            'bits_per_sample': 24,
            'sample_rate': 96000,
            'duration': 12.5,
        })

    def test_lossy_keeps_false_flag(self):
        info = SimpleNamespace(channels=2, sample_rate=44100, bitrate=192000, length=3.0)
        tags = VCommentDict()
        fmt = read_format(OggVorbis(info, tags), ['vorbis'])
        self.assertIs(fmt['lossless'], False)
        self.assertEqual(fmt['codec'], 'Vorbis I')
        self.assertEqual(fmt['tag_types'], ['vorbis'])
        self.assertTrue(fmt['tool'].startswith('Mutagen'))


class TestReadMetadata(unittest.TestCase):

    def test_not_audio(self):
        with self.assertRaises(DecodeError):
            read_metadata(io.BytesIO(b"definitely not audio" * 10), "junk.bin")


if __name__ == '__main__':
    unittest.main()
