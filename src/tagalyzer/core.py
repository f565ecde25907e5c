"""
Metadata decoding - turns an audio stream into a Metadata object.
Handles MP3(ID3), M4A(MP4), FLAC/Vorbis, WAV (ID3), WMA(ASF), APEv2, etc.

The decoder reports three views of a file:
    format - stream parameters (codec, sample rate, duration, ...)
    common - generic tag fields mapped from the format-specific tags
    native - the format-specific tags, untouched, grouped by tag family
"""

import mutagen
import mutagen.id3 as id3
import mutagen.mp4 as mp4
import mutagen.asf as asf
import mutagen.apev2 as apev2
import mutagen.flac as flac
from mutagen._vorbis import VCommentDict
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

# Audio formats picked up when scanning directories
SUPPORTED_EXT = {
    '.mp3', '.mp2', '.flac', '.m4a', '.m4b', '.mp4', '.aac', '.ogg', '.oga',
    '.opus', '.spx', '.wav', '.aif', '.aiff', '.wma', '.asf', '.ape', '.wv',
    '.mpc', '.tta', '.dsf', '.ofr',
}

class TagalyzerError(Exception):
    """Base exception for tagalyzer errors."""
    pass

class DecodeError(TagalyzerError):
    """Raised when a stream is in an unsupported format or corrupted."""
    pass

class TransformError(TagalyzerError):
    """Raised when a label renderer or link generator fails on a value."""

    def __init__(self, key: str, value: Any, cause: Exception):
        super().__init__(f"Cannot render value {value!r} of tag '{key}': {cause}")
        self.key = key
        self.value = value
        self.cause = cause

class SourceError(TagalyzerError):
    """Raised when a file or URL cannot be opened as a byte stream."""
    pass


@dataclass
class NativeTag:
    id: str
    value: str


@dataclass
class Metadata:
    """Decoder output for one audio file."""
    format: Dict[str, Any] = field(default_factory=dict)
    common: Dict[str, Any] = field(default_factory=dict)
    native: Dict[str, List[NativeTag]] = field(default_factory=dict)


# ---------- Common tag mappings ----------
# Maps each generic ("common") key to the native key of every tag family.
# Different formats use different names for the same concept
# (e.g. "artist" is "TPE1" in ID3, "\xa9ART" in MP4, "Author" in WMA).
# ID3 entries name frame IDs; "TXXX:" and "UFID:" prefixes name a frame by
# its description/owner. Vorbis entries are lowercase comment names.
ID3_MAP = {
    'title': 'TIT2',
    'subtitle': 'TIT3',
    'artist': 'TPE1',
    'artists': 'TXXX:ARTISTS',
    'albumartist': 'TPE2',
    'album': 'TALB',
    'discsubtitle': 'TSST',
    'track': 'TRCK',
    'disk': 'TPOS',
    'date': 'TDRC',
    'originaldate': 'TDOR',
    'genre': 'TCON',
    'composer': 'TCOM',
    'lyricist': 'TEXT',
    'conductor': 'TPE3',
    'remixer': 'TPE4',
    'grouping': 'TIT1',
    'comment': 'COMM',
    'lyrics': 'USLT',
    'bpm': 'TBPM',
    'mood': 'TMOO',
    'rating': 'POPM',
    'compilation': 'TCMP',
    'label': 'TPUB',
    'catalognumber': 'TXXX:CATALOGNUMBER',
    'barcode': 'TXXX:BARCODE',
    'isrc': 'TSRC',
    'media': 'TMED',
    'releasecountry': 'TXXX:MusicBrainz Album Release Country',
    'releasestatus': 'TXXX:MusicBrainz Album Status',
    'releasetype': 'TXXX:MusicBrainz Album Type',
    'copyright': 'TCOP',
    'encodedby': 'TENC',
    'website': 'WOAR',
    'asin': 'TXXX:ASIN',
    'musicbrainz_recordingid': 'UFID:http://musicbrainz.org',
    'musicbrainz_trackid': 'TXXX:MusicBrainz Release Track Id',
    'musicbrainz_albumid': 'TXXX:MusicBrainz Album Id',
    'musicbrainz_artistid': 'TXXX:MusicBrainz Artist Id',
    'musicbrainz_albumartistid': 'TXXX:MusicBrainz Album Artist Id',
    'musicbrainz_releasegroupid': 'TXXX:MusicBrainz Release Group Id',
    'musicbrainz_workid': 'TXXX:MusicBrainz Work Id',
    'acoustid_id': 'TXXX:Acoustid Id',
    'replaygain_track_gain': 'TXXX:REPLAYGAIN_TRACK_GAIN',
    'replaygain_track_peak': 'TXXX:REPLAYGAIN_TRACK_PEAK',
    'replaygain_album_gain': 'TXXX:REPLAYGAIN_ALBUM_GAIN',
    'replaygain_album_peak': 'TXXX:REPLAYGAIN_ALBUM_PEAK',
}

VORBIS_MAP = {
    'title': 'title',
    'subtitle': 'subtitle',
    'artist': 'artist',
    'artists': 'artists',
    'albumartist': 'albumartist',
    'album': 'album',
    'discsubtitle': 'discsubtitle',
    'track': 'tracknumber',
    'disk': 'discnumber',
    'date': 'date',
    'originaldate': 'originaldate',
    'genre': 'genre',
    'composer': 'composer',
    'lyricist': 'lyricist',
    'conductor': 'conductor',
    'performer': 'performer',
    'remixer': 'remixer',
    'producer': 'producer',
    'grouping': 'grouping',
    'comment': 'comment',
    'lyrics': 'lyrics',
    'bpm': 'bpm',
    'mood': 'mood',
    'compilation': 'compilation',
    'label': 'label',
    'catalognumber': 'catalognumber',
    'barcode': 'barcode',
    'isrc': 'isrc',
    'media': 'media',
    'releasecountry': 'releasecountry',
    'releasestatus': 'releasestatus',
    'releasetype': 'releasetype',
    'copyright': 'copyright',
    'encodedby': 'encodedby',
    'website': 'website',
    'asin': 'asin',
    'musicbrainz_recordingid': 'musicbrainz_trackid',
    'musicbrainz_trackid': 'musicbrainz_releasetrackid',
    'musicbrainz_albumid': 'musicbrainz_albumid',
    'musicbrainz_artistid': 'musicbrainz_artistid',
    'musicbrainz_albumartistid': 'musicbrainz_albumartistid',
    'musicbrainz_releasegroupid': 'musicbrainz_releasegroupid',
    'musicbrainz_workid': 'musicbrainz_workid',
    'acoustid_id': 'acoustid_id',
    'replaygain_track_gain': 'replaygain_track_gain',
    'replaygain_track_peak': 'replaygain_track_peak',
    'replaygain_album_gain': 'replaygain_album_gain',
    'replaygain_album_peak': 'replaygain_album_peak',
}

# MP4 uses special "atom" keys; the \xa9 prefix is the Apple copyright sign
MP4_MAP = {
    'title': '\xa9nam',
    'artist': '\xa9ART',
    'artists': '----:com.apple.iTunes:ARTISTS',
    'albumartist': 'aART',
    'album': '\xa9alb',
    'track': 'trkn',
    'disk': 'disk',
    'date': '\xa9day',
    'genre': '\xa9gen',
    'composer': '\xa9wrt',
    'lyricist': '----:com.apple.iTunes:LYRICIST',
    'conductor': '----:com.apple.iTunes:CONDUCTOR',
    'performer': '----:com.apple.iTunes:PERFORMER',
    'grouping': '\xa9grp',
    'comment': '\xa9cmt',
    'lyrics': '\xa9lyr',
    'bpm': 'tmpo',
    'mood': '----:com.apple.iTunes:MOOD',
    'compilation': 'cpil',
    'label': '----:com.apple.iTunes:LABEL',
    'catalognumber': '----:com.apple.iTunes:CATALOGNUMBER',
    'barcode': '----:com.apple.iTunes:BARCODE',
    'isrc': '----:com.apple.iTunes:ISRC',
    'media': '----:com.apple.iTunes:MEDIA',
    'copyright': 'cprt',
    'encodedby': '\xa9too',
    'asin': '----:com.apple.iTunes:ASIN',
    'musicbrainz_recordingid': '----:com.apple.iTunes:MusicBrainz Track Id',
    'musicbrainz_trackid': '----:com.apple.iTunes:MusicBrainz Release Track Id',
    'musicbrainz_albumid': '----:com.apple.iTunes:MusicBrainz Album Id',
    'musicbrainz_artistid': '----:com.apple.iTunes:MusicBrainz Artist Id',
    'musicbrainz_albumartistid': '----:com.apple.iTunes:MusicBrainz Album Artist Id',
    'musicbrainz_releasegroupid': '----:com.apple.iTunes:MusicBrainz Release Group Id',
    'musicbrainz_workid': '----:com.apple.iTunes:MusicBrainz Work Id',
    'acoustid_id': '----:com.apple.iTunes:Acoustid Id',
    'replaygain_track_gain': '----:com.apple.iTunes:replaygain_track_gain',
    'replaygain_track_peak': '----:com.apple.iTunes:replaygain_track_peak',
    'replaygain_album_gain': '----:com.apple.iTunes:replaygain_album_gain',
    'replaygain_album_peak': '----:com.apple.iTunes:replaygain_album_peak',
}

ASF_MAP = {
    'title': 'Title',
    'artist': 'Author',
    'albumartist': 'WM/AlbumArtist',
    'album': 'WM/AlbumTitle',
    'track': 'WM/TrackNumber',
    'disk': 'WM/PartOfSet',
    'date': 'WM/Year',
    'genre': 'WM/Genre',
    'composer': 'WM/Composer',
    'lyricist': 'WM/Writer',
    'conductor': 'WM/Conductor',
    'remixer': 'WM/ModifiedBy',
    'producer': 'WM/Producer',
    'grouping': 'WM/ContentGroupDescription',
    'comment': 'Description',
    'lyrics': 'WM/Lyrics',
    'bpm': 'WM/BeatsPerMinute',
    'mood': 'WM/Mood',
    'label': 'WM/Publisher',
    'catalognumber': 'WM/CatalogNo',
    'barcode': 'WM/Barcode',
    'isrc': 'WM/ISRC',
    'media': 'WM/Media',
    'copyright': 'Copyright',
    'encodedby': 'WM/EncodedBy',
    'musicbrainz_recordingid': 'MusicBrainz/Track Id',
    'musicbrainz_albumid': 'MusicBrainz/Album Id',
    'musicbrainz_artistid': 'MusicBrainz/Artist Id',
    'musicbrainz_albumartistid': 'MusicBrainz/Album Artist Id',
    'musicbrainz_releasegroupid': 'MusicBrainz/Release Group Id',
    'musicbrainz_workid': 'MusicBrainz/Work Id',
    'acoustid_id': 'Acoustid/Id',
    'replaygain_track_gain': 'replaygain_track_gain',
    'replaygain_track_peak': 'replaygain_track_peak',
    'replaygain_album_gain': 'replaygain_album_gain',
    'replaygain_album_peak': 'replaygain_album_peak',
}

# APEv2 item keys are case-insensitive in mutagen
APE_MAP = {
    'title': 'Title',
    'subtitle': 'Subtitle',
    'artist': 'Artist',
    'artists': 'Artists',
    'albumartist': 'Album Artist',
    'album': 'Album',
    'track': 'Track',
    'disk': 'Disc',
    'date': 'Year',
    'genre': 'Genre',
    'composer': 'Composer',
    'lyricist': 'Lyricist',
    'conductor': 'Conductor',
    'performer': 'Performer',
    'comment': 'Comment',
    'lyrics': 'Lyrics',
    'bpm': 'BPM',
    'label': 'Label',
    'catalognumber': 'CatalogNumber',
    'barcode': 'Barcode',
    'isrc': 'ISRC',
    'media': 'Media',
    'copyright': 'Copyright',
    'musicbrainz_recordingid': 'MUSICBRAINZ_TRACKID',
    'musicbrainz_albumid': 'MUSICBRAINZ_ALBUMID',
    'musicbrainz_artistid': 'MUSICBRAINZ_ARTISTID',
    'musicbrainz_albumartistid': 'MUSICBRAINZ_ALBUMARTISTID',
    'musicbrainz_releasegroupid': 'MUSICBRAINZ_RELEASEGROUPID',
    'musicbrainz_workid': 'MUSICBRAINZ_WORKID',
    'acoustid_id': 'ACOUSTID_ID',
    'replaygain_track_gain': 'REPLAYGAIN_TRACK_GAIN',
    'replaygain_track_peak': 'REPLAYGAIN_TRACK_PEAK',
    'replaygain_album_gain': 'REPLAYGAIN_ALBUM_GAIN',
    'replaygain_album_peak': 'REPLAYGAIN_ALBUM_PEAK',
}

# Common keys whose values are "N/Total" positions
POSITION_KEYS = {'track', 'disk'}
# Common keys reported as a single boolean
BOOLEAN_KEYS = {'compilation'}
# Common keys reported as a single number
NUMERIC_KEYS = {'bpm', 'rating'}

# Containers that only ever carry lossless audio
LOSSLESS_CONTAINERS = {'FLAC', 'WAVE', 'AIFF', 'WavPack', "Monkey's Audio",
                       'TrueAudio', 'DSF', 'OptimFROG'}

# mutagen class name -> (container, codec)
CONTAINERS = {
    'MP3': ('MPEG', None),
    'EasyMP3': ('MPEG', None),
    'FLAC': ('FLAC', 'FLAC'),
    'OggVorbis': ('Ogg', 'Vorbis I'),
    'OggOpus': ('Ogg', 'Opus'),
    'OggFLAC': ('Ogg', 'FLAC'),
    'OggSpeex': ('Ogg', 'Speex'),
    'OggTheora': ('Ogg', 'Theora'),
    'MP4': ('MPEG-4', None),
    'EasyMP4': ('MPEG-4', None),
    'WAVE': ('WAVE', 'PCM'),
    'AIFF': ('AIFF', 'PCM'),
    'ASF': ('ASF', None),
    'WavPack': ('WavPack', 'WavPack'),
    'MonkeysAudio': ("Monkey's Audio", "Monkey's Audio"),
    'Musepack': ('Musepack', 'Musepack'),
    'TrueAudio': ('TrueAudio', 'TrueAudio'),
    'OptimFROG': ('OptimFROG', 'OptimFROG'),
    'DSF': ('DSF', 'DSD'),
    'AAC': ('ADTS', 'AAC'),
    'AC3': ('AC-3', 'AC-3'),
}


# ---------- Value helpers ----------
def safe_int(x: Any) -> Optional[int]:
    """
    Safely convert value to integer, returning None on failure.

    Examples:
        >>> safe_int('42')
        42
        >>> safe_int('not a number') is None
        True
    """
    try:
        return int(str(x).strip())
    except (ValueError, TypeError):
        return None

def parse_position(value: Any) -> Dict[str, Optional[int]]:
    """
    Parse a track/disc position into {'no': N, 'of': M}.
    Accepts "N/M" strings (ID3, Vorbis, APE) and (N, M) tuples (MP4).
    Zero totals are treated as absent.
    """
    if isinstance(value, tuple):
        no, of = (tuple(value) + (None, None))[:2]
    else:
        no, _, of = str(value).partition('/')
    return {'no': safe_int(no) or None, 'of': safe_int(of) or None}

def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes')

def native_text(value: Any) -> str:
    """Render one raw tag value as text, summarizing binary payloads."""
    if isinstance(value, mp4.MP4Cover):
        kind = 'image/png' if value.imageformat == mp4.MP4Cover.FORMAT_PNG else 'image/jpeg'
        return f"<{kind}, {len(value)} bytes>"
    if isinstance(value, mp4.MP4FreeForm):
        try:
            return bytes(value).decode('utf-8')
        except UnicodeDecodeError:
            return f"<{len(value)} bytes>"
    if isinstance(value, bytes):
        try:
            return value.decode('utf-8')
        except UnicodeDecodeError:
            return f"<{len(value)} bytes>"
    if isinstance(value, tuple):
        return '/'.join(str(x) for x in value)
    if isinstance(value, asf.ASFBaseAttribute):
        return native_text(value.value)
    return str(value)


# ---------- Native tags ----------
def _id3_frame_values(frame: Any) -> List[str]:
    """Extract display values from an ID3 frame."""
    if isinstance(frame, id3.APIC):
        return [f"<{frame.mime or 'image'}, {len(frame.data)} bytes>"]
    if isinstance(frame, id3.POPM):
        return [f"{frame.email}: {frame.rating}"]
    if isinstance(frame, id3.UFID):
        return [native_text(frame.data)]
    if isinstance(frame, id3.USLT):
        return [str(frame.text)]
    if hasattr(frame, 'text'):
        return [str(x) for x in frame.text]
    if hasattr(frame, 'url'):
        return [str(frame.url)]
    if hasattr(frame, 'data'):
        return [f"<{len(frame.data)} bytes>"]
    return [str(frame)]

def _id3_native(tags: id3.ID3) -> List[NativeTag]:
    out = []
    for frame in tags.values():
        frame_id = frame.FrameID
        # User-defined frames are told apart by their description
        if isinstance(frame, (id3.TXXX, id3.WXXX)):
            frame_id = f"{frame_id}:{frame.desc}"
        elif isinstance(frame, id3.UFID):
            frame_id = f"{frame_id}:{frame.owner}"
        for v in _id3_frame_values(frame):
            out.append(NativeTag(frame_id, v))
    return out

def _mapping_native(tags: Any) -> List[NativeTag]:
    """Native tags for dict-like tag containers (MP4, ASF, APEv2)."""
    out = []
    for key, vals in tags.items():
        val_list = vals if isinstance(vals, list) else [vals]
        for v in val_list:
            if isinstance(v, apev2.APEBinaryValue):
                out.append(NativeTag(str(key), f"<{len(v.value)} bytes>"))
            elif isinstance(v, apev2.APETextValue):
                # APE text items hold several values separated by NUL
                for part in v:
                    out.append(NativeTag(str(key), str(part)))
            elif isinstance(v, apev2.APEExtValue):
                out.append(NativeTag(str(key), str(v.value)))
            else:
                out.append(NativeTag(str(key), native_text(v)))
    return out

def _vorbis_native(tags: VCommentDict) -> List[NativeTag]:
    # Vorbis comments are a list of (key, value) pairs in file order
    return [NativeTag(k, v) for k, v in tags]

def tag_family(mfile: Any) -> Optional[str]:
    """Name the tag family (native namespace) carried by a mutagen file."""
    tags = mfile.tags
    if tags is None:
        return None
    if isinstance(tags, id3.ID3):
        # ID3v1-only files are loaded with version (1, 1)
        if tags.version[0] == 1:
            return 'ID3v1'
        return f"ID3v2.{tags.version[1]}"
    if isinstance(tags, VCommentDict):
        return 'vorbis'
    if isinstance(tags, mp4.MP4Tags):
        return 'iTunes'
    if isinstance(tags, asf.ASFTags):
        return 'asf'
    if isinstance(tags, apev2.APEv2):
        return 'APEv2'
    return type(tags).__name__

def read_native(mfile: Any) -> Dict[str, List[NativeTag]]:
    """Dump the proprietary tags of a mutagen file, grouped by tag family."""
    family = tag_family(mfile)
    if family is None:
        return {}
    tags = mfile.tags
    if isinstance(tags, id3.ID3):
        return {family: _id3_native(tags)}
    if isinstance(tags, VCommentDict):
        return {family: _vorbis_native(tags)}
    return {family: _mapping_native(tags)}


# ---------- Common tags ----------
def _id3_get(tags: id3.ID3, native_key: str) -> List[Any]:
    """Fetch values of a frame addressed as 'TIT2', 'TXXX:desc' or 'UFID:owner'."""
    frame_id, _, desc = native_key.partition(':')
    if frame_id == 'TXXX':
        frames = [f for f in tags.getall('TXXX') if f.desc.lower() == desc.lower()]
    elif frame_id == 'UFID':
        frames = [f for f in tags.getall('UFID') if f.owner == desc]
    elif frame_id == 'COMM':
        # iTunes keeps its normalization and gapless data in COMM frames
        frames = [f for f in tags.getall('COMM') if not f.desc.startswith('iTun')]
    else:
        frames = tags.getall(frame_id)

    vals = []
    for frame in frames:
        if isinstance(frame, id3.UFID):
            vals.append(native_text(frame.data))
        elif isinstance(frame, id3.POPM):
            # POPM ratings run from 0 to 255
            vals.append(frame.rating / 255)
        elif isinstance(frame, id3.USLT):
            vals.append(str(frame.text))
        elif frame_id == 'TCON':
            vals.extend(frame.genres)
        elif hasattr(frame, 'text'):
            vals.extend(str(x) for x in frame.text)
        elif hasattr(frame, 'url'):
            vals.append(str(frame.url))
    return vals

def _mapping_get(tags: Any, native_key: str) -> List[Any]:
    """Fetch values from a dict-like tag container (Vorbis, MP4, ASF, APEv2)."""
    vals = tags.get(native_key)
    if vals is None:
        return []
    if isinstance(vals, apev2.APETextValue):
        return list(vals)
    if not isinstance(vals, list):
        vals = [vals]
    out = []
    for v in vals:
        if isinstance(v, tuple):
            out.append(v)
        elif isinstance(v, (bool, int, float)):
            out.append(v)
        else:
            out.append(native_text(v))
    return out

def _common_map(tags: Any) -> Tuple[Dict[str, str], Any]:
    """Pick the key table and value getter for a tag container."""
    if isinstance(tags, id3.ID3):
        return ID3_MAP, _id3_get
    if isinstance(tags, mp4.MP4Tags):
        return MP4_MAP, _mapping_get
    if isinstance(tags, asf.ASFTags):
        return ASF_MAP, _mapping_get
    if isinstance(tags, apev2.APEv2):
        return APE_MAP, _mapping_get
    return VORBIS_MAP, _mapping_get

def read_common(mfile: Any) -> Dict[str, Any]:
    """
    Map the format-specific tags of a mutagen file to generic keys.

    Multi-valued fields are returned as lists; position fields (track, disk)
    as {'no': N, 'of': M}; booleans and numbers as single values. Fields
    without values are left out.
    """
    tags = mfile.tags
    if tags is None:
        return {}

    key_map, getter = _common_map(tags)
    common = {}
    for key, native_key in key_map.items():
        try:
            vals = getter(tags, native_key)
        except (KeyError, ValueError) as e:
            logger.debug(f"Failed to read {native_key} for {key}: {e}")
            continue
        vals = [v for v in vals if v is not None and v != '']
        if not vals:
            continue

        if key in POSITION_KEYS:
            common[key] = parse_position(vals[0])
        elif key in BOOLEAN_KEYS:
            common[key] = parse_bool(vals[0])
        elif key in NUMERIC_KEYS:
            num = vals[0] if isinstance(vals[0], (int, float)) else safe_int(vals[0])
            if num is not None:
                common[key] = num
        else:
            common[key] = [str(v) for v in vals]

    # Vorbis/FLAC files often keep totals in their own fields
    if isinstance(tags, VCommentDict):
        for key, total_keys in (('track', ('tracktotal', 'totaltracks')),
                                ('disk', ('disctotal', 'totaldiscs'))):
            for total_key in total_keys:
                total = safe_int(tags[total_key][0]) if total_key in tags else None
                if total:
                    common.setdefault(key, {'no': None, 'of': None})['of'] = total
                    break

    # Derive the year from the first date that starts with one
    for date in common.get('date', []):
        year = safe_int(str(date)[:4])
        if year:
            common['year'] = year
            break

    return common


# ---------- Format ----------
def _mp3_codec(info: Any) -> Tuple[str, Optional[str]]:
    version = info.version
    version = int(version) if version == int(version) else version
    codec = f"MPEG {version} Layer {info.layer}"
    mode = getattr(info, 'bitrate_mode', None)
    profile = getattr(mode, 'name', None)
    if profile == 'UNKNOWN':
        profile = None
    return codec, profile

def read_format(mfile: Any, tag_types: List[str]) -> Dict[str, Any]:
    """Describe the audio stream of a mutagen file. Unknown fields are left out."""
    info = mfile.info
    kind = type(mfile).__name__
    container, codec = CONTAINERS.get(kind, (kind, None))
    codec_profile = None
    tool = None

    if kind in ('MP3', 'EasyMP3'):
        codec, codec_profile = _mp3_codec(info)
        tool = getattr(info, 'encoder_info', None) or None
    elif kind in ('MP4', 'EasyMP4'):
        codec = getattr(info, 'codec_description', None) or getattr(info, 'codec', None)
    elif kind == 'ASF':
        codec = getattr(info, 'codec_name', None) or None
        codec_profile = getattr(info, 'codec_description', None) or None

    if isinstance(mfile.tags, VCommentDict):
        tool = mfile.tags.vendor or None

    lossless = container in LOSSLESS_CONTAINERS or (
        container == 'MPEG-4' and getattr(info, 'codec', '') == 'alac')

    fmt = {
        'container': container,
        'codec': codec,
        'codec_profile': codec_profile,
        'tool': tool,
        'lossless': lossless,
        'number_of_channels': getattr(info, 'channels', None),
        'bits_per_sample': getattr(info, 'bits_per_sample', None),
        'sample_rate': getattr(info, 'sample_rate', None),
        'bitrate': getattr(info, 'bitrate', None),
        'duration': getattr(info, 'length', None),
        'tag_types': list(tag_types),
    }
    # Leave out what the stream doesn't report; a numeric zero means unknown in mutagen
    return {k: v for k, v in fmt.items() if not _unknown(v)}

def _unknown(value: Any) -> bool:
    if value is None or value == '' or value == []:
        return True
    return type(value) in (int, float) and value == 0


# ---------- Decoding ----------
def read_metadata(fileobj: BinaryIO, name: Optional[str] = None) -> Metadata:
    """
    Decode the metadata of an audio stream.

    Args:
        fileobj: Seekable binary stream
        name: File name hint; the extension helps format detection

    Raises:
        DecodeError: If the stream is not a supported audio format or is corrupted
    """
    if name and not getattr(fileobj, 'name', None):
        try:
            fileobj.name = name
        except AttributeError:
            pass

    try:
        mfile = mutagen.File(fileobj, easy=False)
    except mutagen.MutagenError as e:
        raise DecodeError(f"Unsupported file format or corrupted file: {e}") from e
    if mfile is None:
        raise DecodeError("Unsupported file format or corrupted file")

    native = read_native(mfile)
    return Metadata(
        format=read_format(mfile, list(native.keys())),
        common=read_common(mfile),
        native=native,
    )

def decode(source: Any) -> Metadata:
    """
    Default decoder: open a FileRef/UrlRef and decode its metadata with mutagen.

    Raises:
        SourceError: If the source cannot be opened or fetched
        DecodeError: If the content cannot be decoded
    """
    from .sources import open_source

    with open_source(source) as stream:
        return read_metadata(stream, source.name)
