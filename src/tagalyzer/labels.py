"""
Label registries: human-facing labels, reference links and value renderers
for the generic ("common") tags and the format descriptor fields.

Each registry is an ordered tuple of LabelSpec entries. The declaration order
is the display order of the normalized output.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Tuple

PICARD_DOCS = 'https://picard-docs.musicbrainz.org/en/appendices/tag_mapping.html'
MUSICBRAINZ = 'https://musicbrainz.org'
WIKIPEDIA = 'https://en.wikipedia.org/wiki'

CHANNEL_NAMES = {1: 'mono', 2: 'stereo', 6: '5.1', 8: '7.1'}


@dataclass(frozen=True)
class LabelSpec:
    """
    One registry entry.

    key:       internal tag key, unique within its registry
    label:     text shown for the key
    key_ref:   optional link explaining the key
    to_text:   optional renderer for one raw value; without it the value is
               taken as display-ready text
    value_ref: optional link generator for one raw value
    """
    key: str
    label: str
    key_ref: Optional[str] = None
    to_text: Optional[Callable[[Any], str]] = None
    value_ref: Optional[Callable[[Any], Optional[str]]] = None


# ---------- Value renderers ----------
def format_duration(seconds: float) -> str:
    """
    Render a duration in seconds as m:ss.s, or h:mm:ss for an hour or more.

    Examples:
        >>> format_duration(215.4)
        '3:35.4'
        >>> format_duration(3723)
        '1:02:03'
    """
    seconds = float(seconds)
    if seconds >= 3600:
        total = int(round(seconds))
        return f"{total // 3600}:{(total % 3600) // 60:02d}:{total % 60:02d}"
    tenths = int(round(seconds * 10))
    return f"{tenths // 600}:{(tenths % 600) / 10:04.1f}"

def format_bitrate(bps: float) -> str:
    """Render a bitrate in bits per second as kbps."""
    return f"{round(float(bps) / 1000)} kbps"

def format_sample_rate(hz: float) -> str:
    return f"{int(hz)} Hz"

def format_bits(bits: int) -> str:
    return f"{int(bits)} bits"

def format_channels(channels: int) -> str:
    """Render a channel count, naming the common layouts."""
    name = CHANNEL_NAMES.get(int(channels))
    return f"{channels} ({name})" if name else str(channels)

def format_bool(value: bool) -> str:
    return 'yes' if value else 'no'

def format_position(pos: Any) -> str:
    """
    Render a track/disc position {'no': 3, 'of': 12} as '3 of 12'.
    Either half may be missing.
    """
    no = pos.get('no')
    of = pos.get('of')
    if no is None and of is None:
        return ''
    if of is None:
        return str(no)
    if no is None:
        return f"? of {of}"
    return f"{no} of {of}"

def format_rating(rating: Any) -> str:
    """Render a rating in the 0..1 range as a percentage."""
    return f"{round(float(rating) * 100)}%"


# ---------- Link generators ----------
def musicbrainz_ref(entity: str) -> Callable[[Any], str]:
    """Build a link generator for one MusicBrainz entity type."""
    def ref(mbid: Any) -> str:
        return f"{MUSICBRAINZ}/{entity}/{mbid}"
    ref.__name__ = f"musicbrainz_ref({entity})"
    return ref

def acoustid_ref(acoustid: Any) -> str:
    return f"https://acoustid.org/track/{acoustid}"

def asin_ref(asin: Any) -> str:
    return f"https://www.amazon.com/dp/{asin}"

def url_ref(value: Any) -> Optional[str]:
    """Link a value to itself when it already is a web URL."""
    text = str(value)
    if text.startswith(('http://', 'https://')):
        return text
    return None


def picard(anchor: str) -> str:
    return f"{PICARD_DOCS}#{anchor}"

def wiki(article: str) -> str:
    return f"{WIKIPEDIA}/{article}"


# ---------- Registries ----------
COMMON_LABELS: Tuple[LabelSpec, ...] = (
    LabelSpec('title', 'Track title', key_ref=picard('title')),
    LabelSpec('subtitle', 'Subtitle', key_ref=picard('subtitle')),
    LabelSpec('artist', 'Artist', key_ref=picard('artist')),
    LabelSpec('artists', 'Artists', key_ref=picard('artists')),
    LabelSpec('albumartist', 'Album artist', key_ref=picard('album-artist')),
    LabelSpec('album', 'Album', key_ref=picard('album')),
    LabelSpec('discsubtitle', 'Disc subtitle', key_ref=picard('disc-subtitle')),
    LabelSpec('track', 'Track', key_ref=picard('track-number'), to_text=format_position),
    LabelSpec('disk', 'Disk', key_ref=picard('disc-number'), to_text=format_position),
    LabelSpec('year', 'Year', to_text=str),
    LabelSpec('date', 'Date', key_ref=picard('release-date')),
    LabelSpec('originaldate', 'Original release date', key_ref=picard('original-release-date')),
    LabelSpec('genre', 'Genre', key_ref=picard('genre')),
    LabelSpec('composer', 'Composer', key_ref=picard('composer')),
    LabelSpec('lyricist', 'Lyricist', key_ref=picard('lyricist')),
    LabelSpec('conductor', 'Conductor', key_ref=picard('conductor')),
    LabelSpec('performer', 'Performer', key_ref=picard('performer')),
    LabelSpec('remixer', 'Remixer', key_ref=picard('remixer')),
    LabelSpec('producer', 'Producer', key_ref=picard('producer')),
    LabelSpec('grouping', 'Grouping', key_ref=picard('grouping')),
    LabelSpec('comment', 'Comment', key_ref=picard('comment')),
    LabelSpec('lyrics', 'Lyrics', key_ref=picard('lyrics')),
    LabelSpec('bpm', 'BPM', key_ref=picard('bpm'), to_text=str),
    LabelSpec('mood', 'Mood', key_ref=picard('mood')),
    LabelSpec('rating', 'Rating', to_text=format_rating),
    LabelSpec('compilation', 'Compilation', key_ref=picard('compilation-itunes'), to_text=format_bool),
    LabelSpec('label', 'Record label', key_ref=picard('record-label')),
    LabelSpec('catalognumber', 'Catalog number', key_ref=picard('catalog-number')),
    LabelSpec('barcode', 'Barcode', key_ref=picard('barcode')),
    LabelSpec('isrc', 'ISRC', key_ref=wiki('International_Standard_Recording_Code')),
    LabelSpec('media', 'Media', key_ref=picard('media')),
    LabelSpec('releasecountry', 'Release country', key_ref=picard('release-country')),
    LabelSpec('releasestatus', 'Release status', key_ref=picard('release-status')),
    LabelSpec('releasetype', 'Release type', key_ref=picard('release-type')),
    LabelSpec('copyright', 'Copyright', key_ref=picard('copyright')),
    LabelSpec('encodedby', 'Encoded by', key_ref=picard('encoded-by')),
    LabelSpec('website', 'Website', key_ref=picard('artist-website'), value_ref=url_ref),
    LabelSpec('asin', 'Amazon ASIN', key_ref=picard('asin'), value_ref=asin_ref),
    LabelSpec('musicbrainz_recordingid', 'MusicBrainz recording ID',
              key_ref=picard('musicbrainz-recording-id'), value_ref=musicbrainz_ref('recording')),
    LabelSpec('musicbrainz_trackid', 'MusicBrainz track ID',
              key_ref=picard('musicbrainz-track-id'), value_ref=musicbrainz_ref('track')),
    LabelSpec('musicbrainz_albumid', 'MusicBrainz release ID',
              key_ref=picard('musicbrainz-release-id'), value_ref=musicbrainz_ref('release')),
    LabelSpec('musicbrainz_artistid', 'MusicBrainz artist ID',
              key_ref=picard('musicbrainz-artist-id'), value_ref=musicbrainz_ref('artist')),
    LabelSpec('musicbrainz_albumartistid', 'MusicBrainz release artist ID',
              key_ref=picard('musicbrainz-release-artist-id'), value_ref=musicbrainz_ref('artist')),
    LabelSpec('musicbrainz_releasegroupid', 'MusicBrainz release group ID',
              key_ref=picard('musicbrainz-release-group-id'), value_ref=musicbrainz_ref('release-group')),
    LabelSpec('musicbrainz_workid', 'MusicBrainz work ID',
              key_ref=picard('musicbrainz-work-id'), value_ref=musicbrainz_ref('work')),
    LabelSpec('acoustid_id', 'AcoustID', key_ref=picard('acoustid-id'), value_ref=acoustid_ref),
    LabelSpec('replaygain_track_gain', 'ReplayGain track gain', key_ref=wiki('ReplayGain')),
    LabelSpec('replaygain_track_peak', 'ReplayGain track peak', key_ref=wiki('ReplayGain')),
    LabelSpec('replaygain_album_gain', 'ReplayGain album gain', key_ref=wiki('ReplayGain')),
    LabelSpec('replaygain_album_peak', 'ReplayGain album peak', key_ref=wiki('ReplayGain')),
)

FORMAT_LABELS: Tuple[LabelSpec, ...] = (
    LabelSpec('container', 'Container', key_ref=wiki('Digital_container_format')),
    LabelSpec('codec', 'Codec', key_ref=wiki('Audio_codec')),
    LabelSpec('codec_profile', 'Codec profile'),
    LabelSpec('tool', 'Encoder'),
    LabelSpec('lossless', 'Lossless', key_ref=wiki('Lossless_compression'), to_text=format_bool),
    LabelSpec('number_of_channels', 'Channels', key_ref=wiki('Audio_signal'), to_text=format_channels),
    LabelSpec('bits_per_sample', 'Bit depth', key_ref=wiki('Audio_bit_depth'), to_text=format_bits),
    LabelSpec('sample_rate', 'Sample rate', key_ref=wiki('Sampling_(signal_processing)#Sampling_rate'),
              to_text=format_sample_rate),
    LabelSpec('bitrate', 'Bit rate', key_ref=wiki('Bit_rate'), to_text=format_bitrate),
    LabelSpec('duration', 'Duration', to_text=format_duration),
    LabelSpec('tag_types', 'Tag types'),
)


def check_registry(registry: Iterable[LabelSpec]) -> None:
    """Raise ValueError if a key is declared more than once."""
    seen = set()
    for spec in registry:
        if spec.key in seen:
            raise ValueError(f"Duplicate label key: {spec.key!r}")
        seen.add(spec.key)


check_registry(COMMON_LABELS)
check_registry(FORMAT_LABELS)
