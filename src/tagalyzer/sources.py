"""
Source adapters: turn a local file or a URL into a seekable byte stream
for the decoder.
"""

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Generator, Optional, Union

import requests

from .core import SourceError
from .utils import Config, safe_unicode_path

logger = logging.getLogger(__name__)


@dataclass
class FileRef:
    """A local audio file."""
    path: Path
    name: str
    size: Optional[int] = None

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'FileRef':
        path = Path(safe_unicode_path(path))
        try:
            size = path.stat().st_size
        except OSError:
            size = None
        return cls(path=path, name=path.name, size=size)

    def __str__(self) -> str:
        return str(self.path)


@dataclass
class UrlRef:
    """
    An audio file addressed by URL. content_type is filled in from the
    response headers once the URL has been fetched.
    """
    url: str
    name: str = ''
    content_type: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            self.name = self.url

    def __str__(self) -> str:
        return self.url


Source = Union[FileRef, UrlRef]


def source_from_text(text: str) -> UrlRef:
    """
    Build a source from dropped/pasted text. Only http(s) URLs are accepted.

    Raises:
        ValueError: If the text is not a URL
    """
    text = text.strip()
    if not text.startswith('http'):
        raise ValueError(f"Not a URL: {text!r}")
    return UrlRef(url=text)


def fetch_url(ref: UrlRef) -> BinaryIO:
    """
    Download a URL into memory.

    The response body is read in chunks and capped at Config.MAX_FILE_SIZE.
    ref.content_type is set from the response.

    Raises:
        SourceError: On any network/HTTP failure or oversized body
    """
    logger.debug(f"Converting HTTP to stream using: {ref.url}")
    try:
        with requests.get(
            ref.url,
            stream=True,
            timeout=Config.HTTP_TIMEOUT,
            headers={'User-Agent': Config.USER_AGENT},
        ) as response:
            response.raise_for_status()
            ref.content_type = response.headers.get('Content-Type')

            length = response.headers.get('Content-Length')
            if length and length.isdigit() and int(length) > Config.MAX_FILE_SIZE:
                raise SourceError(f"Remote file too large ({length} bytes): {ref.url}")

            buf = io.BytesIO()
            for chunk in response.iter_content(chunk_size=Config.CHUNK_SIZE):
                buf.write(chunk)
                if buf.tell() > Config.MAX_FILE_SIZE:
                    raise SourceError(f"Remote file exceeds {Config.MAX_FILE_SIZE} bytes: {ref.url}")
    except requests.RequestException as e:
        raise SourceError(f"Failed to fetch {ref.url}: {e}") from e

    buf.seek(0)
    buf.name = ref.name
    logger.debug(f"Fetched {buf.getbuffer().nbytes} bytes of type {ref.content_type} from {ref.url}")
    return buf


@contextmanager
def open_source(source: Source) -> Generator[BinaryIO, None, None]:
    """
    Open a source as a seekable binary stream, closing it afterwards.

    Raises:
        SourceError: If the file cannot be opened or the URL cannot be fetched
    """
    if isinstance(source, UrlRef):
        stream = fetch_url(source)
    else:
        try:
            stream = open(source.path, 'rb')
        except OSError as e:
            raise SourceError(f"Cannot open {source.path}: {e}") from e

    try:
        yield stream
    finally:
        stream.close()
