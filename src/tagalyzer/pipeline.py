"""
Parse pipeline: decodes a batch of sources one at a time and publishes one
FileAnalysis per source as soon as it enters the pipeline.
"""

import logging
import signal
import sys
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Generator, Iterable, Iterator, List, Optional

from .core import Metadata, SourceError, TransformError, SUPPORTED_EXT, decode
from .labels import COMMON_LABELS, FORMAT_LABELS
from .normalizer import NativeTagGroup, TagRecord, normalize, normalize_native
from .sources import FileRef, Source
from .utils import EXIT_CODE_INTERRUPTED

logger = logging.getLogger(__name__)

Decoder = Callable[[Source], Metadata]
# Receives (event, analysis); event is 'added' or 'completed'
ResultCallback = Callable[[str, 'FileAnalysis'], None]

PENDING = 'pending'
DECODING = 'decoding'
SUCCEEDED = 'succeeded'
FAILED = 'failed'

# ---------- Signal Handlers ----------
def register_signal_handlers():
    """Register signal handlers for graceful shutdown on Ctrl+C/SIGTERM."""
    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}, shutting down gracefully...")
        sys.exit(EXIT_CODE_INTERRUPTED)

    # Only register on platforms that support it (Windows has limited signal support)
    if sys.platform != "win32":
        try:
            signal.signal(signal.SIGINT, signal_handler)
            signal.signal(signal.SIGTERM, signal_handler)
        except ValueError:
            # Signals can only be set from the main thread
            pass

def unregister_signal_handlers():
    """Unregister signal handlers (restore defaults)."""
    if sys.platform != "win32":
        try:
            signal.signal(signal.SIGINT, signal.SIG_DFL)
            signal.signal(signal.SIGTERM, signal.SIG_DFL)
        except ValueError:
            pass

# ---------- Records ----------
@dataclass
class ErrorInfo:
    """Why a source failed. kind is 'decode', 'transform' or 'source'."""
    message: str
    kind: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> 'ErrorInfo':
        if isinstance(exc, SourceError):
            kind = 'source'
        elif isinstance(exc, TransformError):
            kind = 'transform'
        else:
            kind = 'decode'
        return cls(message=str(exc) or type(exc).__name__, kind=kind)


@dataclass
class FileAnalysis:
    """
    Analysis of one source. Starts out pending with only the source set and
    is completed exactly once, either with metadata and normalized tags or
    with an error.
    """
    source: Source
    metadata: Optional[Metadata] = None
    format_tags: Optional[List[TagRecord]] = None
    common_tags: Optional[List[TagRecord]] = None
    native_groups: Optional[List[NativeTagGroup]] = None
    error: Optional[ErrorInfo] = None
    status: str = PENDING

    @property
    def done(self) -> bool:
        return self.status in (SUCCEEDED, FAILED)

    @property
    def passed(self) -> bool:
        return self.status == SUCCEEDED

    def start(self) -> None:
        if self.status != PENDING:
            raise RuntimeError(f"Analysis of {self.source} already started")
        self.status = DECODING

    def succeed(self, metadata: Metadata, format_tags: List[TagRecord],
                common_tags: List[TagRecord], native_groups: List[NativeTagGroup]) -> None:
        self._check_open()
        self.metadata = metadata
        self.format_tags = format_tags
        self.common_tags = common_tags
        self.native_groups = native_groups
        self.status = SUCCEEDED

    def fail(self, error: ErrorInfo) -> None:
        self._check_open()
        self.error = error
        self.status = FAILED

    def _check_open(self) -> None:
        if self.done:
            raise RuntimeError(f"Analysis of {self.source} is already complete")


class AnalysisResults:
    """
    Ordered results of one batch. Only the pipeline appends to it;
    consumers read it like a sequence and subscribe to be told of changes.
    """

    def __init__(self):
        self._items: List[FileAnalysis] = []
        self._subscribers: List[ResultCallback] = []

    def subscribe(self, callback: ResultCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: ResultCallback) -> None:
        self._subscribers.remove(callback)

    def _notify(self, event: str, analysis: FileAnalysis) -> None:
        for callback in list(self._subscribers):
            callback(event, analysis)

    def add(self, analysis: FileAnalysis) -> None:
        self._items.append(analysis)
        self._notify('added', analysis)

    def completed(self, analysis: FileAnalysis) -> None:
        self._notify('completed', analysis)

    @property
    def done(self) -> bool:
        return all(a.done for a in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> FileAnalysis:
        return self._items[index]

    def __iter__(self) -> Iterator[FileAnalysis]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"AnalysisResults({self._items!r})"

# ---------- Pipeline ----------
def analyze_source(analysis: FileAnalysis, decoder: Decoder = decode) -> FileAnalysis:
    """
    Decode and normalize one source, completing its analysis record.

    Every exception raised while decoding or normalizing ends up in
    analysis.error; nothing propagates.
    """
    source = analysis.source
    analysis.start()
    logger.debug(f"Start parsing file {source.name}")
    try:
        metadata = decoder(source)
        format_tags = normalize(FORMAT_LABELS, metadata.format)
        common_tags = normalize(COMMON_LABELS, metadata.common)
        native_groups = normalize_native(metadata.native)
    except Exception as e:
        error = ErrorInfo.from_exception(e)
        logger.warning(f"Failed to parse {source}: {error.message}")
        analysis.fail(error)
        return analysis

    logger.debug(f"Completed parsing of {source.name}")
    analysis.succeed(metadata, format_tags, common_tags, native_groups)
    return analysis

def parse_sources(
    sources: Iterable[Source],
    decoder: Decoder = decode,
    *,
    results: Optional[AnalysisResults] = None,
    callback: Optional[ResultCallback] = None
) -> AnalysisResults:
    """
    Analyze a batch of sources strictly in order, one decode at a time.

    Args:
        sources: Files/URLs to analyze; batch order is input order
        decoder: Callable turning a source into Metadata
        results: Empty collection to fill; a new one is created if omitted
        callback: Subscribed to the results before the first source is added

    Returns:
        The batch's results, one completed FileAnalysis per source
    """
    if results is None:
        results = AnalysisResults()
    elif len(results):
        raise ValueError("Results collection already belongs to another batch")
    if callback is not None:
        results.subscribe(callback)

    queue = deque(sources)
    logger.info(f"Parsing {len(queue)} source(s) sequentially")
    while queue:
        analysis = FileAnalysis(source=queue.popleft())
        results.add(analysis)
        analyze_source(analysis, decoder)
        results.completed(analysis)

    return results

# ---------- File Collection ----------
def collect_files_generator(path: Path, recursive: bool = False, ext_set: Optional[set] = None) -> Generator[Path, None, None]:
    """Generator to collect files efficiently without loading all into memory."""
    if path.is_file():
        yield path
        return

    walker = path.rglob('*') if recursive else path.glob('*')

    for item in sorted(walker):
        if item.is_file():
            ext = item.suffix.lower()
            if ext_set and ext not in ext_set:
                continue
            if ext in SUPPORTED_EXT:
                yield item

def file_sources(paths: Iterable[Any]) -> List[FileRef]:
    """Wrap paths as FileRef sources."""
    return [FileRef.from_path(p) for p in paths]
