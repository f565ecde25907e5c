"""High-level Python API for analyzing batches of files or URLs with tagalyzer."""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
import logging

from .core import decode
from .pipeline import (
    AnalysisResults,
    Decoder,
    ResultCallback,
    collect_files_generator,
    file_sources,
    parse_sources,
)
from .sources import UrlRef, source_from_text

logger = logging.getLogger(__name__)

def summarize(results: AnalysisResults) -> Dict[str, Any]:
    """Count outcomes of a finished batch."""
    return {
        "processed": len(results),
        "successful": sum(1 for r in results if r.passed),
        "failed": sum(1 for r in results if r.error is not None),
        "results": results
    }

def normalize_extensions(extensions: Optional[Iterable[str]]) -> Optional[set]:
    """Lower-case extensions and make sure they start with a dot."""
    if not extensions:
        return None
    return {
        e.strip().lower() if e.strip().startswith('.') else '.' + e.strip().lower()
        for e in extensions if e.strip()
    }

# Core batch processing logic
def analyze_batch(
    path: Union[str, Path],
    *,
    recursive: bool = False,
    extensions: Optional[List[str]] = None,
    decoder: Decoder = decode,
    callback: Optional[ResultCallback] = None
) -> Dict[str, Any]:
    """
    Analyze every audio file under a path.

    Args:
        path: Directory or file path to analyze
        recursive: If True, search subdirectories
        extensions: List of file extensions to include (e.g. ['.mp3', '.flac'])
        decoder: Metadata decoder (defaults to the mutagen decoder)
        callback: Told about each analysis as it is added and completed

    Returns:
        Dict with keys: processed, successful, failed, results

    Examples:
        >>> from tagalyzer.batch import analyze_batch
        >>> result = analyze_batch('/music', recursive=True)
        >>> for analysis in result['results']:
        ...     for tag in analysis.common_tags or []:
        ...         print(tag.label.text, [v.text for v in tag.value])
    """
    path = Path(path)
    files = list(collect_files_generator(path, recursive=recursive, ext_set=normalize_extensions(extensions)))

    if not files:
        logger.warning("No matching files found")
        return summarize(AnalysisResults())

    results = parse_sources(file_sources(files), decoder, callback=callback)
    return summarize(results)

def analyze_urls(
    urls: Iterable[Union[str, UrlRef]],
    *,
    decoder: Decoder = decode,
    callback: Optional[ResultCallback] = None
) -> Dict[str, Any]:
    """
    Analyze audio files addressed by URL.

    Raises:
        ValueError: If an entry is not an http(s) URL
    """
    sources = [u if isinstance(u, UrlRef) else source_from_text(u) for u in urls]
    results = parse_sources(sources, decoder, callback=callback)
    return summarize(results)
