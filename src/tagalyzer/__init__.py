"""tagalyzer – audio tags made readable."""

__version__ = "0.1.0"

from .core import (
    Metadata,
    NativeTag,
    TagalyzerError,
    DecodeError,
    TransformError,
    SourceError,
    SUPPORTED_EXT,
    decode,
    read_metadata,
)
from .labels import LabelSpec, COMMON_LABELS, FORMAT_LABELS
from .normalizer import DisplayValue, TagRecord, NativeTagGroup, normalize, normalize_native
from .sources import FileRef, UrlRef, open_source, source_from_text
from .pipeline import ErrorInfo, FileAnalysis, AnalysisResults, analyze_source, parse_sources
from .batch import analyze_batch, analyze_urls
from .utils import Config

__all__ = [
    "Metadata",
    "NativeTag",
    "TagalyzerError",
    "DecodeError",
    "TransformError",
    "SourceError",
    "SUPPORTED_EXT",
    "decode",
    "read_metadata",
    "LabelSpec",
    "COMMON_LABELS",
    "FORMAT_LABELS",
    "DisplayValue",
    "TagRecord",
    "NativeTagGroup",
    "normalize",
    "normalize_native",
    "FileRef",
    "UrlRef",
    "open_source",
    "source_from_text",
    "ErrorInfo",
    "FileAnalysis",
    "AnalysisResults",
    "analyze_source",
    "parse_sources",
    "analyze_batch",
    "analyze_urls",
    "Config",
]
