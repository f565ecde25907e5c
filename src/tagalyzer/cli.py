"""tagalyzer CLI - Audio tag analyzer for the command line."""
import os
import sys
import argparse
import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .batch import normalize_extensions
from .normalizer import DisplayValue, NativeTagGroup, TagRecord
from .pipeline import (
    AnalysisResults,
    FileAnalysis,
    collect_files_generator,
    file_sources,
    parse_sources,
    register_signal_handlers,
    unregister_signal_handlers,
)
from .sources import FileRef, UrlRef, source_from_text
from .utils import (
    Config,
    setup_logging,
    join_for_printing,
    truncate,
    EXIT_CODE_SUCCESS,
    EXIT_CODE_ERROR,
    EXIT_CODE_USAGE,
    EXIT_CODE_NO_FILES,
    EXIT_CODE_INTERRUPTED,
)

logger = logging.getLogger(__name__)

TAG_LISTS = (
    ('Format', 'format_tags'),
    ('Generic tags', 'common_tags'),
)

# ---------- CLI & Main ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagalyzer",
        description="tagalyzer - Show the format and tags of audio files"
    )
    parser.add_argument("paths", nargs='*', help="Audio files or directories to analyze")
    parser.add_argument("--url", action='append', default=[], help="Analyze an audio file by URL (repeatable)")

    # File selection
    parser.add_argument("--recursive", action='store_true', help="Recurse into subdirectories")
    parser.add_argument("--ext", default=None, help="Comma-separated extensions to include")

    # Output
    parser.add_argument("--native", action='store_true', help="Also print native (format-specific) tags")
    parser.add_argument("--links", action='store_true', help="Print reference links next to labels and values")
    parser.add_argument("--json-report", help="Write JSON report to file")
    parser.add_argument("--timeout", type=float, default=None,
                        help="HTTP timeout in seconds (overrides TAGALYZER_HTTP_TIMEOUT env var)")

    # Logging
    parser.add_argument("--verbose", action='store_true', default=None,
                        help="Enable verbose logging (overrides TAGALYZER_VERBOSE env var)")
    parser.add_argument("--version", action='version', version=f"%(prog)s {__version__}")
    return parser

def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments comprehensively."""
    errors = []

    if not args.paths and not args.url:
        errors.append("nothing to analyze: give at least one path or --url")

    for path in args.paths:
        if not os.path.exists(path):
            errors.append(f"Path does not exist: {path}")

    for url in args.url:
        try:
            source_from_text(url)
        except ValueError as e:
            errors.append(str(e))

    if args.timeout is not None and args.timeout <= 0:
        errors.append("--timeout must be positive")

    if errors:
        raise ValueError("; ".join(errors))

def main() -> None:
    """Main CLI entry point."""
    register_signal_handlers()
    try:
        args = build_parser().parse_args()

        # Setup logging - use env var default if flag not explicitly set
        if args.verbose is None:
            verbose_env = os.getenv('TAGALYZER_VERBOSE', '').lower()
            args.verbose = verbose_env in ('1', 'true', 'yes')

        setup_logging(args.verbose)

        # Configuration precedence: CLI flag > environment variable > default
        try:
            Config.load_from_env()
            if args.timeout is not None:
                Config.HTTP_TIMEOUT = args.timeout
            Config.validate()
        except ValueError as e:
            logger.error(f"Configuration validation failed: {e}")
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_USAGE)

        try:
            validate_args(args)
        except ValueError as e:
            logger.error(f"Argument validation failed: {e}")
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_USAGE)

        try:
            exit_code = run_analysis_session(args)
            sys.exit(exit_code)
        except KeyboardInterrupt:
            sys.exit(EXIT_CODE_INTERRUPTED)
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            print(f"Unexpected error: {e}", file=sys.stderr)
            sys.exit(EXIT_CODE_ERROR)

    finally:
        # Ensure signal handlers are unregistered on exit
        unregister_signal_handlers()

def collect_sources(args: argparse.Namespace) -> List[Any]:
    """Turn the path and URL arguments into sources, in command-line order."""
    ext_set = normalize_extensions(args.ext.split(',')) if args.ext else None
    files = []
    for path in args.paths:
        files.extend(collect_files_generator(Path(path), recursive=args.recursive, ext_set=ext_set))
    return file_sources(files) + [source_from_text(u) for u in args.url]

def run_analysis_session(args: argparse.Namespace) -> int:
    """Analyze all sources, printing each file as it completes. Returns exit code."""
    sources = collect_sources(args)

    if not sources:
        print("No files found matching criteria.")
        if args.json_report:
            save_json_report(AnalysisResults(), args.json_report)
        return EXIT_CODE_NO_FILES

    print(f"Analyzing {len(sources)} file(s)...", flush=True)

    def on_result(event: str, analysis: FileAnalysis) -> None:
        if event == 'completed':
            print_file_result(analysis, native=args.native, links=args.links)

    results = parse_sources(sources, callback=on_result)
    return generate_summary(results, args)

# ---------- Printing ----------
def format_display(value: DisplayValue, links: bool = False, max_len: int = 150) -> str:
    """Render a DisplayValue, optionally followed by its link."""
    text = truncate(str(value.text), max_len)
    if links and value.ref:
        return f"{text} <{value.ref}>"
    return text

def print_tag_records(title: str, records: List[TagRecord], links: bool = False) -> None:
    print(f"  {title}:")
    if not records:
        print("    (none)")
        return
    for rec in records:
        values = [format_display(v, links) for v in rec.value]
        print(f"    {format_display(rec.label, links)}: {join_for_printing(values)}")

def print_native_groups(groups: List[NativeTagGroup], max_len: int = 150) -> None:
    for group in groups:
        print(f"  Native tags ({group.type}):")
        if not group.tags:
            print("    (none)")
        for tag in group.tags:
            print(f"    {tag.id}: {truncate(tag.value, max_len)}")

def print_file_result(analysis: FileAnalysis, native: bool = False, links: bool = False) -> None:
    """Print detailed result for a single file."""
    source = analysis.source
    print(f"\nFile: {source}")
    if isinstance(source, UrlRef) and source.content_type:
        print(f"  Content-Type: {source.content_type}")

    if analysis.error:
        print(f"  ERROR ({analysis.error.kind}): {analysis.error.message}")
        return

    for title, attr in TAG_LISTS:
        print_tag_records(title, getattr(analysis, attr) or [], links)

    if native:
        print_native_groups(analysis.native_groups or [])

def generate_summary(results: AnalysisResults, args: argparse.Namespace) -> int:
    """Print analysis summary. Returns exit code."""
    total_files = len(results)
    successful = sum(1 for r in results if r.passed)
    failed = total_files - successful

    print(f"\n--- SUMMARY ---")
    print(f"Total files analyzed: {total_files}")
    print(f"Successful: {successful}")
    print(f"Failed: {failed}")

    if args.json_report:
        save_json_report(results, args.json_report)

    return EXIT_CODE_SUCCESS if failed == 0 else EXIT_CODE_ERROR

# ---------- JSON Report ----------
def _drop_empty_refs(obj: Any) -> Any:
    """Remove 'ref': None entries from nested report data."""
    if isinstance(obj, dict):
        return {k: _drop_empty_refs(v) for k, v in obj.items() if not (k == 'ref' and v is None)}
    if isinstance(obj, list):
        return [_drop_empty_refs(v) for v in obj]
    return obj

def source_to_dict(source: Any) -> Dict[str, Any]:
    if isinstance(source, FileRef):
        return {"type": "file", "path": str(source.path), "name": source.name, "size": source.size}
    return {"type": "url", "url": source.url, "name": source.name, "content_type": source.content_type}

def analysis_to_dict(analysis: FileAnalysis) -> Dict[str, Any]:
    """Convert one analysis into JSON-ready data."""
    record: Dict[str, Any] = {
        "source": source_to_dict(analysis.source),
        "status": analysis.status,
    }
    if analysis.error:
        record["error"] = asdict(analysis.error)
        return record

    record["format"] = _drop_empty_refs([asdict(t) for t in analysis.format_tags or []])
    record["common"] = _drop_empty_refs([asdict(t) for t in analysis.common_tags or []])
    record["native"] = [asdict(g) for g in analysis.native_groups or []]
    return record

def save_json_report(results: AnalysisResults, report_path: str) -> None:
    """Save analysis results as a JSON report."""
    total = len(results)
    success = sum(1 for r in results if r.passed)

    report_data = {
        "version": "1.0",
        "timestamp": datetime.now().isoformat(),
        "summary": {
            "total": total,
            "success": success,
            "failed": total - success,
        },
        "files": [analysis_to_dict(r) for r in results]
    }

    try:
        with open(report_path, 'w', encoding='utf-8') as f:
            json.dump(report_data, f, ensure_ascii=False, indent=2, default=str)
        print(f"JSON report written to {report_path}")
    except OSError as e:
        print(f"Failed to write JSON report: {e}", file=sys.stderr)


if __name__ == '__main__':
    main()
