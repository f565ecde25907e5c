"""
Utility functions and configuration for tagalyzer.
"""

import os
import sys
import logging
from pathlib import Path
from typing import List, Any
from logging.handlers import RotatingFileHandler

# ---------- Constants ----------
EXIT_CODE_SUCCESS = 0
EXIT_CODE_ERROR = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_NO_FILES = 3
EXIT_CODE_INTERRUPTED = 130

_TRUTHY = ('1', 'true', 'yes')

# ---------- Configuration ----------
class Config:
    """Configuration management with validation."""
    MAX_FILE_SIZE = 500 * 1024 * 1024  # 500MB
    DEFAULT_ENCODING = 'utf-8'
    CHUNK_SIZE = 64 * 1024  # 64KB for stream reads

    # Seconds to wait for the remote server when fetching a URL
    HTTP_TIMEOUT = 30.0
    USER_AGENT = 'tagalyzer/0.1.0'

    DEFAULT_VERBOSE = False

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if cls.MAX_FILE_SIZE <= 0:
            raise ValueError("MAX_FILE_SIZE must be positive")
        if cls.CHUNK_SIZE <= 0:
            raise ValueError("CHUNK_SIZE must be positive")
        if cls.HTTP_TIMEOUT <= 0:
            raise ValueError("HTTP_TIMEOUT must be positive")
        if not cls.USER_AGENT:
            raise ValueError("USER_AGENT cannot be empty")

    @classmethod
    def load_from_env(cls) -> None:
        """Load configuration from environment variables, updating class attributes."""
        if os.getenv('TAGALYZER_MAX_FILE_SIZE'):
            cls.MAX_FILE_SIZE = int(os.getenv('TAGALYZER_MAX_FILE_SIZE'))
        if os.getenv('TAGALYZER_CHUNK_SIZE'):
            cls.CHUNK_SIZE = int(os.getenv('TAGALYZER_CHUNK_SIZE'))
        if os.getenv('TAGALYZER_HTTP_TIMEOUT'):
            cls.HTTP_TIMEOUT = float(os.getenv('TAGALYZER_HTTP_TIMEOUT'))
        if os.getenv('TAGALYZER_USER_AGENT'):
            cls.USER_AGENT = os.getenv('TAGALYZER_USER_AGENT')
        if os.getenv('TAGALYZER_VERBOSE') is not None:
            cls.DEFAULT_VERBOSE = os.getenv('TAGALYZER_VERBOSE', '').lower() in _TRUTHY
        cls.validate()

# ---------- Logging Setup ----------
def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rotation and proper formatting."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Create logs directory if it doesn't exist
    log_dir = Path('logs')
    log_dir.mkdir(exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / 'tagalyzer.log',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )

    # Console only shows warnings unless verbose; the file keeps everything
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level if verbose else logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            console_handler,
            file_handler
        ]
    )

# ---------- Small Helpers ----------
def join_for_printing(lst: List[str]) -> str:
    """Join list for display, showing '(none)' for empty lists."""
    return '(none)' if not lst else '; '.join(lst)

def truncate(s: str, max_len: int = 150) -> str:
    """Shorten a display string, marking the cut with '...'."""
    if len(s) > max_len:
        return s[:max_len-3] + "..."
    return s

def safe_unicode_path(path: Any) -> str:
    """Convert path to unicode, handling encoding issues."""
    if isinstance(path, bytes):
        try:
            return path.decode(Config.DEFAULT_ENCODING)
        except UnicodeDecodeError:
            try:
                return path.decode('latin-1')
            except UnicodeDecodeError:
                return path.decode('utf-8', errors='replace')
    return str(path)
