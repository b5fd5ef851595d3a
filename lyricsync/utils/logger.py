"""
Logging configuration and utilities for Lyricsync
Provides colored console output and file logging with separation between user and technical messages
"""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Optional
import colorama
from colorama import Fore, Back, Style

from ..config.settings import get_settings


# Initialize colorama for Windows compatibility
colorama.init()

# Third-party loggers that would otherwise flood the log file
EXTERNAL_LIBS = [
    'spotipy', 'urllib3', 'requests', 'opencc',
    'urllib3.connectionpool', 'requests.packages.urllib3.connectionpool'
]

FILE_FORMAT = '%(asctime)s | %(name)-30s | %(levelname)-8s | %(funcName)-20s | %(message)s'
FILE_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ConsoleMessageFilter(logging.Filter):
    """Filter to allow only user-facing messages to console"""

    def filter(self, record):
        # Allow all WARNING+ messages
        if record.levelno >= logging.WARNING:
            return True

        # Allow messages explicitly marked for console
        if getattr(record, 'console_output', False):
            return True

        # Allow messages from specific console loggers
        if record.name.endswith('.console') or record.name.endswith('.user'):
            return True

        # Block everything else (DEBUG/INFO technical messages)
        return False


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colored output for console"""

    # Color mapping for log levels
    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Initialize colored formatter

        Args:
            fmt: Log format string
            use_colors: Whether to use colored output
        """
        super().__init__()
        self.use_colors = use_colors
        self.fmt = fmt or '%(message)s'

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors"""
        formatter = logging.Formatter(self.fmt)
        if self.use_colors and record.levelname in self.COLORS:
            # Work on a copy so file handlers see the plain level name
            record_copy = logging.makeLogRecord(record.__dict__)
            record_copy.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{Style.RESET_ALL}"
            return formatter.format(record_copy)
        return formatter.format(record)


def _silence_external_libraries() -> None:
    for lib in EXTERNAL_LIBS:
        logger = logging.getLogger(lib)
        logger.setLevel(logging.CRITICAL)
        logger.propagate = False


def _build_file_handler(log_file: Path, level: int, max_size: str, backup_count: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=parse_size(max_size),
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return file_handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3
) -> None:
    """
    Setup application logging configuration with separated console/file output

    Args:
        level: Logging level for the file (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (None to disable file logging)
        console_output: Enable console logging
        colored_output: Enable colored console output
        max_size: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # Console handler - only user-facing messages (WARNING+ or explicitly marked)
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)  # Let filter decide what to show
        console_handler.addFilter(ConsoleMessageFilter())
        console_handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=colored_output))
        root_logger.addHandler(console_handler)

    # File handler with full detail logging
    if log_file:
        try:
            root_logger.addHandler(_build_file_handler(Path(log_file), numeric_level, max_size, backup_count))
        except OSError as e:
            print(f"Warning: File logging disabled ({log_file}): {e}")

    _silence_external_libraries()

    logger = logging.getLogger('lyricsync')
    logger.info(f"Logging initialized - Level: {level}, Console: {console_output}, File: {log_file}")


def reconfigure_logging_for_display(
    log_file: Optional[Path],
    level: str = "INFO",
    max_size: str = "10MB",
    backup_count: int = 3
) -> None:
    """
    Reconfigure logging while the curses lyrics view owns the terminal

    Any write to stdout/stderr would tear the full-screen view, so the
    console handler is dropped and only the rotating file handler is kept.
    Without a log file, records are discarded.

    Args:
        log_file: File receiving all records during the session
        level: Logging level
        max_size: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(logging.DEBUG)

    if log_file:
        try:
            root_logger.addHandler(_build_file_handler(Path(log_file), numeric_level, max_size, backup_count))
        except OSError:
            root_logger.addHandler(logging.NullHandler())
    else:
        root_logger.addHandler(logging.NullHandler())

    _silence_external_libraries()

    logging.getLogger('lyricsync.logging').info(f"Logging reconfigured for display session: {log_file}")


def get_current_log_file() -> Optional[Path]:
    """
    Get the current log file path from active file handlers

    Returns:
        Path to current log file or None if no file logging
    """
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def parse_size(size_str: str) -> int:
    """
    Parse size string to bytes

    Args:
        size_str: Size string like "10MB", "1GB", "500KB"

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    multipliers = {
        'B': 1,
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'TB': 1024 ** 4,
    }

    match = re.match(r'^(\d+(?:\.\d+)?)\s*([KMGT]?B)$', size_str)
    if not match:
        raise ValueError(f"Invalid size format: {size_str}")

    number, unit = match.groups()
    return int(float(number) * multipliers[unit])


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for a module

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance with console helper methods attached
    """
    logger = logging.getLogger(name)

    def console_info(message: str):
        """Log message that should appear on console for user"""
        logger.info(message, extra={'console_output': True})

    def console_warning(message: str):
        """Log warning that should appear on console"""
        logger.warning(message)

    def console_error(message: str):
        """Log error that should appear on console"""
        logger.error(message)

    logger.console_info = console_info
    logger.console_warning = console_warning
    logger.console_error = console_error

    return logger


def configure_from_settings() -> None:
    """Configure logging from application settings"""
    settings = get_settings()
    log_file_path = settings.get_log_file_path()

    setup_logging(
        level=settings.logging.level,
        log_file=str(log_file_path) if log_file_path else None,
        console_output=settings.logging.console_output,
        colored_output=settings.logging.colored_output,
        max_size=settings.logging.max_size,
        backup_count=settings.logging.backup_count
    )


# Performance logging utilities
def log_performance(func):
    """Decorator to log function performance (to file only)"""
    import functools
    import time

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        start_time = time.time()

        try:
            result = func(*args, **kwargs)
            duration = time.time() - start_time
            logger.debug(f"{func.__name__} completed in {duration:.3f}s")
            return result
        except Exception as e:
            duration = time.time() - start_time
            logger.debug(f"{func.__name__} failed after {duration:.3f}s: {e}")
            raise

    return wrapper


# Initialize logging when module is imported
try:
    configure_from_settings()
except Exception:
    # Fallback to basic logging if settings fail
    setup_logging(level="INFO", console_output=True)
