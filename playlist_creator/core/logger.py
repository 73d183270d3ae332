"""
Logging configuration for playlist-creator.

This module sets up the logging system with multiple outputs:
    - Console: Real-time progress with tqdm-compatible colored formatting
    - log_full_{ts}.log: Complete log of all events (DEBUG and above)
    - log_errors_{ts}.log: Only ERROR and CRITICAL level messages
    - unmatched_songs_{ts}.log: Songs for which the catalog had no result
    - review_required_{ts}.log: Matches below the auto-select threshold

Everything shown on screen is also saved to file, then filtered into the
specialized report files.

Log File Locations:
    All log files are created in {output_dir}/logs. Each run gets its own
    timestamped set of files.

Usage:
    from playlist_creator.core.logger import setup_logging, get_logger

    setup_logging(output_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Searching catalog")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGS_SUBDIRECTORY = "logs"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """Console format "LEVEL: message" with the level name colored by severity."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        level = f"{self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)}{record.levelname}{Colors.RESET}"
        return f"{level}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Console handler that keeps progress bars intact.

    Lines go through tqdm.write(), which clears the bar, prints the line
    and redraws the bar underneath. The stream defaults to whatever
    sys.stderr is at the time of the write.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class ReportFileHandler(logging.Handler):
    """
    Base class for handlers that write one human-readable report file.

    A report handler only reacts to records carrying its marker attribute
    (passed via `extra=`); every other record is ignored. Subclasses set
    MARKER and implement format_entry().

    Attributes:
        report_path: Path of the report file.
        report_file: Open file handle, None until open() is called.
    """

    MARKER = ""

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def format_entry(self, record: logging.LogRecord) -> str:
        raise NotImplementedError

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, self.MARKER) or self.report_file is None:
            return

        try:
            self.report_file.write(self.format_entry(record))
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file. Safe to call multiple times."""
        if self.report_file is not None:
            self.report_file.close()
            self.report_file = None
        super().close()


class UnmatchedSongHandler(ReportFileHandler):
    """
    Writes songs the catalog could not match to unmatched_songs_{ts}.log.

    Format:
        Yesterday - The Beatles
        No results found for: Yesterday by The Beatles

    Picks up records logged with the 'unmatched_song_title' extra field
    (see log_unmatched_song()).
    """

    MARKER = "unmatched_song_title"

    def format_entry(self, record: logging.LogRecord) -> str:
        title = getattr(record, "unmatched_song_title", "Unknown")
        artist = getattr(record, "unmatched_song_artist", "Unknown")
        reason = getattr(record, "unmatched_song_reason", "")
        return f"{title} - {artist}\n{reason}\n\n"


class ReviewRequiredHandler(ReportFileHandler):
    """
    Writes matches that need a user decision to review_required_{ts}.log.

    Format:
        Hey Jude - The Beatles
        Candidate: Hey Jude (Remastered 2015) - The Beatles [1441133180]
        Confidence: 82.0%

    Picks up records logged with the 'review_song_title' extra field
    (see log_review_required()).
    """

    MARKER = "review_song_title"

    def format_entry(self, record: logging.LogRecord) -> str:
        title = getattr(record, "review_song_title", "Unknown")
        artist = getattr(record, "review_song_artist", "Unknown")
        candidate_title = getattr(record, "review_candidate_title", "")
        candidate_artist = getattr(record, "review_candidate_artist", "")
        catalog_id = getattr(record, "review_catalog_id", "")
        confidence = getattr(record, "review_confidence", 0.0)
        return (
            f"{title} - {artist}\n"
            f"Candidate: {candidate_title} - {candidate_artist} [{catalog_id}]\n"
            f"Confidence: {confidence * 100:.1f}%\n\n"
        )


class ErrorOnlyFilter(logging.Filter):
    """Filter that only lets ERROR and CRITICAL records through."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _file_handler(path: Path, level: int = logging.DEBUG) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    return handler


def setup_logging(output_dir: Path) -> Path:
    """
    Configure the root logger for one application run.

    Call ONCE at application startup, after the configuration is loaded.
    Any handlers already attached to the root logger are closed and
    replaced, so calling it again starts a fresh set of files.

    Args:
        output_dir: Configured output directory. Files go to output_dir/logs.

    Returns:
        The logs directory.

    Handlers:
        - Console (TqdmLoggingHandler, INFO and above, colored level names)
        - log_full_{ts}.log (DEBUG and above)
        - log_errors_{ts}.log (ERROR and above, via ErrorOnlyFilter)
        - unmatched_songs_{ts}.log and review_required_{ts}.log reports
    """
    logs_dir = output_dir / LOGS_SUBDIRECTORY
    logs_dir.mkdir(parents=True, exist_ok=True)
    run_stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    shutdown_logging()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console = TqdmLoggingHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(ColoredConsoleFormatter())

    errors_only = _file_handler(logs_dir / f"log_errors_{run_stamp}.log")
    errors_only.addFilter(ErrorOnlyFilter())

    reports: list[ReportFileHandler] = [
        UnmatchedSongHandler(logs_dir / f"unmatched_songs_{run_stamp}.log"),
        ReviewRequiredHandler(logs_dir / f"review_required_{run_stamp}.log"),
    ]
    for report in reports:
        report.open()

    for handler in [
        console,
        _file_handler(logs_dir / f"log_full_{run_stamp}.log"),
        errors_only,
        *reports,
    ]:
        root_logger.addHandler(handler)

    return logs_dir


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called propagate to an
        unconfigured root logger and produce no report files.
    """
    return logging.getLogger(name)


def format_auto_selected_message(artist: str, title: str, confidence: float) -> str:
    """Colored 'Auto-selected' line for a match above the threshold."""
    return (
        f"{Colors.GREEN}Auto-selected{Colors.RESET}: "
        f"{artist} - {title} "
        f"({Colors.CYAN}{confidence * 100:.1f}%{Colors.RESET})"
    )


def format_review_message(artist: str, title: str, confidence: float) -> str:
    """Colored 'Needs review' line for a match below the threshold."""
    return (
        f"{Colors.YELLOW}Needs review{Colors.RESET}: "
        f"{artist} - {title} "
        f"({Colors.YELLOW}{confidence * 100:.1f}%{Colors.RESET})"
    )


def format_no_match_message(artist: str, title: str, reason: str) -> str:
    """Colored 'No match' line for a song without catalog results."""
    return (
        f"{Colors.RED}No match{Colors.RESET}: "
        f"{artist} - {title} "
        f"({reason})"
    )


def log_unmatched_song(
    logger: logging.Logger,
    title: str,
    artist: str,
    reason: str
) -> None:
    """
    Log a song the catalog could not match.

    Logs a WARNING and attaches the extra fields UnmatchedSongHandler
    writes to unmatched_songs_{ts}.log.

    Example:
        log_unmatched_song(
            logger,
            title="Yesterday",
            artist="The Beatles",
            reason="No results found for: Yesterday by The Beatles"
        )
    """
    logger.warning(
        format_no_match_message(artist, title, reason),
        extra={
            "unmatched_song_title": title,
            "unmatched_song_artist": artist,
            "unmatched_song_reason": reason,
        }
    )


def log_review_required(
    logger: logging.Logger,
    title: str,
    artist: str,
    candidate_title: str,
    candidate_artist: str,
    catalog_id: str | None,
    confidence: float
) -> None:
    """
    Log a match that needs a user decision.

    Logs an INFO message and attaches the extra fields ReviewRequiredHandler
    writes to review_required_{ts}.log.
    """
    logger.info(
        format_review_message(candidate_artist, candidate_title, confidence),
        extra={
            "review_song_title": title,
            "review_song_artist": artist,
            "review_candidate_title": candidate_title,
            "review_candidate_artist": candidate_artist,
            "review_catalog_id": catalog_id or "",
            "review_confidence": confidence,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close all root handlers and detach them.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.flush()
        handler.close()
        root_logger.removeHandler(handler)
