"""
Core module for playlist-creator.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console, file and report outputs
    - progress: Rich progress bar for the catalog search
    - database: SQLite storage for playlist requests

The database is not re-exported here because it stores workflow models;
import it from playlist_creator.core.database.

Usage:
    from playlist_creator.core import (
        Config, load_config,
        setup_logging, get_logger,
        PlaylistCreatorError, ConfigError, DatabaseError
    )
    from playlist_creator.core.database import Database
"""

from playlist_creator.core.config import (
    CONFIG_FILENAME,
    Config,
    MatchingConfig,
    OutputConfig,
    SearchConfig,
    load_config,
    parse_config,
)
from playlist_creator.core.exceptions import (
    AuthenticationRequiredError,
    ConfigError,
    DatabaseError,
    MusicSearchError,
    NoResultsFoundError,
    PlaylistAuthenticationError,
    PlaylistCreationError,
    PlaylistCreatorError,
    RateLimitExceededError,
    SearchFailedError,
    TransientSearchError,
    SongAdditionError,
    StatusDecodingError,
    WorkflowError,
)
from playlist_creator.core.logger import (
    get_logger,
    log_review_required,
    log_unmatched_song,
    setup_logging,
    shutdown_logging,
)
from playlist_creator.core.progress import SearchProgressBar

__all__ = [
    # Config
    "CONFIG_FILENAME",
    "Config",
    "MatchingConfig",
    "SearchConfig",
    "OutputConfig",
    "load_config",
    "parse_config",
    # Exceptions
    "PlaylistCreatorError",
    "ConfigError",
    "DatabaseError",
    "StatusDecodingError",
    "MusicSearchError",
    "AuthenticationRequiredError",
    "RateLimitExceededError",
    "NoResultsFoundError",
    "SearchFailedError",
    "TransientSearchError",
    "PlaylistCreationError",
    "PlaylistAuthenticationError",
    "SongAdditionError",
    "WorkflowError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_unmatched_song",
    "log_review_required",
    "shutdown_logging",
    # Progress
    "SearchProgressBar",
]
