"""
playlist-creator: Turn songs mentioned in content into a playlist.

This package takes the songs mentioned in a podcast, radio show or video
(as extracted from its transcript), finds each one in the Apple Music
catalog and builds a playlist from the matches the user keeps.

Architecture:
    The workflow runs in stages:

    Extraction (workflow/): Songs come from a songs file or a MusicExtractor
        - Titles and artists are normalized
        - Repeated mentions are dropped

    Search (catalog/, matching/): Find each song in the catalog
        - Several query strategies, most specific first
        - Candidates scored against the mentioned song
        - Top candidate classified AUTO or PENDING

    Review (review/): Decide the PENDING matches card by card
        - Accept, reject, undo
        - Batch accept/reject by confidence

    Playlist (playlist/): Submit the included matches in mention order

Modules:
    core/       - Configuration, database, logging, progress, exceptions
    matching/   - Models, scoring, classification, normalization
    catalog/    - Catalog search (iTunes Search API)
    review/     - Review session
    playlist/   - Playlist submission and JSON export
    workflow/   - Requests and the end-to-end workflow
    utils/      - Songs file loading and helpers
    cli.py      - Command-line interface

Configuration:
    Requires a config.yaml file in the current directory:

        output:
          directory: "~/Music/PlaylistCreator"

        matching:
          auto_select_threshold: 0.9

        search:
          country: "US"
          rate_limit_delay: 0.1

Dependencies:
    - rapidfuzz: Fuzzy string matching
    - requests: iTunes Search API
    - rich-click: CLI framework and colors
    - rich: Progress bars
    - tqdm: Log output that plays well with progress bars
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "playlist-creator"
__license__ = "MIT"

from playlist_creator.core import (
    Config,
    ConfigError,
    DatabaseError,
    MusicSearchError,
    PlaylistCreationError,
    PlaylistCreatorError,
    WorkflowError,
    get_logger,
    load_config,
    setup_logging,
)
from playlist_creator.matching import MatchedSong, MatchStatus, Song
from playlist_creator.review import ReviewSession

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "PlaylistCreatorError",
    "ConfigError",
    "DatabaseError",
    "MusicSearchError",
    "PlaylistCreationError",
    "WorkflowError",
    # Models
    "Song",
    "MatchedSong",
    "MatchStatus",
    "ReviewSession",
]
