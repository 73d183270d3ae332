"""
Exception classes for playlist-creator.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, and the class itself tells callers which failure mode occurred.

Exception Hierarchy:
    PlaylistCreatorError (base)
        ConfigError - Configuration file issues
        DatabaseError - SQLite request store issues
        StatusDecodingError - Unknown status tag while decoding stored data
        MusicSearchError - Catalog search issues
            AuthenticationRequiredError - Catalog requires authorization
            RateLimitExceededError - Catalog throttled the request
            NoResultsFoundError - No query strategy produced a candidate
            SearchFailedError - Unrecognized search failure
        PlaylistCreationError - Playlist backend issues
            PlaylistAuthenticationError - Backend requires authorization
            SongAdditionError - Adding songs to a playlist failed
        WorkflowError - Invalid workflow state (e.g. nothing selected)

Search Error Categories:
    The catalog searcher treats MusicSearchError subclasses raised by a
    catalog client as "known" failures: they stop the query-strategy loop
    immediately. Any other exception is considered transient for that query
    and the next strategy is tried.
"""


class PlaylistCreatorError(Exception):
    """
    Base exception for all playlist-creator errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all playlist-creator errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional context (song info, URLs, ...).

    Example:
        try:
            searcher.search(song)
        except PlaylistCreatorError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context.
                     Common keys include:
                     - 'song': "Title by Artist" of the song involved
                     - 'query': Catalog search term that failed
                     - 'original_error': The underlying exception text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(PlaylistCreatorError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Required 'output' section missing
        - Threshold values that are not numbers
    """
    pass


class DatabaseError(PlaylistCreatorError):
    """
    Raised when there's an issue with the SQLite request store.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - Parent directory of the database file does not exist
        - Schema version mismatch
        - Stored match status that cannot be decoded
    """
    pass


class StatusDecodingError(PlaylistCreatorError):
    """
    Raised when a stored status tag is not a known enum value.

    Decoding never falls back to a default status: an unknown tag means
    the stored data was written by something else (or corrupted), and
    silently treating it as "pending" would change what ends up in the
    playlist.

    Example:
        raise StatusDecodingError(
            "Unknown match status: 'maybe'",
            details={'value': 'maybe', 'allowed': ['auto', 'pending', ...]}
        )
    """
    pass


class MusicSearchError(PlaylistCreatorError):
    """
    Base class for catalog search errors.

    Subclasses are "known" search failures. A catalog client raising one
    of them stops the query-strategy fallback immediately, except for
    TransientSearchError, which only ends the current query. The batch
    search still isolates failures to the song being searched.
    """
    pass


class AuthenticationRequiredError(MusicSearchError):
    """Raised when the catalog requires authorization before searching."""

    def __init__(self, message: str = "Catalog authentication required", details: dict | None = None) -> None:
        super().__init__(message, details)


class RateLimitExceededError(MusicSearchError):
    """Raised when the catalog rejects a request because of rate limiting."""

    def __init__(self, message: str = "Search rate limit exceeded", details: dict | None = None) -> None:
        super().__init__(message, details)


class NoResultsFoundError(MusicSearchError):
    """
    Raised when every query strategy for a song returned no candidates.

    The message always names the song so that the failure can be reported
    per song rather than as a generic search failure.

    Attributes:
        song_description: "Title by Artist" for the song that was searched.

    Example:
        raise NoResultsFoundError("Yesterday by The Beatles")
        # str(e) == "No results found for: Yesterday by The Beatles"
    """

    def __init__(self, song_description: str, details: dict | None = None) -> None:
        super().__init__(f"No results found for: {song_description}", details)
        self.song_description = song_description


class SearchFailedError(MusicSearchError):
    """
    Raised for search failures that don't fit a known category.

    Typically wraps HTTP status errors or transport exceptions coming from
    a catalog backend.
    """

    def __init__(self, reason: str, details: dict | None = None) -> None:
        super().__init__(f"Music search failed: {reason}", details)
        self.reason = reason


class TransientSearchError(SearchFailedError):
    """
    Raised when a single query fails for a temporary reason.

    Covers dropped connections, timeouts, server-side (5xx) errors and
    unreadable response bodies. Unlike the other search errors it does
    not stop the query-strategy fallback: the searcher moves on to the
    next strategy for the same song.
    """
    pass


class PlaylistCreationError(PlaylistCreatorError):
    """
    Raised when the playlist backend fails to create or update a playlist.

    Common causes:
        - Backend requires authorization
        - Output directory not writable (file exporter)
        - Remote service rejected the request
    """
    pass


class PlaylistAuthenticationError(PlaylistCreationError):
    """Raised when the playlist backend requires authorization."""

    def __init__(self, message: str = "Playlist service authentication required", details: dict | None = None) -> None:
        super().__init__(message, details)


class SongAdditionError(PlaylistCreationError):
    """Raised when songs cannot be added to an existing playlist."""
    pass


class WorkflowError(PlaylistCreatorError):
    """
    Raised when the workflow cannot continue from its current state.

    Example:
        raise WorkflowError(
            "No songs selected for playlist",
            details={'total_matches': 12, 'included': 0}
        )
    """
    pass
