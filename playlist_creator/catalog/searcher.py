"""
Catalog search orchestration.

CatalogSearcher ties a catalog client to the matching pipeline:

    Song -> query strategies -> client.search(query) -> rank candidates

Query Strategy Loop:
    Strategies are tried in order and the loop stops at the first query
    that returns any candidates. A TransientSearchError (dropped
    connection, unreadable response) or any exception outside the
    MusicSearchError hierarchy only ends that query and the next strategy
    is tried. Any other MusicSearchError (authentication, rate limit, ...)
    stops the loop immediately. When no strategy yields a candidate,
    NoResultsFoundError names the song.

Batch Search:
    search_batch() runs one search per song, sequentially, with a fixed
    delay between songs to respect the catalog's rate limits. A failure
    for one song yields an empty result list for that song; the batch
    always runs to the end.

Usage:
    searcher = CatalogSearcher(ITunesSearchClient(), rate_limit_delay=0.1)
    results = searcher.search(Song("Yesterday", "The Beatles"))
    best = searcher.get_top_match(Song("Yesterday", "The Beatles"))
"""

import time
from typing import Callable, Protocol, runtime_checkable

from playlist_creator.core.exceptions import (
    AuthenticationRequiredError,
    MusicSearchError,
    NoResultsFoundError,
    SearchFailedError,
    TransientSearchError,
)
from playlist_creator.core.logger import get_logger
from playlist_creator.matching.models import CatalogCandidate, SearchResult, Song
from playlist_creator.matching.queries import generate_query_strategies
from playlist_creator.matching.ranker import (
    DEFAULT_MINIMUM_CONFIDENCE,
    rank_candidates,
    top_match,
)


logger = get_logger(__name__)


DEFAULT_RATE_LIMIT_DELAY = 0.1

# Called once per song by search_batch with the song, its ranked results
# (empty on failure) and the error that caused the failure, if any.
BatchResultCallback = Callable[[Song, list[SearchResult], Exception | None], None]


@runtime_checkable
class CatalogClient(Protocol):
    """
    Transport to a music catalog.

    search() returns raw, unscored candidates for one query string and
    raises MusicSearchError subclasses for failures the searcher should
    not retry with another query, or TransientSearchError when the next
    query may still succeed.
    """

    @property
    def is_authorized(self) -> bool: ...

    def request_authorization(self) -> None: ...

    def search(self, term: str) -> list[CatalogCandidate]: ...


class CatalogSearcher:
    """
    Searches a catalog for extracted songs and ranks the candidates.

    Attributes:
        client: The CatalogClient used for queries.
        minimum_confidence: Lowest match_confidence accepted by get_top_match().
        rate_limit_delay: Seconds to sleep between songs in search_batch().
    """

    def __init__(
        self,
        client: CatalogClient,
        minimum_confidence: float = DEFAULT_MINIMUM_CONFIDENCE,
        rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY
    ) -> None:
        self.client = client
        self.minimum_confidence = minimum_confidence
        self.rate_limit_delay = rate_limit_delay

    def request_authorization(self) -> None:
        self.client.request_authorization()

    def search(self, song: Song) -> list[SearchResult]:
        """
        Search the catalog for a song.

        Args:
            song: Extracted song.

        Returns:
            Ranked results, best first. Never empty.

        Raises:
            AuthenticationRequiredError: If the client is not authorized.
            NoResultsFoundError: If no query strategy returned a candidate.
            MusicSearchError: Any other known error raised by the client.
            SearchFailedError: For unexpected errors outside the query loop.
        """
        try:
            return self._perform_search(song)
        except MusicSearchError:
            raise
        except Exception as e:
            raise SearchFailedError(
                str(e),
                details={"song": song.description, "original_error": str(e)}
            ) from e

    def get_top_match(self, song: Song) -> SearchResult | None:
        """
        Best result for a song that clears minimum_confidence.

        Raises:
            Same as search().
        """
        return top_match(self.search(song), self.minimum_confidence)

    def search_batch(
        self,
        songs: list[Song],
        on_result: BatchResultCallback | None = None
    ) -> list[tuple[Song, list[SearchResult]]]:
        """
        Search for several songs, one after another.

        Args:
            songs: Songs to search, in mention order.
            on_result: Optional callback invoked after each song.

        Returns:
            (song, results) pairs in input order. results is empty when
            the search for that song failed. Duplicated songs each get
            their own entry.

        Behavior:
            - Sleeps rate_limit_delay seconds between songs, not after
              the last one.
            - Never raises for a per-song search failure.
        """
        outcomes: list[tuple[Song, list[SearchResult]]] = []

        for index, song in enumerate(songs):
            error: Exception | None = None
            try:
                results = self.search(song)
            except Exception as e:
                logger.debug(f"Search failed for {song.description}: {e}")
                results = []
                error = e

            outcomes.append((song, results))
            if on_result is not None:
                on_result(song, results, error)

            if index < len(songs) - 1 and self.rate_limit_delay > 0:
                time.sleep(self.rate_limit_delay)

        return outcomes

    def _perform_search(self, song: Song) -> list[SearchResult]:
        if not self.client.is_authorized:
            raise AuthenticationRequiredError(details={"song": song.description})

        candidates: list[CatalogCandidate] = []
        for query in generate_query_strategies(song):
            try:
                candidates = list(self.client.search(query))
            except TransientSearchError as e:
                logger.debug(f"Query '{query}' hit a transient error, trying next strategy: {e}")
                continue
            except MusicSearchError:
                raise
            except Exception as e:
                logger.debug(f"Query '{query}' failed, trying next strategy: {e}")
                continue

            if candidates:
                logger.debug(f"Query '{query}' returned {len(candidates)} candidates")
                break

        if not candidates:
            raise NoResultsFoundError(song.description, details={"song": song.description})

        return rank_candidates(candidates, song)
