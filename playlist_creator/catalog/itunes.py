"""
iTunes Search API catalog client.

The iTunes Search API is a public, unauthenticated endpoint that returns
Apple Music catalog tracks, so no developer token is needed to search.

API Reference:
    GET https://itunes.apple.com/search
        ?term=<query>&media=music&entity=song&limit=<n>&country=<cc>

    Response:
        {"resultCount": 2, "results": [{"trackId": 1441164430,
          "trackName": "Yesterday", "artistName": "The Beatles",
          "collectionName": "Help!", "previewUrl": "https://...",
          "trackViewUrl": "https://music.apple.com/..."}, ...]}

Error Mapping:
    HTTP 429              -> RateLimitExceededError
    HTTP 5xx              -> TransientSearchError("HTTP <status>")
    other non-200 status  -> SearchFailedError("HTTP <status>")
    transport error       -> TransientSearchError
    malformed JSON body   -> TransientSearchError
"""

from dataclasses import dataclass
from typing import Any

import requests

from playlist_creator.core.exceptions import (
    RateLimitExceededError,
    SearchFailedError,
    TransientSearchError,
)
from playlist_creator.core.logger import get_logger


logger = get_logger(__name__)


ITUNES_SEARCH_URL = "https://itunes.apple.com/search"
USER_AGENT = "playlist-creator/1.0"


@dataclass(frozen=True)
class ITunesTrack:
    """
    One song returned by the iTunes Search API.

    Satisfies the CatalogCandidate protocol (id, title, artist_name,
    preview_url).
    """

    track_id: int
    title: str
    artist_name: str
    collection_name: str | None = None
    preview_url: str | None = None
    track_view_url: str | None = None

    @property
    def id(self) -> str:
        return str(self.track_id)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ITunesTrack":
        """
        Build a track from one entry of the API "results" list.

        Raises:
            KeyError: If trackId, trackName or artistName is missing.
        """
        return cls(
            track_id=data["trackId"],
            title=data["trackName"],
            artist_name=data["artistName"],
            collection_name=data.get("collectionName"),
            preview_url=data.get("previewUrl"),
            track_view_url=data.get("trackViewUrl")
        )


class ITunesSearchClient:
    """
    CatalogClient backed by the iTunes Search API.

    Attributes:
        country: Two-letter storefront code.
        limit: Maximum results per query.
        timeout: HTTP timeout in seconds.
        session: Shared requests.Session.

    Example:
        client = ITunesSearchClient(country="GB", limit=10)
        tracks = client.search("Yesterday The Beatles")
    """

    def __init__(
        self,
        country: str = "US",
        limit: int = 25,
        timeout: float = 10.0,
        session: requests.Session | None = None
    ) -> None:
        self.country = country
        self.limit = limit
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @property
    def is_authorized(self) -> bool:
        """The public search endpoint needs no authorization."""
        return True

    def request_authorization(self) -> None:
        logger.debug("iTunes Search API requires no authorization")

    def search(self, term: str) -> list[ITunesTrack]:
        """
        Search the catalog for songs.

        Args:
            term: Free-text query, e.g. "Yesterday The Beatles".

        Returns:
            Tracks in the order the API returned them. Entries missing a
            required field are skipped.

        Raises:
            RateLimitExceededError: On HTTP 429.
            TransientSearchError: On transport errors, HTTP 5xx or an
                unreadable body. The next query may still succeed.
            SearchFailedError: On any other non-200 status.
        """
        params = {
            "term": term,
            "media": "music",
            "entity": "song",
            "limit": self.limit,
            "country": self.country,
        }

        logger.debug(f"iTunes search: '{term}'")

        try:
            response = self.session.get(ITUNES_SEARCH_URL, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TransientSearchError(
                str(e),
                details={"query": term, "original_error": str(e)}
            ) from e

        if response.status_code == 429:
            raise RateLimitExceededError(details={"query": term})
        if response.status_code >= 500:
            raise TransientSearchError(
                f"HTTP {response.status_code}",
                details={"query": term, "status_code": response.status_code}
            )
        if response.status_code != 200:
            raise SearchFailedError(
                f"HTTP {response.status_code}",
                details={"query": term, "status_code": response.status_code}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransientSearchError(
                "Invalid JSON response",
                details={"query": term, "original_error": str(e)}
            ) from e

        tracks = []
        for entry in data.get("results", []):
            try:
                tracks.append(ITunesTrack.from_api(entry))
            except KeyError:
                logger.debug(f"Skipping incomplete iTunes result: {entry}")

        logger.debug(f"iTunes search '{term}' returned {len(tracks)} tracks")
        return tracks
