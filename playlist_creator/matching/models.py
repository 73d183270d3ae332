"""
Data models for song matching.

This module defines the value types that flow through the matching
pipeline: extracted songs, scored catalog search results, review
statuses and the original/candidate pairing reviewed by the user.

Design Decisions:
    - Song and SearchResult are frozen: they are created fresh per search
      call and never modified afterwards.
    - MatchedSong is also frozen. A status change produces a new instance
      via with_status(), so a list of MatchedSong only changes by replacing
      an element.
    - The catalog backend is described by the CatalogCandidate protocol
      (id, title, artist_name, preview_url). Any backend whose search hits
      expose those four attributes can be ranked.
    - Whether a match ends up in the playlist is decided in exactly one
      place: MatchStatus.is_included_in_playlist.

Usage:
    from playlist_creator.matching.models import Song, MatchStatus, MatchedSong

    original = Song(title="Yesterday", artist="The Beatles")
    candidate = Song(title="Yesterday", artist="The Beatles",
                     catalog_id="1441164430", confidence=1.0)
    match = MatchedSong(original, candidate, MatchStatus.AUTO)
    match.is_included_in_playlist  # True
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol, runtime_checkable

from playlist_creator.core.exceptions import StatusDecodingError


@dataclass(frozen=True)
class Song:
    """
    Immutable representation of a song.

    Used both for mentions extracted from a transcript (no catalog_id,
    confidence meaningless) and for catalog candidates normalized by the
    ranker (catalog_id set, confidence produced by the scorer).

    Attributes:
        title: Song title. Example: "Bohemian Rhapsody"
        artist: Artist or performer. Example: "Queen"
        catalog_id: Catalog identifier once matched, None for extracted songs.
        confidence: Score in [0.0, 1.0] once scored. Values coming from
                    extraction are not clamped and must not be used for
                    threshold decisions.
    """

    title: str
    artist: str
    catalog_id: str | None = None
    confidence: float = 0.0

    @property
    def description(self) -> str:
        """Human-readable "Title by Artist" string used in messages."""
        return f"{self.title} by {self.artist}"

    def __str__(self) -> str:
        return f"{self.artist} - {self.title}"


@dataclass(frozen=True)
class SearchResult:
    """
    A catalog candidate scored against the originally mentioned song.

    Attributes:
        song: The candidate normalized into a Song (catalog_id and
              confidence populated).
        match_confidence: Scorer output for this candidate.
        catalog_id: Catalog identifier of the candidate.
        preview_url: URL of a short audio preview, if the catalog has one.
    """

    song: Song
    match_confidence: float
    catalog_id: str
    preview_url: str | None = None


@runtime_checkable
class CatalogCandidate(Protocol):
    """
    Raw search hit returned by a catalog client, not yet scored.

    Any concrete catalog backend (iTunes Search API, test double, ...)
    returns objects exposing these attributes.
    """

    @property
    def id(self) -> str: ...

    @property
    def title(self) -> str: ...

    @property
    def artist_name(self) -> str: ...

    @property
    def preview_url(self) -> str | None: ...


class MatchStatus(Enum):
    """
    Review status of a single match.

    Values:
        AUTO: High-confidence match selected by the classifier. Included.
        PENDING: Awaiting a user decision. Not included.
        SELECTED: Explicitly accepted by the user. Included.
        SKIPPED: Explicitly rejected by the user. Not included.
    """

    AUTO = "auto"
    PENDING = "pending"
    SELECTED = "selected"
    SKIPPED = "skipped"

    @classmethod
    def decode(cls, value: str) -> "MatchStatus":
        """
        Decode a stored status tag.

        Args:
            value: The raw tag, e.g. "auto".

        Returns:
            The matching MatchStatus.

        Raises:
            StatusDecodingError: If value is not one of the four tags.
                                 There is no fallback status.
        """
        try:
            return cls(value)
        except ValueError as e:
            raise StatusDecodingError(
                f"Unknown match status: {value!r}",
                details={"value": value, "allowed": [s.value for s in cls]}
            ) from e

    @property
    def is_included_in_playlist(self) -> bool:
        """True if a match with this status goes into the playlist."""
        return self in (MatchStatus.AUTO, MatchStatus.SELECTED)

    @property
    def requires_user_action(self) -> bool:
        return self is MatchStatus.PENDING

    @property
    def has_user_decision(self) -> bool:
        return self in (MatchStatus.SELECTED, MatchStatus.SKIPPED)

    @property
    def is_automatic(self) -> bool:
        return self is MatchStatus.AUTO

    @property
    def display_description(self) -> str:
        """User-facing label for the status."""
        return _STATUS_DISPLAY[self]

    def __str__(self) -> str:
        return self.value


_STATUS_DISPLAY = {
    MatchStatus.AUTO: "Auto-selected",
    MatchStatus.PENDING: "Needs review",
    MatchStatus.SELECTED: "Selected",
    MatchStatus.SKIPPED: "Skipped",
}


class MatchQuality(Enum):
    """Coarse quality bucket derived from a confidence score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @classmethod
    def from_confidence(cls, confidence: float) -> "MatchQuality":
        if confidence >= 0.9:
            return cls.EXCELLENT
        if confidence >= 0.7:
            return cls.GOOD
        if confidence >= 0.5:
            return cls.FAIR
        return cls.POOR


_QUALITY_INDICATORS = {
    MatchQuality.EXCELLENT: "🟢",
    MatchQuality.GOOD: "🟡",
    MatchQuality.FAIR: "🟠",
    MatchQuality.POOR: "🔴",
}


@dataclass(frozen=True)
class MatchedSong:
    """
    Pairing of an extracted song with its catalog candidate and status.

    This is the unit the review session operates on and the unit handed
    to playlist creation. It is frozen; use with_status() to obtain the
    updated record when the status changes.

    Attributes:
        original_song: The song as mentioned in the source content.
        catalog_song: The catalog candidate chosen for it.
        match_status: Current review status.
        preview_url: Optional preview audio URL of the candidate.

    Example:
        match = MatchedSong(original, candidate, MatchStatus.PENDING)
        accepted = match.with_status(MatchStatus.SELECTED)
    """

    original_song: Song
    catalog_song: Song
    match_status: MatchStatus
    preview_url: str | None = None

    def with_status(self, status: MatchStatus) -> "MatchedSong":
        """Return a copy of this match with a different status."""
        return replace(self, match_status=status)

    @property
    def confidence(self) -> float:
        """Confidence of the catalog candidate (populated by the scorer)."""
        return self.catalog_song.confidence

    @property
    def catalog_id(self) -> str | None:
        return self.catalog_song.catalog_id

    @property
    def is_included_in_playlist(self) -> bool:
        return self.match_status.is_included_in_playlist

    @property
    def requires_user_action(self) -> bool:
        return self.match_status.requires_user_action

    @property
    def display_title(self) -> str:
        """Candidate title, or "original → candidate" when they differ."""
        if self.original_song.title.lower() == self.catalog_song.title.lower():
            return self.catalog_song.title
        return f"{self.original_song.title} → {self.catalog_song.title}"

    @property
    def display_artist(self) -> str:
        """Candidate artist, or "original → candidate" when they differ."""
        if self.original_song.artist.lower() == self.catalog_song.artist.lower():
            return self.catalog_song.artist
        return f"{self.original_song.artist} → {self.catalog_song.artist}"

    @property
    def quality(self) -> MatchQuality:
        return MatchQuality.from_confidence(self.confidence)

    @property
    def quality_indicator(self) -> str:
        return _QUALITY_INDICATORS[self.quality]

    def __str__(self) -> str:
        marker = "✅" if self.is_included_in_playlist else "❌"
        return (
            f"{marker} {self.display_artist} - {self.display_title} "
            f"({self.match_status.display_description})"
        )


@dataclass(frozen=True)
class SelectionSummary:
    """
    Status counts for a list of matches.

    Attributes:
        total_matches: Number of matches summarized.
        auto_selected: Matches with status AUTO.
        requires_review: Matches with status PENDING.
        skipped: Matches with status SKIPPED.
        selected: Matches with status SELECTED.
        included: Matches that will be in the playlist.
    """

    total_matches: int
    auto_selected: int
    requires_review: int
    skipped: int
    selected: int
    included: int

    @property
    def percentage_auto_selected(self) -> float:
        if self.total_matches == 0:
            return 0.0
        return self.auto_selected / self.total_matches * 100.0

    @property
    def percentage_requires_review(self) -> float:
        if self.total_matches == 0:
            return 0.0
        return self.requires_review / self.total_matches * 100.0
