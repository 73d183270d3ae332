"""
Candidate ranking.

Turns the raw candidates returned by a catalog client into SearchResult
objects ordered by confidence. Ranking never filters: the minimum
confidence only matters when picking the top match.
"""

from typing import Iterable

from playlist_creator.matching.models import CatalogCandidate, SearchResult, Song
from playlist_creator.matching.scorer import calculate_match_confidence


# Default minimum confidence for the top match. 0.0 means a match is
# always returned when there is any candidate; low-quality matches are
# still shown to the user with a "Poor match" label.
DEFAULT_MINIMUM_CONFIDENCE = 0.0


def rank_candidates(
    candidates: Iterable[CatalogCandidate],
    original: Song
) -> list[SearchResult]:
    """
    Score and sort catalog candidates for a song.

    Args:
        candidates: Raw search hits, in the order the catalog returned them.
        original: The extracted song the candidates were searched for.

    Returns:
        One SearchResult per candidate, sorted by match_confidence
        descending. The sort is stable: candidates with equal confidence
        keep their input order.
    """
    results = []
    for candidate in candidates:
        confidence = calculate_match_confidence(
            original,
            candidate.title,
            candidate.artist_name
        )
        song = Song(
            title=candidate.title,
            artist=candidate.artist_name,
            catalog_id=candidate.id,
            confidence=confidence
        )
        results.append(
            SearchResult(
                song=song,
                match_confidence=confidence,
                catalog_id=candidate.id,
                preview_url=candidate.preview_url
            )
        )

    results.sort(key=lambda r: r.match_confidence, reverse=True)
    return results


def top_match(
    results: list[SearchResult],
    minimum_confidence: float = DEFAULT_MINIMUM_CONFIDENCE
) -> SearchResult | None:
    """
    Pick the best ranked result that clears the minimum confidence.

    Args:
        results: Output of rank_candidates().
        minimum_confidence: Lowest acceptable match_confidence (inclusive).

    Returns:
        The first result with match_confidence >= minimum_confidence,
        or None if there is none.
    """
    for result in results:
        if result.match_confidence >= minimum_confidence:
            return result
    return None
