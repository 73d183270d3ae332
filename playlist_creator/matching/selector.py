"""
Automatic match selection.

Decides which matches skip review. A single threshold splits matches into
AUTO (confidence at or above it) and PENDING (everything else). SELECTED
and SKIPPED are never produced here; only the review session creates
them from explicit user actions.

The quality labels ("Excellent match", ...) are for display only and are
independent of the auto-select threshold.

Usage:
    from playlist_creator.matching.selector import (
        create_matched_song,
        generate_selection_summary,
    )

    match = create_matched_song(original, ranked[0], auto_select_threshold=0.9)
    summary = generate_selection_summary(matches)
    print(f"{summary.auto_selected} auto-selected, {summary.requires_review} need review")
"""

from playlist_creator.matching.models import (
    MatchedSong,
    MatchQuality,
    MatchStatus,
    SearchResult,
    SelectionSummary,
    Song,
)


DEFAULT_AUTO_SELECT_THRESHOLD = 0.9

_QUALITY_DESCRIPTIONS = {
    MatchQuality.EXCELLENT: "Excellent match",
    MatchQuality.GOOD: "Good match",
    MatchQuality.FAIR: "Fair match",
    MatchQuality.POOR: "Poor match",
}


def determine_match_status(
    confidence: float,
    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
) -> MatchStatus:
    """
    Classify a confidence score.

    The threshold is inclusive and is used as given (no range checks).

    Args:
        confidence: Match confidence.
        auto_select_threshold: Lowest confidence that is auto-selected.

    Returns:
        MatchStatus.AUTO or MatchStatus.PENDING.
    """
    if confidence >= auto_select_threshold:
        return MatchStatus.AUTO
    return MatchStatus.PENDING


def process_matches(
    songs: list[Song],
    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
) -> list[MatchedSong]:
    """
    Classify songs that have no separate catalog candidate yet.

    Each song is used as both original and candidate.

    Args:
        songs: Songs carrying their own confidence.
        auto_select_threshold: Lowest confidence that is auto-selected.

    Returns:
        MatchedSong list in input order.
    """
    return [
        MatchedSong(
            original_song=song,
            catalog_song=song,
            match_status=determine_match_status(song.confidence, auto_select_threshold)
        )
        for song in songs
    ]


def create_matched_song(
    original: Song,
    search_result: SearchResult,
    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
) -> MatchedSong:
    """
    Pair an extracted song with a ranked search result.

    The status is derived from search_result.match_confidence, never from
    the original song's confidence.

    Args:
        original: The song from extraction.
        search_result: Ranked candidate for it.
        auto_select_threshold: Lowest confidence that is auto-selected.

    Returns:
        MatchedSong with status AUTO or PENDING.
    """
    return MatchedSong(
        original_song=original,
        catalog_song=search_result.song,
        match_status=determine_match_status(
            search_result.match_confidence,
            auto_select_threshold
        ),
        preview_url=search_result.preview_url
    )


def create_matched_songs(
    original: Song,
    search_results: list[SearchResult],
    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
) -> list[MatchedSong]:
    """Pair an extracted song with each of several ranked results."""
    return [
        create_matched_song(original, result, auto_select_threshold)
        for result in search_results
    ]


def generate_selection_summary(matches: list[MatchedSong]) -> SelectionSummary:
    """
    Count matches by status.

    Args:
        matches: Matches to summarize.

    Returns:
        SelectionSummary. Percentages are 0.0 for an empty list.
    """
    counts = {status: 0 for status in MatchStatus}
    included = 0
    for match in matches:
        counts[match.match_status] += 1
        if match.is_included_in_playlist:
            included += 1

    return SelectionSummary(
        total_matches=len(matches),
        auto_selected=counts[MatchStatus.AUTO],
        requires_review=counts[MatchStatus.PENDING],
        skipped=counts[MatchStatus.SKIPPED],
        selected=counts[MatchStatus.SELECTED],
        included=included
    )


def quality_description(confidence: float) -> str:
    """
    User-facing quality label for a confidence score.

    Returns:
        "Excellent match" (>= 0.9), "Good match" (>= 0.7),
        "Fair match" (>= 0.5) or "Poor match".
    """
    return _QUALITY_DESCRIPTIONS[MatchQuality.from_confidence(confidence)]


def match_explanation(
    original: Song,
    search_result: SearchResult,
    auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
) -> str:
    """
    Explain a match decision in a few lines.

    Args:
        original: The song from extraction.
        search_result: Ranked candidate for it.
        auto_select_threshold: Threshold used for the decision.

    Returns:
        Multi-line string, e.g.:
            Good match (82.0%) - Requires review
            Title variation: "Hey Jude" → "Hey Jude (Remastered 2015)"
    """
    confidence = search_result.match_confidence
    status = determine_match_status(confidence, auto_select_threshold)

    explanation = f"{quality_description(confidence)} ({confidence * 100:.1f}%)"
    if status is MatchStatus.AUTO:
        explanation += " - Automatically selected"
    else:
        explanation += " - Requires review"

    candidate = search_result.song
    if original.title.lower() != candidate.title.lower():
        explanation += f'\nTitle variation: "{original.title}" → "{candidate.title}"'
    if original.artist.lower() != candidate.artist.lower():
        explanation += f'\nArtist variation: "{original.artist}" → "{candidate.artist}"'

    return explanation
