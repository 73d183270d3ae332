"""
Song matching module for playlist-creator.

Turns a song mentioned in content into a scored, classified catalog match.

Components:
    - models: Song, SearchResult, MatchedSong, MatchStatus, SelectionSummary
    - similarity: Fuzzy string similarity in [0, 1]
    - scorer: Confidence of a candidate against the mentioned song
    - queries: Search query strategies, most specific first
    - ranker: Candidate filtering and ordering
    - selector: AUTO/PENDING classification and summaries
    - normalizer: Cleanup and deduplication of extracted songs

Usage:
    from playlist_creator.matching import (
        Song,
        calculate_match_confidence,
        create_matched_song,
    )

    confidence = calculate_match_confidence(original, candidate)
"""

from playlist_creator.matching.models import (
    CatalogCandidate,
    MatchedSong,
    MatchQuality,
    MatchStatus,
    SearchResult,
    SelectionSummary,
    Song,
)
from playlist_creator.matching.normalizer import (
    adjust_confidence,
    are_likely_duplicates,
    deduplicate_songs,
    normalize_artist_name,
    normalize_song,
    normalize_song_title,
)
from playlist_creator.matching.queries import clean_search_term, generate_query_strategies
from playlist_creator.matching.ranker import rank_candidates, top_match
from playlist_creator.matching.scorer import calculate_match_confidence
from playlist_creator.matching.selector import (
    create_matched_song,
    create_matched_songs,
    determine_match_status,
    generate_selection_summary,
    match_explanation,
    process_matches,
    quality_description,
)
from playlist_creator.matching.similarity import string_similarity

__all__ = [
    # Models
    "Song",
    "SearchResult",
    "CatalogCandidate",
    "MatchStatus",
    "MatchQuality",
    "MatchedSong",
    "SelectionSummary",
    # Scoring
    "string_similarity",
    "calculate_match_confidence",
    "generate_query_strategies",
    "clean_search_term",
    "rank_candidates",
    "top_match",
    # Classification
    "determine_match_status",
    "process_matches",
    "create_matched_song",
    "create_matched_songs",
    "generate_selection_summary",
    "quality_description",
    "match_explanation",
    # Normalization
    "normalize_song_title",
    "normalize_artist_name",
    "normalize_song",
    "adjust_confidence",
    "are_likely_duplicates",
    "deduplicate_songs",
]
