"""
Match confidence scoring.

Scores how likely a catalog candidate is the song that was mentioned in
the source content. The result is always clamped to [0.0, 1.0].

Scoring Algorithm:
    1. Normalize the four strings (trim + lowercase) for comparison only.
    2. Exact title and artist                      -> 1.0
    3. Exact title, artist similarity >= 0.8       -> 0.95
    4. Otherwise 0.5 * title_similarity + 0.4 * artist_similarity.
       The weighted sum tops out at 0.9, so only steps 2 and 3 can
       produce a score above it.
    5. Version penalties on the candidate title (they stack):
           live        -0.15  (unless the original mentions it)
           remix       -0.15  (unless the original mentions it)
           karaoke     -0.40
           tribute     -0.40
           remastered  -0.05  (unless the original mentions it)
    6. Featured-artist bonus +0.1 when the original artist has "ft." or
       "feat." and the candidate title has "feat." or the candidate
       artist has "&".
    7. Clamp.

Known Edge Case:
    An exact title with artist similarity just under 0.8 skips step 3 and
    falls through to the weighted sum, landing well below 0.9. This cliff
    is kept as-is; see tests/test_scorer.py.
"""

from playlist_creator.matching.models import Song
from playlist_creator.matching.similarity import string_similarity


# =============================================================================
# SCORING WEIGHTS AND SHORT-CIRCUITS
# =============================================================================

EXACT_MATCH_CONFIDENCE = 1.0
TITLE_EXACT_CONFIDENCE = 0.95

# Artist similarity needed for the exact-title short-circuit
TITLE_EXACT_ARTIST_THRESHOLD = 0.8

TITLE_WEIGHT = 0.5
ARTIST_WEIGHT = 0.4


# =============================================================================
# VERSION PENALTIES AND FEATURED-ARTIST BONUS
# =============================================================================

# (keyword, penalty, only_if_missing_from_original)
# Applied in order to the candidate title. All matching entries stack.
VERSION_PENALTIES = (
    ("live", 0.15, True),
    ("remix", 0.15, True),
    ("karaoke", 0.4, False),
    ("tribute", 0.4, False),
    ("remastered", 0.05, True),
)

FEATURED_ARTIST_MARKERS = ("ft.", "feat.")
FEATURED_ARTIST_BONUS = 0.1


def _normalize(text: str) -> str:
    return text.strip().lower()


def calculate_match_confidence(
    original: Song,
    candidate_title: str,
    candidate_artist: str
) -> float:
    """
    Score a catalog candidate against the originally mentioned song.

    Args:
        original: The song extracted from the source content.
        candidate_title: Title of the catalog candidate.
        candidate_artist: Artist name of the catalog candidate.

    Returns:
        Confidence in [0.0, 1.0].

    Example:
        calculate_match_confidence(Song("Yesterday", "Beatles"), "Yesterday", "Beatles")
        # 1.0
    """
    original_title = _normalize(original.title)
    original_artist = _normalize(original.artist)
    result_title = _normalize(candidate_title)
    result_artist = _normalize(candidate_artist)

    if result_title == original_title and result_artist == original_artist:
        return EXACT_MATCH_CONFIDENCE

    artist_score = string_similarity(original_artist, result_artist)

    if result_title == original_title and artist_score >= TITLE_EXACT_ARTIST_THRESHOLD:
        return TITLE_EXACT_CONFIDENCE

    title_score = string_similarity(original_title, result_title)
    confidence = title_score * TITLE_WEIGHT + artist_score * ARTIST_WEIGHT

    confidence -= version_penalty(original_title, result_title)

    if _has_featured_artist_match(original_artist, result_title, result_artist):
        confidence += FEATURED_ARTIST_BONUS

    return min(max(confidence, 0.0), 1.0)


def version_penalty(original_title: str, candidate_title: str) -> float:
    """
    Total penalty for version keywords found in the candidate title.

    Both titles are expected to be normalized already.

    Args:
        original_title: Normalized title of the mentioned song.
        candidate_title: Normalized title of the catalog candidate.

    Returns:
        Sum of all applicable penalties (0.0 if none apply).
    """
    total = 0.0
    for keyword, penalty, only_if_missing in VERSION_PENALTIES:
        if keyword not in candidate_title:
            continue
        if only_if_missing and keyword in original_title:
            continue
        total += penalty
    return total


def _has_featured_artist_match(
    original_artist: str,
    candidate_title: str,
    candidate_artist: str
) -> bool:
    if not any(marker in original_artist for marker in FEATURED_ARTIST_MARKERS):
        return False
    return "feat." in candidate_title or "&" in candidate_artist
