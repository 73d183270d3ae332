"""
Cleanup and duplicate detection for extracted songs.

Songs extracted from a transcript carry noise that a catalog search
doesn't need: video-title suffixes ("- Official Video"), wrapping quotes,
"by ..." prefixes on artists, ALL CAPS, or "Beatles, The" ordering. The
same song is also often mentioned more than once in a long episode.

This module cleans extracted songs and removes likely duplicates before
they are searched, so the review session only shows each song once.

Duplicate Detection:
    Two songs are likely duplicates when, after normalization:
        1. Title and artist are equal, or
        2. The artist is equal and the titles are near-identical
           (normalized Levenshtein similarity above DUPLICATE_TITLE_SIMILARITY,
           computed with rapidfuzz), or
        3. The artist is equal and the titles are equal once parenthetical
           and bracketed parts are removed ("Song (Live)" vs "Song").

Usage:
    from playlist_creator.matching.normalizer import deduplicate_songs

    songs = deduplicate_songs(extracted_songs)
"""

import re
import string

from rapidfuzz.distance import Levenshtein

from playlist_creator.matching.models import Song


# Normalized Levenshtein similarity above which two titles by the same
# artist are considered the same song.
DUPLICATE_TITLE_SIMILARITY = 0.85

# Suffixes copied from video titles, removed case-insensitively
TITLE_ARTIFACTS = (
    " - Official Music Video",
    " - Official Video",
    " (Official Video)",
    " [Official Video]",
    " - Official Audio",
    " (Official Audio)",
    " - Lyrics",
    " (Lyrics)",
)

ARTIST_PREFIXES = ("by ", "from ", "artist: ", "performed by ")

UNCERTAINTY_MARKERS = ("?", "[", "]", "unclear", "unknown")

# Quote pairs that may wrap a whole title
_WRAPPING_QUOTES = (('"', '"'), ("'", "'"), ("“", "”"))

_PARENTHETICAL_PATTERN = re.compile(r"\s*\([^)]*\)\s*")
_BRACKET_PATTERN = re.compile(r"\s*\[[^\]]*\]\s*")


def normalize_song_title(title: str) -> str:
    """
    Clean a song title.

    Examples:
        normalize_song_title("  hey   jude - Official Video")  # "Hey jude"
        normalize_song_title('"YESTERDAY"')                   # "Yesterday"
    """
    normalized = _normalize_whitespace(title)
    normalized = _remove_title_artifacts(normalized)
    normalized = _remove_wrapping_quotes(normalized)
    normalized = _fix_capitalization(normalized)
    return normalized.strip()


def normalize_artist_name(artist: str) -> str:
    """
    Clean an artist name.

    Examples:
        normalize_artist_name("by Queen")      # "Queen"
        normalize_artist_name("Beatles, The")  # "The Beatles"
    """
    normalized = _normalize_whitespace(artist)
    normalized = _remove_artist_prefixes(normalized)
    normalized = _fix_capitalization(normalized)
    normalized = _normalize_artist_format(normalized)
    return normalized.strip()


def normalize_song(song: Song) -> Song:
    """Return a copy of song with normalized title and artist."""
    return Song(
        title=normalize_song_title(song.title),
        artist=normalize_artist_name(song.artist),
        catalog_id=song.catalog_id,
        confidence=song.confidence
    )


def adjust_confidence(base_confidence: float, title: str, artist: str) -> float:
    """
    Adjust an extraction confidence based on how well-formed the data is.

    Args:
        base_confidence: Confidence reported by the extractor.
        title: Extracted title.
        artist: Extracted artist.

    Returns:
        Adjusted confidence clamped to [0.0, 1.0].

    Adjustments:
        - Title shorter than 3 characters: x0.7
        - Artist shorter than 2 characters: x0.7
        - Any uncertainty marker in title or artist: x0.6 (once)
        - Title and artist both at least 3 characters without "...": x1.1
    """
    adjusted = base_confidence

    if len(title) < 3:
        adjusted *= 0.7
    if len(artist) < 2:
        adjusted *= 0.7

    title_lower = title.lower()
    artist_lower = artist.lower()
    if any(m in title_lower or m in artist_lower for m in UNCERTAINTY_MARKERS):
        adjusted *= 0.6

    if (len(title) >= 3 and len(artist) >= 3
            and "..." not in title and "..." not in artist):
        adjusted = min(adjusted * 1.1, 1.0)

    return max(0.0, min(1.0, adjusted))


def are_likely_duplicates(song1: Song, song2: Song) -> bool:
    """
    Check whether two extracted songs are the same song with minor variations.

    Args:
        song1: First song.
        song2: Second song.

    Returns:
        True if the songs are likely duplicates.
    """
    title1 = normalize_song_title(song1.title).lower()
    title2 = normalize_song_title(song2.title).lower()
    artist1 = normalize_artist_name(song1.artist).lower()
    artist2 = normalize_artist_name(song2.artist).lower()

    if artist1 != artist2:
        return False

    if title1 == title2:
        return True

    if Levenshtein.normalized_similarity(title1, title2) > DUPLICATE_TITLE_SIMILARITY:
        return True

    return _remove_parenthetical(title1) == _remove_parenthetical(title2)


def deduplicate_songs(songs: list[Song]) -> list[Song]:
    """
    Drop later mentions of songs that were already mentioned.

    The first mention of each song is kept, so the chronological order of
    the remaining songs is unchanged.

    Args:
        songs: Extracted songs in mention order.

    Returns:
        Songs without likely duplicates, in the same order.
    """
    unique: list[Song] = []
    for song in songs:
        if any(are_likely_duplicates(song, kept) for kept in unique):
            continue
        unique.append(song)
    return unique


# =============================================================================
# Internal helpers
# =============================================================================

def _normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def _remove_title_artifacts(text: str) -> str:
    result = text
    for artifact in TITLE_ARTIFACTS:
        result = re.sub(re.escape(artifact), "", result, flags=re.IGNORECASE)
    return result


def _remove_artist_prefixes(text: str) -> str:
    result = text
    for prefix in ARTIST_PREFIXES:
        if result.lower().startswith(prefix):
            result = result[len(prefix):]
    return result


def _fix_capitalization(text: str) -> str:
    # ALL CAPS becomes title case; short all-lowercase gets a capital first
    # letter; mixed case ("iNeed", "k.d. lang") is left alone.
    if text == text.upper() and len(text) > 3:
        return string.capwords(text.lower())
    if text == text.lower() and len(text) <= 30:
        return text[:1].upper() + text[1:]
    return text


def _remove_wrapping_quotes(text: str) -> str:
    for opening, closing in _WRAPPING_QUOTES:
        if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
            return text[1:-1]
    return text


def _normalize_artist_format(artist: str) -> str:
    comma_index = artist.rfind(",")
    if comma_index != -1 and artist[comma_index + 1:].strip().lower() == "the":
        return f"The {artist[:comma_index].strip()}"
    return artist


def _remove_parenthetical(text: str) -> str:
    result = _PARENTHETICAL_PATTERN.sub(" ", text)
    result = _BRACKET_PATTERN.sub(" ", result)
    return result.strip()
