"""
Search query strategies.

Catalog search engines are sensitive to small differences in how an
artist is written ("Beatles" vs "The Beatles") and to noise that
transcripts and language models add to titles (quotes, possessives,
parenthetical remarks). This module turns one extracted song into an
ordered list of query strings; the searcher tries them in order and
stops at the first one that returns candidates.

Strategies:
    A. "{title} {artist}"
    B. "{title} The {artist}"      if the artist does not start with "the "
    C. "{title} {artist minus The}" if the artist starts with "the "

Queries are deduplicated case-insensitively, keeping the first one seen.
"""

import re

from playlist_creator.matching.models import Song


_PARENTHETICAL_PATTERN = re.compile(r"\([^)]*\)")
_THE_PREFIX = "the "


def clean_search_term(term: str) -> str:
    """
    Remove characters and fragments that confuse catalog search.

    Args:
        term: Raw title or artist.

    Returns:
        Cleaned term with quotes, possessive "'s " and parenthetical
        groups removed and whitespace collapsed.

    Examples:
        clean_search_term('"Hey Jude" (live)')     # 'Hey Jude'
        clean_search_term("Guns N' Roses's hit")  # "Guns N' Roses hit"
    """
    cleaned = term.replace('"', "")
    cleaned = cleaned.replace("'s ", " ")
    cleaned = _PARENTHETICAL_PATTERN.sub("", cleaned)
    return " ".join(cleaned.split())


def generate_query_strategies(song: Song) -> list[str]:
    """
    Build the ordered list of search queries for a song.

    Args:
        song: Extracted song to search for.

    Returns:
        Deduplicated queries, most specific first.

    Example:
        generate_query_strategies(Song("Let It Be", "The Beatles"))
        # ['Let It Be The Beatles', 'Let It Be Beatles']
    """
    clean_title = clean_search_term(song.title)
    clean_artist = clean_search_term(song.artist)

    queries = [f"{clean_title} {clean_artist}"]

    if clean_artist.lower().startswith(_THE_PREFIX):
        artist_without_the = clean_artist[len(_THE_PREFIX):]
        queries.append(f"{clean_title} {artist_without_the}")
    else:
        queries.append(f"{clean_title} The {clean_artist}")

    seen: set[str] = set()
    unique_queries = []
    for query in queries:
        key = query.lower()
        if key in seen:
            continue
        seen.add(key)
        unique_queries.append(query)

    return unique_queries
