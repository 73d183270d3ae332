"""
String similarity primitive used by the confidence scorer.

The comparison is deliberately cheap and word-order insensitive:

    1. Case-insensitive equality           -> 1.0
    2. One string contains the other        -> 0.8
    3. Word-set overlap |A & B| / max(|A|, |B|)

There is no edit distance or phonetic matching here.
"""

EXACT_MATCH_SCORE = 1.0
SUBSTRING_MATCH_SCORE = 0.8


def string_similarity(a: str, b: str) -> float:
    """
    Compare two strings and return a similarity in [0.0, 1.0].

    Args:
        a: First string.
        b: Second string.

    Returns:
        1.0 for a case-insensitive exact match, 0.8 if either string
        contains the other, otherwise the word overlap ratio.

    Examples:
        string_similarity("Queen", "queen")                          # 1.0
        string_similarity("Bohemian Rhapsody",
                          "Bohemian Rhapsody (Remastered)")         # 0.8
        string_similarity("foo bar", "bar baz")                      # 0.5
    """
    s1 = a.lower()
    s2 = b.lower()

    if s1 == s2:
        return EXACT_MATCH_SCORE

    if s1 in s2 or s2 in s1:
        return SUBSTRING_MATCH_SCORE

    words1 = set(s1.split())
    words2 = set(s2.split())
    if not words1 or not words2:
        return 0.0

    return len(words1 & words2) / max(len(words1), len(words2))
