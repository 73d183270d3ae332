"""Test search query strategies"""

from playlist_creator.matching.models import Song
from playlist_creator.matching.queries import clean_search_term, generate_query_strategies


class TestCleanSearchTerm:
    """Test search term cleanup"""

    def test_removes_quotes_and_parentheticals(self):
        """Test quote and parenthetical removal"""
        assert clean_search_term('"Hey Jude" (live)') == "Hey Jude"

    def test_removes_possessive(self):
        """Test possessive removal"""
        assert clean_search_term("Guns N' Roses's hit") == "Guns N' Roses hit"

    def test_collapses_whitespace(self):
        """Test whitespace normalization"""
        assert clean_search_term("  Let   It  Be ") == "Let It Be"


class TestGenerateQueryStrategies:
    """Test query strategy generation"""

    def test_artist_with_the_prefix(self):
        """Test that the 'The' variant drops the prefix"""
        queries = generate_query_strategies(Song("Let It Be", "The Beatles"))
        assert queries == ["Let It Be The Beatles", "Let It Be Beatles"]

    def test_artist_without_the_prefix(self):
        """Test that the 'The' variant adds the prefix"""
        queries = generate_query_strategies(Song("Bohemian Rhapsody", "Queen"))
        assert queries == ["Bohemian Rhapsody Queen", "Bohemian Rhapsody The Queen"]

    def test_terms_are_cleaned(self):
        """Test that queries use cleaned title and artist"""
        queries = generate_query_strategies(Song('"Hey Jude" (Remastered)', "The Beatles"))
        assert queries[0] == "Hey Jude The Beatles"

    def test_queries_are_unique(self):
        """Test case-insensitive deduplication"""
        for song in [Song("Help", "The Beatles"), Song("Help", "Beatles"), Song("X", "the")]:
            queries = generate_query_strategies(song)
            assert len({q.lower() for q in queries}) == len(queries)
