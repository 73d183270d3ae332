"""Test extracted song cleanup and deduplication"""

import pytest

from playlist_creator.matching.models import Song
from playlist_creator.matching.normalizer import (
    adjust_confidence,
    are_likely_duplicates,
    deduplicate_songs,
    normalize_artist_name,
    normalize_song,
    normalize_song_title,
)


class TestNormalizeSongTitle:
    """Test title cleanup"""

    def test_removes_video_artifacts(self):
        """Test suffixes copied from video titles"""
        assert normalize_song_title("  hey   jude - Official Video") == "Hey jude"
        assert normalize_song_title("Bohemian Rhapsody (Official Audio)") == "Bohemian Rhapsody"

    def test_removes_wrapping_quotes(self):
        """Test quotes around the whole title"""
        assert normalize_song_title('"YESTERDAY"') == "Yesterday"

    def test_all_caps(self):
        """Test ALL CAPS becomes title case"""
        assert normalize_song_title("LET IT BE") == "Let It Be"

    def test_mixed_case_untouched(self):
        """Test deliberate capitalization is kept"""
        assert normalize_song_title("iNeed You") == "iNeed You"


class TestNormalizeArtistName:
    """Test artist cleanup"""

    def test_removes_prefixes(self):
        """Test 'by' and 'performed by' prefixes"""
        assert normalize_artist_name("by Queen") == "Queen"
        assert normalize_artist_name("performed by Adele") == "Adele"

    def test_trailing_the(self):
        """Test 'X, The' ordering"""
        assert normalize_artist_name("Beatles, The") == "The Beatles"

    def test_all_caps(self):
        """Test ALL CAPS artist"""
        assert normalize_artist_name("QUEEN") == "Queen"

    def test_normalize_song_keeps_other_fields(self):
        """Test that catalog ID and confidence survive normalization"""
        song = normalize_song(Song("LET IT BE", "by The Beatles", catalog_id="7", confidence=0.4))
        assert song == Song("Let It Be", "The Beatles", catalog_id="7", confidence=0.4)


class TestAdjustConfidence:
    """Test extraction confidence adjustment"""

    def test_well_formed_boost(self):
        """Test the boost for well-formed entries"""
        assert adjust_confidence(0.8, "Yesterday", "The Beatles") == pytest.approx(0.88)

    def test_boost_is_capped(self):
        """Test the upper bound"""
        assert adjust_confidence(1.0, "Yesterday", "The Beatles") == 1.0

    def test_short_fields_penalized(self):
        """Test short title and artist penalties"""
        assert adjust_confidence(1.0, "Hi", "X") == pytest.approx(0.49)

    def test_uncertainty_marker(self):
        """Test the uncertainty penalty"""
        assert adjust_confidence(1.0, "Yesterday?", "The Beatles") == pytest.approx(0.66)
        assert adjust_confidence(1.0, "Yesterday", "Unknown...") == pytest.approx(0.6)

    def test_lower_bound(self):
        """Test negative input is clamped"""
        assert adjust_confidence(-1.0, "Yesterday", "The Beatles") == 0.0


class TestDuplicates:
    """Test duplicate detection"""

    def test_same_song_different_formatting(self):
        """Test equality after normalization"""
        assert are_likely_duplicates(Song("Yesterday", "The Beatles"), Song("yesterday", "Beatles, The"))

    def test_different_artist(self):
        """Test that the artist must match"""
        assert not are_likely_duplicates(Song("Yesterday", "The Beatles"), Song("Yesterday", "Boyz II Men"))

    def test_near_identical_titles(self):
        """Test a transcription typo"""
        assert are_likely_duplicates(Song("Bohemian Rhapsody", "Queen"), Song("Bohemian Rapsody", "Queen"))

    def test_parenthetical_variant(self):
        """Test a live version of the same song"""
        assert are_likely_duplicates(Song("Hey Jude (Live)", "The Beatles"), Song("Hey Jude", "The Beatles"))

    def test_different_titles(self):
        """Test different songs by the same artist"""
        assert not are_likely_duplicates(Song("Help", "The Beatles"), Song("Hello", "The Beatles"))

    def test_deduplicate_keeps_first_mention_in_order(self):
        """Test that later mentions are dropped"""
        songs = [
            Song("Yesterday", "The Beatles"),
            Song("Bohemian Rhapsody", "Queen"),
            Song("yesterday", "The Beatles"),
            Song("Hey Jude", "The Beatles"),
        ]
        unique = deduplicate_songs(songs)
        assert unique == [songs[0], songs[1], songs[3]]

    def test_deduplicate_empty(self):
        """Test an empty list"""
        assert deduplicate_songs([]) == []
