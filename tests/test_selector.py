"""Test match classification and match models"""

import pytest

from playlist_creator.core.exceptions import StatusDecodingError
from playlist_creator.matching.models import MatchedSong, MatchQuality, MatchStatus, SearchResult, Song
from playlist_creator.matching.selector import (
    create_matched_song,
    determine_match_status,
    generate_selection_summary,
    match_explanation,
    process_matches,
    quality_description,
)


def _search_result(title, artist, confidence, catalog_id="1", preview_url=None):
    return SearchResult(
        song=Song(title, artist, catalog_id=catalog_id, confidence=confidence),
        match_confidence=confidence,
        catalog_id=catalog_id,
        preview_url=preview_url
    )


class TestDetermineMatchStatus:
    """Test the auto-select threshold"""

    def test_threshold_is_inclusive(self):
        """Test confidences around the default threshold"""
        assert determine_match_status(0.9) is MatchStatus.AUTO
        assert determine_match_status(1.0) is MatchStatus.AUTO
        assert determine_match_status(0.89) is MatchStatus.PENDING

    def test_custom_threshold(self):
        """Test thresholds are used as given"""
        assert determine_match_status(0.5, auto_select_threshold=0.5) is MatchStatus.AUTO
        assert determine_match_status(1.0, auto_select_threshold=1.5) is MatchStatus.PENDING

    def test_never_produces_user_statuses(self):
        """Test that only AUTO and PENDING come out of classification"""
        for confidence in (0.0, 0.3, 0.7, 0.9, 1.0):
            assert determine_match_status(confidence) in (MatchStatus.AUTO, MatchStatus.PENDING)


class TestCreateMatchedSong:
    """Test pairing extracted songs with search results"""

    def test_status_comes_from_search_confidence(self):
        """Test that the original song's confidence is ignored"""
        original = Song("Yesterday", "The Beatles", confidence=0.1)
        match = create_matched_song(original, _search_result("Yesterday", "The Beatles", 0.95))
        assert match.match_status is MatchStatus.AUTO
        assert match.original_song is original

    def test_preview_url_is_carried_over(self):
        """Test preview URL propagation"""
        result = _search_result("Hey Jude", "The Beatles", 0.6, preview_url="https://p/1")
        match = create_matched_song(Song("Hey Jude", "The Beatles"), result)
        assert match.match_status is MatchStatus.PENDING
        assert match.preview_url == "https://p/1"
        assert match.catalog_id == "1"

    def test_process_matches_uses_song_confidence(self):
        """Test classification of songs without candidates"""
        songs = [Song("A", "X", confidence=0.95), Song("B", "Y", confidence=0.2)]
        matches = process_matches(songs)
        assert [m.match_status for m in matches] == [MatchStatus.AUTO, MatchStatus.PENDING]
        assert matches[0].catalog_song is songs[0]


class TestSelectionSummary:
    """Test status counts"""

    def test_counts(self, make_match):
        """Test one match of each status"""
        matches = [
            make_match(status=MatchStatus.AUTO),
            make_match(status=MatchStatus.PENDING),
            make_match(status=MatchStatus.SELECTED),
            make_match(status=MatchStatus.SKIPPED),
            make_match(status=MatchStatus.AUTO),
        ]
        summary = generate_selection_summary(matches)
        assert summary.total_matches == 5
        assert summary.auto_selected == 2
        assert summary.requires_review == 1
        assert summary.selected == 1
        assert summary.skipped == 1
        assert summary.included == 3
        assert summary.percentage_auto_selected == pytest.approx(40.0)
        assert summary.percentage_requires_review == pytest.approx(20.0)

    def test_empty(self):
        """Test percentages of an empty summary"""
        summary = generate_selection_summary([])
        assert summary.total_matches == 0
        assert summary.percentage_auto_selected == 0.0
        assert summary.percentage_requires_review == 0.0


class TestMatchStatus:
    """Test the status enum"""

    def test_decode(self):
        """Test decoding stored tags"""
        assert MatchStatus.decode("auto") is MatchStatus.AUTO
        assert MatchStatus.decode("skipped") is MatchStatus.SKIPPED

    def test_decode_unknown_raises(self):
        """Test that unknown tags have no fallback"""
        with pytest.raises(StatusDecodingError) as exc_info:
            MatchStatus.decode("maybe")
        assert exc_info.value.details["value"] == "maybe"

        with pytest.raises(StatusDecodingError):
            MatchStatus.decode("AUTO")

    def test_inclusion(self):
        """Test which statuses end up in the playlist"""
        assert MatchStatus.AUTO.is_included_in_playlist
        assert MatchStatus.SELECTED.is_included_in_playlist
        assert not MatchStatus.PENDING.is_included_in_playlist
        assert not MatchStatus.SKIPPED.is_included_in_playlist

    def test_flags(self):
        """Test helper properties"""
        assert MatchStatus.PENDING.requires_user_action
        assert MatchStatus.SELECTED.has_user_decision
        assert MatchStatus.SKIPPED.has_user_decision
        assert not MatchStatus.AUTO.has_user_decision
        assert MatchStatus.AUTO.is_automatic
        assert MatchStatus.AUTO.display_description == "Auto-selected"
        assert str(MatchStatus.PENDING) == "pending"


class TestMatchedSong:
    """Test the matched song model"""

    def test_with_status_returns_copy(self, make_match):
        """Test that the original match is not modified"""
        match = make_match(status=MatchStatus.PENDING)
        selected = match.with_status(MatchStatus.SELECTED)
        assert match.match_status is MatchStatus.PENDING
        assert selected.match_status is MatchStatus.SELECTED
        assert selected.catalog_song == match.catalog_song

    def test_display_title_shows_variation(self):
        """Test display of differing titles"""
        match = MatchedSong(
            original_song=Song("Hey Jude", "The Beatles"),
            catalog_song=Song("Hey Jude (Remastered)", "the beatles", catalog_id="1", confidence=0.8),
            match_status=MatchStatus.PENDING
        )
        assert match.display_title == "Hey Jude → Hey Jude (Remastered)"
        assert match.display_artist == "the beatles"

    def test_quality(self, make_match):
        """Test quality buckets"""
        assert make_match(confidence=0.95).quality is MatchQuality.EXCELLENT
        assert make_match(confidence=0.75).quality is MatchQuality.GOOD
        assert make_match(confidence=0.5).quality is MatchQuality.FAIR
        assert make_match(confidence=0.2).quality is MatchQuality.POOR


class TestDescriptions:
    """Test user-facing match descriptions"""

    def test_quality_description(self):
        """Test quality labels"""
        assert quality_description(0.9) == "Excellent match"
        assert quality_description(0.7) == "Good match"
        assert quality_description(0.5) == "Fair match"
        assert quality_description(0.49) == "Poor match"

    def test_match_explanation(self):
        """Test explanation for a match that needs review"""
        result = _search_result("Hey Jude (Remastered)", "The Beatles", 0.82)
        explanation = match_explanation(Song("Hey Jude", "The Beatles"), result)
        assert explanation.startswith("Good match (82.0%) - Requires review")
        assert 'Title variation: "Hey Jude" → "Hey Jude (Remastered)"' in explanation

    def test_match_explanation_auto(self):
        """Test explanation for an auto-selected match"""
        result = _search_result("Yesterday", "The Beatles", 1.0)
        explanation = match_explanation(Song("Yesterday", "The Beatles"), result)
        assert explanation == "Excellent match (100.0%) - Automatically selected"
