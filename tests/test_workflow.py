"""Test the end-to-end playlist workflow"""

from datetime import date
from unittest.mock import Mock

import pytest

from playlist_creator.catalog.searcher import CatalogSearcher
from playlist_creator.core.exceptions import PlaylistCreationError, WorkflowError
from playlist_creator.matching.models import MatchStatus, Song
from playlist_creator.playlist.creator import CreatedPlaylist, PlaylistSubmitter
from playlist_creator.workflow.models import PlaylistRequest, ProcessingStatus
from playlist_creator.workflow.runner import PlaylistWorkflow, generate_playlist_name


@pytest.fixture
def catalog_client(make_client, make_track):
    return make_client(responses={
        "Yesterday The Beatles": [make_track("1", "Yesterday", "The Beatles", "https://p/1")],
        "Hey Jude The Beatles": [make_track("2", "Hey Jude (Live)", "The Beatles")],
    })


@pytest.fixture
def service():
    service = Mock()
    service.create_playlist.side_effect = lambda name, description, song_ids: CreatedPlaylist(
        id="p1", name=name, song_count=len(song_ids)
    )
    return service


@pytest.fixture
def workflow(catalog_client, service):
    return PlaylistWorkflow(
        CatalogSearcher(catalog_client, rate_limit_delay=0),
        PlaylistSubmitter(service),
        auto_select_threshold=0.9
    )


@pytest.fixture
def file_request(sample_songs):
    return PlaylistRequest(source_file_path="/tmp/episode-42.json", extracted_songs=list(sample_songs))


class TestMatchSongs:
    """Test search and classification"""

    def test_classifies_and_keeps_order(self, workflow, sample_songs):
        """Test AUTO, PENDING and unmatched outcomes"""
        outcome = workflow.match_songs(sample_songs, show_progress=False)

        assert [m.original_song.title for m in outcome.matches] == ["Yesterday", "Hey Jude"]
        assert outcome.matches[0].match_status is MatchStatus.AUTO
        assert outcome.matches[0].preview_url == "https://p/1"
        assert outcome.matches[1].match_status is MatchStatus.PENDING
        assert [s.title for s in outcome.unmatched] == ["Mystery Song"]

        summary = outcome.summary
        assert summary.total_matches == 2
        assert summary.auto_selected == 1
        assert summary.requires_review == 1

    def test_empty(self, workflow, catalog_client):
        outcome = workflow.match_songs([], show_progress=False)
        assert outcome.matches == []
        assert catalog_client.queries == []

    def test_progress_bar_updates(self, workflow, sample_songs):
        """Test that an existing progress bar receives one update per song"""
        progress_bar = Mock()
        workflow.match_songs(sample_songs, progress_bar=progress_bar)
        assert progress_bar.update.call_count == 3


class TestProcess:
    """Test request processing"""

    def test_process_fills_request(self, workflow, file_request):
        outcome = workflow.process(file_request, show_progress=False)

        assert file_request.status is ProcessingStatus.PROCESSING
        assert len(file_request.extracted_songs) == 3
        assert file_request.matched_songs == outcome.matches

    def test_duplicates_removed(self, workflow, catalog_client):
        """Test that repeated mentions are searched once"""
        request = PlaylistRequest(
            source_file_path="ep.json",
            extracted_songs=[Song("Yesterday", "The Beatles"), Song("Yesterday", "The Beatles")]
        )
        outcome = workflow.process(request, show_progress=False)

        assert len(outcome.matches) == 1
        assert catalog_client.queries == ["Yesterday The Beatles"]

    def test_no_source(self, workflow, sample_songs):
        """Test that a request without a source is rejected"""
        with pytest.raises(WorkflowError):
            workflow.process(PlaylistRequest(extracted_songs=sample_songs), show_progress=False)

    def test_completed_request(self, workflow, file_request):
        file_request.mark_completed()
        with pytest.raises(WorkflowError):
            workflow.process(file_request, show_progress=False)

    def test_extractor_used_for_transcript(self, catalog_client, service):
        """Test extraction when the request has only a transcript"""
        extractor = Mock()
        extractor.extract_songs.return_value = [Song("Yesterday", "The Beatles")]
        workflow = PlaylistWorkflow(
            CatalogSearcher(catalog_client, rate_limit_delay=0),
            PlaylistSubmitter(service),
            extractor=extractor
        )
        request = PlaylistRequest(source_url="https://example.com/ep.mp3", transcript="we played yesterday")

        outcome = workflow.process(request, show_progress=False)

        extractor.extract_songs.assert_called_once_with("we played yesterday")
        assert [m.catalog_id for m in outcome.matches] == ["1"]

    def test_extractor_failure_marks_request_failed(self, catalog_client, service):
        extractor = Mock()
        extractor.extract_songs.side_effect = RuntimeError("model unavailable")
        workflow = PlaylistWorkflow(
            CatalogSearcher(catalog_client, rate_limit_delay=0),
            PlaylistSubmitter(service),
            extractor=extractor
        )
        request = PlaylistRequest(source_url="https://example.com/ep.mp3", transcript="...")

        with pytest.raises(RuntimeError):
            workflow.process(request, show_progress=False)
        assert request.status is ProcessingStatus.ERROR
        assert request.error_message == "model unavailable"

    def test_nothing_to_extract(self, workflow):
        """Test a request with neither songs nor an extractor"""
        request = PlaylistRequest(source_file_path="ep.json", transcript="...")
        with pytest.raises(WorkflowError):
            workflow.process(request, show_progress=False)
        assert request.status is ProcessingStatus.ERROR


class TestReview:
    """Test review session handling"""

    def test_start_review_holds_pending_only(self, workflow, make_match, pending_matches):
        matches = [make_match("Something", "The Beatles", 1.0, MatchStatus.AUTO, "9")] + pending_matches
        session = workflow.start_review(matches)
        assert len(session.matches) == 4

    def test_apply_review_merges_in_order(self, workflow, make_match, pending_matches):
        """Test that decisions replace pending entries and AUTO is untouched"""
        auto = make_match("Something", "The Beatles", 1.0, MatchStatus.AUTO, "9")
        matches = [pending_matches[0], auto] + pending_matches[1:]

        session = workflow.start_review(matches)
        session.accept_current_match()
        session.reject_current_match()

        merged = workflow.apply_review(matches, session)

        assert [m.catalog_id for m in merged] == ["1", "9", "2", "3", "4"]
        assert [m.match_status for m in merged] == [
            MatchStatus.SELECTED,
            MatchStatus.AUTO,
            MatchStatus.SKIPPED,
            MatchStatus.PENDING,
            MatchStatus.PENDING,
        ]

    def test_apply_review_foreign_session(self, workflow, pending_matches):
        session = workflow.start_review(pending_matches[:2])
        with pytest.raises(WorkflowError):
            workflow.apply_review(pending_matches, session)


class TestCreatePlaylist:
    """Test playlist creation"""

    def test_submits_included_only(self, workflow, service, file_request, make_match):
        """Test that only AUTO and SELECTED songs are submitted"""
        file_request.mark_processing()
        matches = [
            make_match("Yesterday", "The Beatles", 1.0, MatchStatus.AUTO, "1"),
            make_match("Hey Jude", "The Beatles", 0.6, MatchStatus.SKIPPED, "2"),
            make_match("Let It Be", "The Beatles", 0.7, MatchStatus.SELECTED, "3"),
        ]

        playlist = workflow.create_playlist(file_request, matches, "Mix")

        assert playlist.song_count == 2
        name, description, song_ids = service.create_playlist.call_args.args
        assert name == "Mix"
        assert song_ids == ["1", "3"]
        assert "from episode-42.json" in description
        assert file_request.status is ProcessingStatus.COMPLETE
        assert file_request.playlist_id == "p1"
        assert file_request.playlist_name == "Mix"
        assert file_request.matched_songs == matches

    def test_default_name(self, workflow, file_request, make_match):
        file_request.mark_processing()
        playlist = workflow.create_playlist(
            file_request, [make_match(status=MatchStatus.AUTO)]
        )
        assert playlist.name == generate_playlist_name()

    def test_nothing_included(self, workflow, service, file_request, make_match):
        """Test that an empty selection is refused"""
        file_request.mark_processing()
        with pytest.raises(WorkflowError):
            workflow.create_playlist(file_request, [make_match(status=MatchStatus.SKIPPED)])
        service.create_playlist.assert_not_called()
        assert file_request.status is ProcessingStatus.PROCESSING

    def test_backend_failure(self, workflow, service, file_request, make_match):
        """Test that a backend failure marks the request failed"""
        file_request.mark_processing()
        service.create_playlist.side_effect = RuntimeError("service down")

        with pytest.raises(PlaylistCreationError):
            workflow.create_playlist(file_request, [make_match(status=MatchStatus.AUTO)])
        assert file_request.status is ProcessingStatus.ERROR


class TestPlaylistName:
    """Test default playlist names"""

    def test_format(self):
        assert generate_playlist_name(date(2025, 3, 3)) == "Playlist Creator - Mar 3, 2025"

    def test_double_digit_day(self):
        assert generate_playlist_name(date(2024, 12, 25)) == "Playlist Creator - Dec 25, 2024"
