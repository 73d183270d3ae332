"""Test the card review session"""

from playlist_creator.matching.models import MatchStatus
from playlist_creator.review.session import ReviewSession


def _statuses(session):
    return [m.match_status for m in session.matches]


P, SEL, SKIP = MatchStatus.PENDING, MatchStatus.SELECTED, MatchStatus.SKIPPED


class TestSessionState:
    """Test the initial state and read-only views"""

    def test_initial_state(self, pending_matches):
        """Test a fresh session"""
        session = ReviewSession(pending_matches)
        assert session.current_index == 0
        assert session.current_match == pending_matches[0]
        assert session.progress == 0.0
        assert session.remaining_count == 4
        assert not session.is_complete
        assert not session.can_undo

    def test_empty_session(self):
        """Test that an empty session is complete and inert"""
        session = ReviewSession([])
        assert session.is_complete
        assert session.current_match is None
        assert session.progress == 0.0

        session.accept_current_match()
        session.undo()
        session.accept_all()
        assert session.matches == ()

    def test_caller_list_is_not_modified(self, pending_matches):
        """Test that the session works on its own copy"""
        original = list(pending_matches)
        session = ReviewSession(pending_matches)
        session.accept_all()
        assert pending_matches == original
        assert isinstance(session.matches, tuple)


class TestSingleDecisions:
    """Test accept, reject and undo"""

    def test_accept_and_reject_advance(self, pending_matches):
        """Test that each decision moves to the next card"""
        session = ReviewSession(pending_matches)
        session.accept_current_match()
        session.reject_current_match()
        assert _statuses(session) == [SEL, SKIP, P, P]
        assert session.current_index == 2
        assert session.progress == 0.5
        assert session.can_undo

    def test_undo_restores_pending_and_cursor(self, pending_matches):
        """Test undo in reverse order"""
        session = ReviewSession(pending_matches)
        session.accept_current_match()
        session.reject_current_match()

        session.undo()
        assert _statuses(session) == [SEL, P, P, P]
        assert session.current_index == 1

        session.undo()
        assert _statuses(session) == [P, P, P, P]
        assert session.current_index == 0
        assert not session.can_undo

    def test_undo_without_history_is_noop(self, pending_matches):
        """Test undo on a fresh session"""
        session = ReviewSession(pending_matches)
        session.undo()
        assert session.current_index == 0
        assert _statuses(session) == [P, P, P, P]

    def test_decisions_after_completion_are_ignored(self, pending_matches):
        """Test accept/reject on a complete session"""
        session = ReviewSession(pending_matches)
        for _ in pending_matches:
            session.accept_current_match()
        assert session.is_complete
        assert session.progress == 1.0

        session.reject_current_match()
        assert _statuses(session) == [SEL, SEL, SEL, SEL]
        assert session.current_index == 4

    def test_auto_card_is_left_untouched(self, make_match, pending_matches):
        """Test that deciding on an AUTO card only moves past it"""
        auto = make_match("Something", "The Beatles", 1.0, MatchStatus.AUTO, "9")
        session = ReviewSession([auto, pending_matches[0]])

        session.reject_current_match()
        assert _statuses(session) == [MatchStatus.AUTO, P]
        assert session.current_index == 1
        assert not session.can_undo

        session.accept_current_match()
        session.undo()
        session.undo()
        assert _statuses(session) == [MatchStatus.AUTO, P]
        assert session.current_index == 1
        assert [m.catalog_id for m in session.included_matches] == ["9"]

    def test_order_never_changes(self, pending_matches):
        """Test that decisions keep chronological order"""
        session = ReviewSession(pending_matches)
        session.reject_current_match()
        session.accept_all_high_confidence()
        session.accept_all()
        titles = [m.original_song.title for m in session.matches]
        assert titles == ["Yesterday", "Hey Jude", "Let It Be", "Help!"]


class TestBatchDecisions:
    """Test tail and threshold batches"""

    def test_accept_all_finishes_tail(self, pending_matches):
        """Test accept_all from the middle"""
        session = ReviewSession(pending_matches)
        session.reject_current_match()
        session.accept_all()
        assert _statuses(session) == [SKIP, SEL, SEL, SEL]
        assert session.is_complete

    def test_tail_batch_is_undoable_one_card_at_a_time(self, pending_matches):
        """Test undo after accept_all"""
        session = ReviewSession(pending_matches)
        session.accept_all()
        session.undo()
        assert _statuses(session) == [SEL, SEL, SEL, P]
        assert session.current_index == 3
        assert not session.is_complete

    def test_tail_batch_skips_auto_cards(self, make_match, pending_matches):
        """Test that a tail batch and its undo leave AUTO cards alone"""
        auto = make_match("Something", "The Beatles", 1.0, MatchStatus.AUTO, "9")
        session = ReviewSession([pending_matches[0], auto, pending_matches[1]])

        session.reject_all()
        assert _statuses(session) == [SKIP, MatchStatus.AUTO, SKIP]

        session.undo()
        session.undo()
        assert _statuses(session) == [P, MatchStatus.AUTO, P]
        assert session.current_index == 0
        assert not session.can_undo

    def test_reject_all(self, pending_matches):
        """Test reject_all"""
        session = ReviewSession(pending_matches)
        session.accept_current_match()
        session.reject_all()
        assert _statuses(session) == [SEL, SKIP, SKIP, SKIP]

    def test_accept_high_confidence(self, pending_matches):
        """Test the inclusive high-confidence batch"""
        session = ReviewSession(pending_matches)
        session.accept_all_high_confidence(0.92)
        assert _statuses(session) == [SEL, P, P, SEL]
        assert session.current_index == 0
        assert not session.can_undo

    def test_reject_low_confidence(self, pending_matches):
        """Test the inclusive low-confidence batch"""
        session = ReviewSession(pending_matches)
        session.reject_all_low_confidence(0.3)
        assert _statuses(session) == [P, P, SKIP, P]

        session.reject_all_low_confidence()
        assert _statuses(session) == [P, P, SKIP, P]

        session.reject_all_low_confidence(0.6)
        assert _statuses(session) == [P, SKIP, SKIP, P]

    def test_threshold_batches_keep_user_decisions(self, pending_matches):
        """Test that decided cards are not flipped"""
        session = ReviewSession(pending_matches)
        session.reject_current_match()
        session.accept_all_high_confidence(0.9)
        assert _statuses(session) == [SKIP, P, P, SEL]

    def test_reset(self, pending_matches):
        """Test starting over"""
        session = ReviewSession(pending_matches)
        session.accept_current_match()
        session.reject_all_low_confidence()
        session.reset()
        assert _statuses(session) == [P, P, P, P]
        assert session.current_index == 0
        assert not session.can_undo


class TestSessionViews:
    """Test filtered views and summary"""

    def test_filtered_views(self, pending_matches):
        """Test accepted/rejected/pending/included lists"""
        session = ReviewSession(pending_matches)
        session.accept_current_match()
        session.reject_current_match()

        assert [m.catalog_id for m in session.accepted_matches] == ["1"]
        assert [m.catalog_id for m in session.rejected_matches] == ["2"]
        assert [m.catalog_id for m in session.pending_matches] == ["3", "4"]
        assert [m.catalog_id for m in session.included_matches] == ["1"]
        assert session.auto_matches == []

    def test_selection_summary(self, pending_matches):
        """Test summary of a finished review"""
        session = ReviewSession(pending_matches)
        session.accept_current_match()
        session.reject_all()
        summary = session.selection_summary()
        assert summary.total_matches == 4
        assert summary.selected == 1
        assert summary.skipped == 3
        assert summary.included == 1
