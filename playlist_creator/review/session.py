"""
Card-style review of ambiguous matches.

A ReviewSession walks the user through an ordered list of matches one
card at a time. Each accept/reject decision moves the cursor forward and
is recorded so it can be undone. Batch operations let the user finish
the tail of the list at once, or settle every card above/below a
confidence threshold without moving the cursor.

Status Transitions:
    PENDING  -> SELECTED   accept (single, tail or high-confidence batch)
    PENDING  -> SKIPPED    reject (single, tail or low-confidence batch)
    SELECTED -> PENDING    undo
    SKIPPED  -> PENDING    undo
    any      -> PENDING    reset

    AUTO cards are never changed by accept, reject or the batches. Deciding
    on an AUTO card only moves the cursor past it and records nothing, so
    undo can never turn an automatic match back into a pending one.

    The threshold batches only touch PENDING cards, so they never flip
    a decision the user already made.

Order Guarantee:
    The session never reorders matches. Index i of the session is always
    the i-th song mentioned in the source content.

Thread Safety:
    Not thread-safe. A session belongs to whoever created it (the CLI
    review loop, a UI, a script).

Usage:
    session = ReviewSession(matches)
    while not session.is_complete:
        card = session.current_match
        if user_likes(card):
            session.accept_current_match()
        else:
            session.reject_current_match()

    included = session.included_matches
"""

from playlist_creator.core.logger import get_logger
from playlist_creator.matching.models import MatchedSong, MatchStatus, SelectionSummary
from playlist_creator.matching.selector import generate_selection_summary


logger = get_logger(__name__)


DEFAULT_HIGH_CONFIDENCE_THRESHOLD = 0.9
DEFAULT_LOW_CONFIDENCE_THRESHOLD = 0.5


class ReviewSession:
    """
    Stateful accept/reject/undo workflow over an ordered list of matches.

    Attributes:
        _matches: Full match list in chronological order, all statuses.
        _current_index: Index of the card currently presented.
        _history: Stack of indices acted on by accept/reject (single or
                  tail batch). Each undo pops one index.

    Every operation on an empty or completed session is a no-op.

    Example:
        session = ReviewSession(matches)
        session.accept_current_match()
        session.reject_current_match()
        session.undo()                 # second card back to PENDING
        session.accept_all()           # remaining cards SELECTED
    """

    def __init__(self, matches: list[MatchedSong]) -> None:
        """
        Initialize the session.

        Args:
            matches: Matches to review, in chronological order. The list
                     is copied; the caller's list is never modified.
        """
        self._matches: list[MatchedSong] = list(matches)
        self._current_index = 0
        self._history: list[int] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def matches(self) -> tuple[MatchedSong, ...]:
        """Read-only view of the full match list with current statuses."""
        return tuple(self._matches)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_match(self) -> MatchedSong | None:
        """The card being presented, or None once the session is complete."""
        if self._current_index < len(self._matches):
            return self._matches[self._current_index]
        return None

    @property
    def is_complete(self) -> bool:
        return self._current_index >= len(self._matches)

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def progress(self) -> float:
        """Fraction of cards visited, 0.0 for an empty session."""
        if not self._matches:
            return 0.0
        return self._current_index / len(self._matches)

    @property
    def remaining_count(self) -> int:
        return len(self._matches) - self._current_index

    @property
    def accepted_matches(self) -> list[MatchedSong]:
        return self._with_status(MatchStatus.SELECTED)

    @property
    def rejected_matches(self) -> list[MatchedSong]:
        return self._with_status(MatchStatus.SKIPPED)

    @property
    def pending_matches(self) -> list[MatchedSong]:
        return self._with_status(MatchStatus.PENDING)

    @property
    def auto_matches(self) -> list[MatchedSong]:
        return self._with_status(MatchStatus.AUTO)

    @property
    def included_matches(self) -> list[MatchedSong]:
        """Matches that go into the playlist, in chronological order."""
        return [m for m in self._matches if m.is_included_in_playlist]

    def selection_summary(self) -> SelectionSummary:
        return generate_selection_summary(self._matches)

    # =========================================================================
    # Single-card actions
    # =========================================================================

    def accept_current_match(self) -> None:
        """Mark the current card SELECTED (AUTO stays AUTO) and move on."""
        self._decide_current(MatchStatus.SELECTED)

    def reject_current_match(self) -> None:
        """Mark the current card SKIPPED (AUTO stays AUTO) and move on."""
        self._decide_current(MatchStatus.SKIPPED)

    def undo(self) -> None:
        """
        Revert the most recent accept/reject.

        The card goes back to PENDING (not to whatever status it had
        before) and becomes the current card again.
        """
        if not self._history:
            return

        index = self._history.pop()
        self._current_index = index
        self._set_status(index, MatchStatus.PENDING)

    # =========================================================================
    # Batch actions
    # =========================================================================

    def accept_all(self) -> None:
        """Mark every non-AUTO card from the cursor on SELECTED and finish."""
        self._decide_remaining(MatchStatus.SELECTED)

    def reject_all(self) -> None:
        """Mark every non-AUTO card from the cursor on SKIPPED and finish."""
        self._decide_remaining(MatchStatus.SKIPPED)

    def accept_all_high_confidence(
        self,
        threshold: float = DEFAULT_HIGH_CONFIDENCE_THRESHOLD
    ) -> None:
        """
        Accept every pending card with confidence >= threshold.

        Works on the whole list, visited or not. The cursor does not move
        and the changes are not recorded for undo.

        Args:
            threshold: Lowest confidence accepted (inclusive).
        """
        changed = self._decide_where(
            MatchStatus.SELECTED,
            lambda confidence: confidence >= threshold
        )
        logger.debug(f"Accepted {changed} matches with confidence >= {threshold}")

    def reject_all_low_confidence(
        self,
        threshold: float = DEFAULT_LOW_CONFIDENCE_THRESHOLD
    ) -> None:
        """
        Reject every pending card with confidence <= threshold.

        Works on the whole list, visited or not. The cursor does not move
        and the changes are not recorded for undo.

        Args:
            threshold: Highest confidence rejected (inclusive).
        """
        changed = self._decide_where(
            MatchStatus.SKIPPED,
            lambda confidence: confidence <= threshold
        )
        logger.debug(f"Rejected {changed} matches with confidence <= {threshold}")

    def reset(self) -> None:
        """Put every card back to PENDING and start over."""
        self._matches = [m.with_status(MatchStatus.PENDING) for m in self._matches]
        self._current_index = 0
        self._history.clear()

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _with_status(self, status: MatchStatus) -> list[MatchedSong]:
        return [m for m in self._matches if m.match_status is status]

    def _set_status(self, index: int, status: MatchStatus) -> None:
        self._matches[index] = self._matches[index].with_status(status)

    def _decide_current(self, status: MatchStatus) -> None:
        if self.is_complete:
            return

        if self._matches[self._current_index].match_status is not MatchStatus.AUTO:
            self._set_status(self._current_index, status)
            self._history.append(self._current_index)
        self._current_index += 1

    def _decide_remaining(self, status: MatchStatus) -> None:
        for index in range(self._current_index, len(self._matches)):
            if self._matches[index].match_status is MatchStatus.AUTO:
                continue
            self._set_status(index, status)
            self._history.append(index)
        self._current_index = len(self._matches)

    def _decide_where(self, status: MatchStatus, predicate) -> int:
        changed = 0
        for index, match in enumerate(self._matches):
            if match.match_status is not MatchStatus.PENDING:
                continue
            if predicate(match.confidence):
                self._set_status(index, status)
                changed += 1
        return changed
