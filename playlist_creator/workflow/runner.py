"""
End-to-end playlist workflow.

    extracted songs -> deduplicate -> catalog search -> classify
        -> review session -> playlist submission

PlaylistWorkflow wires the stages together. Its collaborators (catalog
searcher, playlist submitter, optional music extractor) are passed in,
so the same workflow runs against the iTunes Search API from the CLI and
against test doubles in the test suite.

Unmatched Songs:
    A song for which the catalog returns nothing never becomes a
    MatchedSong. It is logged to the unmatched songs report and counted
    in MatchingOutcome.unmatched, and that's all.

Usage:
    workflow = PlaylistWorkflow(searcher, submitter, auto_select_threshold=0.9)
    outcome = workflow.match_songs(workflow.deduplicate(songs))
    session = workflow.start_review(outcome.matches)
    ...  # drive the session
    playlist = workflow.create_playlist(request, list(session.matches))
"""

from dataclasses import dataclass, field
from datetime import date

from playlist_creator.catalog.searcher import CatalogSearcher
from playlist_creator.core.exceptions import PlaylistCreationError, WorkflowError
from playlist_creator.core.logger import (
    format_auto_selected_message,
    get_logger,
    log_review_required,
    log_unmatched_song,
)
from playlist_creator.core.progress import SearchProgressBar
from playlist_creator.matching.models import MatchedSong, SearchResult, SelectionSummary, Song
from playlist_creator.matching.normalizer import deduplicate_songs
from playlist_creator.matching.selector import (
    DEFAULT_AUTO_SELECT_THRESHOLD,
    create_matched_song,
    generate_selection_summary,
)
from playlist_creator.playlist.creator import CreatedPlaylist, PlaylistSubmitter
from playlist_creator.review.session import ReviewSession
from playlist_creator.workflow.models import MusicExtractor, PlaylistRequest


logger = get_logger(__name__)


PLAYLIST_NAME_PREFIX = "Playlist Creator"


@dataclass(frozen=True)
class MatchingOutcome:
    """
    Result of searching the catalog for a list of songs.

    Attributes:
        matches: One MatchedSong per song that got a candidate, in the
                 order the songs were given.
        unmatched: Songs for which the search produced nothing.
    """

    matches: list[MatchedSong] = field(default_factory=list)
    unmatched: list[Song] = field(default_factory=list)

    @property
    def summary(self) -> SelectionSummary:
        return generate_selection_summary(self.matches)


def generate_playlist_name(day: date | None = None) -> str:
    """
    Default playlist name, e.g. "Playlist Creator - Mar 3, 2025".

    Args:
        day: Date to use, today when None.
    """
    day = day or date.today()
    return f"{PLAYLIST_NAME_PREFIX} - {day:%b} {day.day}, {day.year}"


class PlaylistWorkflow:
    """
    Runs extracted songs through search, review and playlist creation.

    Attributes:
        searcher: Catalog searcher.
        submitter: Playlist submitter.
        extractor: Optional MusicExtractor for requests carrying a transcript.
        auto_select_threshold: Confidence at or above which a match skips review.
    """

    def __init__(
        self,
        searcher: CatalogSearcher,
        submitter: PlaylistSubmitter,
        extractor: MusicExtractor | None = None,
        auto_select_threshold: float = DEFAULT_AUTO_SELECT_THRESHOLD
    ) -> None:
        self.searcher = searcher
        self.submitter = submitter
        self.extractor = extractor
        self.auto_select_threshold = auto_select_threshold

    # =========================================================================
    # Extraction
    # =========================================================================

    def extract_songs(self, request: PlaylistRequest) -> list[Song]:
        """
        Songs for a request, extracting them from the transcript if needed.

        Songs already present on the request are returned as they are.

        Raises:
            WorkflowError: If the request has neither songs nor a transcript
                           that an extractor can process.
        """
        if request.extracted_songs:
            return list(request.extracted_songs)

        if request.transcript is None or self.extractor is None:
            raise WorkflowError(
                "Request has no extracted songs and no transcript to extract from",
                details={"request_id": request.id}
            )

        songs = self.extractor.extract_songs(request.transcript)
        logger.info(f"Extracted {len(songs)} song mention(s) from transcript")
        return songs

    def deduplicate(self, songs: list[Song]) -> list[Song]:
        """Drop repeated mentions, keeping the first one."""
        unique = deduplicate_songs(songs)
        if len(unique) != len(songs):
            logger.info(f"Removed {len(songs) - len(unique)} duplicate mention(s)")
        return unique

    # =========================================================================
    # Search and classification
    # =========================================================================

    def match_songs(
        self,
        songs: list[Song],
        progress_bar: SearchProgressBar | None = None,
        show_progress: bool = True
    ) -> MatchingOutcome:
        """
        Search the catalog for each song and classify its top result.

        Args:
            songs: Songs in mention order.
            progress_bar: Optional existing progress bar to update.
            show_progress: Create a progress bar when none is given.

        Returns:
            MatchingOutcome with matches in mention order.
        """
        if not songs:
            return MatchingOutcome()

        matches: list[MatchedSong] = []
        unmatched: list[Song] = []

        own_progress_bar = progress_bar is None and show_progress
        if own_progress_bar:
            progress_bar = SearchProgressBar(total=len(songs))
            progress_bar.start()

        def on_result(song: Song, results: list[SearchResult], error: Exception | None) -> None:
            if not results:
                unmatched.append(song)
                reason = str(error) if error is not None else "No results"
                log_unmatched_song(logger, song.title, song.artist, reason)
                if progress_bar is not None:
                    progress_bar.update(matched=False)
                return

            match = create_matched_song(song, results[0], self.auto_select_threshold)
            matches.append(match)

            candidate = match.catalog_song
            if match.requires_user_action:
                log_review_required(
                    logger,
                    title=song.title,
                    artist=song.artist,
                    candidate_title=candidate.title,
                    candidate_artist=candidate.artist,
                    catalog_id=candidate.catalog_id,
                    confidence=match.confidence
                )
            else:
                message = format_auto_selected_message(
                    candidate.artist, candidate.title, match.confidence
                )
                if progress_bar is not None:
                    progress_bar.log(message)
                logger.debug(f"Auto-selected {candidate} for {song}")

            if progress_bar is not None:
                progress_bar.update(matched=True, auto_selected=match.match_status.is_automatic)

        try:
            self.searcher.search_batch(songs, on_result=on_result)
        finally:
            if own_progress_bar:
                progress_bar.stop()

        outcome = MatchingOutcome(matches=matches, unmatched=unmatched)
        summary = outcome.summary
        logger.info(
            f"Found {summary.total_matches} matches: {summary.auto_selected} auto-selected, "
            f"{summary.requires_review} need review, {len(unmatched)} unmatched"
        )
        return outcome

    def process(self, request: PlaylistRequest, show_progress: bool = True) -> MatchingOutcome:
        """
        Run extraction, deduplication and search for a request.

        The request's extracted_songs and matched_songs are filled in and
        the request stays PROCESSING until create_playlist() completes it.

        Raises:
            WorkflowError: If the request cannot be processed.
        """
        if not request.can_process:
            raise WorkflowError(
                f"Request cannot be processed in state '{request.status}'",
                details={"request_id": request.id, "status": str(request.status)}
            )

        request.mark_processing()
        try:
            songs = self.deduplicate(self.extract_songs(request))
            outcome = self.match_songs(songs, show_progress=show_progress)
        except Exception as e:
            request.mark_failed(str(e))
            raise

        request.extracted_songs = songs
        request.matched_songs = list(outcome.matches)
        return outcome

    # =========================================================================
    # Review and playlist creation
    # =========================================================================

    def start_review(self, matches: list[MatchedSong]) -> ReviewSession:
        """
        Review session over the matches that need a decision.

        Only PENDING matches are loaded, in mention order; AUTO and
        already-decided matches never become cards. Use apply_review() to
        put the decisions back into the full list.
        """
        return ReviewSession([m for m in matches if m.requires_user_action])

    def apply_review(
        self,
        matches: list[MatchedSong],
        session: ReviewSession
    ) -> list[MatchedSong]:
        """
        Merge a review session back into the full match list.

        Args:
            matches: The list start_review() was called with.
            session: The session it returned.

        Returns:
            New list in the same order, PENDING entries replaced by the
            session's version of them.

        Raises:
            WorkflowError: If the session does not belong to matches.
        """
        reviewed = list(session.matches)
        pending_count = sum(1 for m in matches if m.requires_user_action)
        if pending_count != len(reviewed):
            raise WorkflowError(
                "Review session does not match the match list",
                details={"pending": pending_count, "reviewed": len(reviewed)}
            )

        decisions = iter(reviewed)
        return [next(decisions) if m.requires_user_action else m for m in matches]

    def generate_playlist_name(self, day: date | None = None) -> str:
        return generate_playlist_name(day)

    def create_playlist(
        self,
        request: PlaylistRequest,
        matches: list[MatchedSong],
        name: str | None = None
    ) -> CreatedPlaylist:
        """
        Submit the included matches and complete the request.

        Args:
            request: Request being completed. Updated in place.
            matches: Full reviewed match list in mention order.
            name: Playlist name, generate_playlist_name() when None.

        Returns:
            The created playlist.

        Raises:
            WorkflowError: If no match is included.
            PlaylistCreationError: If the backend fails (request marked failed).
        """
        request.matched_songs = list(matches)
        included = [m for m in matches if m.is_included_in_playlist]

        if not included:
            raise WorkflowError(
                "No songs selected for playlist",
                details={"request_id": request.id, "total_matches": len(matches), "included": 0}
            )

        playlist_name = name or generate_playlist_name()
        source_name = request.source_display_name if request.has_source else None

        logger.info(f"Creating '{playlist_name}' with {len(included)} songs")

        try:
            playlist = self.submitter.create_playlist(playlist_name, included, source_name)
        except PlaylistCreationError as e:
            request.mark_failed(e.message)
            raise

        request.playlist_id = playlist.id
        request.playlist_name = playlist.name
        request.mark_completed()
        return playlist
