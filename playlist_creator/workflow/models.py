"""
Data models for a playlist creation request.

A PlaylistRequest tracks one run of the workflow from source content to
finished playlist: where the songs came from, what was extracted, how
each song was matched, and what playlist was produced. Requests are
persisted by core.database so an interrupted review can be resumed.

The audio, transcription and extraction stages live outside this
package; they are described here as Protocols so that any backend
(speech-to-text service, language model, a JSON file on disk) can feed
the workflow.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from playlist_creator.core.exceptions import StatusDecodingError
from playlist_creator.matching.models import MatchedSong, Song


class ProcessingStatus(Enum):
    """
    Overall state of a playlist request.

    Values:
        IDLE: Nothing has started yet.
        PROCESSING: Extraction, search or review in progress.
        COMPLETE: Playlist created.
        ERROR: Processing failed; the request can be restarted.
    """

    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    @classmethod
    def decode(cls, value: str) -> "ProcessingStatus":
        """
        Decode a stored status tag.

        Raises:
            StatusDecodingError: If value is not one of the known tags.
        """
        try:
            return cls(value)
        except ValueError as e:
            raise StatusDecodingError(
                f"Unknown processing status: {value!r}",
                details={"value": value, "allowed": [s.value for s in cls]}
            ) from e

    @property
    def is_processing(self) -> bool:
        return self is ProcessingStatus.PROCESSING

    @property
    def can_start_processing(self) -> bool:
        """Processing can (re)start from IDLE or ERROR."""
        return self in (ProcessingStatus.IDLE, ProcessingStatus.ERROR)

    @property
    def display_description(self) -> str:
        return _PROCESSING_DESCRIPTIONS[self]

    def __str__(self) -> str:
        return self.value


_PROCESSING_DESCRIPTIONS = {
    ProcessingStatus.IDLE: "Ready to start",
    ProcessingStatus.PROCESSING: "Processing...",
    ProcessingStatus.COMPLETE: "Complete",
    ProcessingStatus.ERROR: "Error occurred",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_request_id() -> str:
    return str(uuid.uuid4())


@dataclass
class PlaylistRequest:
    """
    One playlist creation run.

    Unlike the matching models this is mutable: the workflow fills it in
    as it goes and the database stores whatever state it reached.

    Attributes:
        id: UUID string, generated on creation.
        status: Current ProcessingStatus.
        source_url: Remote source (podcast episode, video, ...), if any.
        source_file_path: Local source file, if any.
        transcript: Transcript text, if the transcription stage ran.
        extracted_songs: Songs extracted from the source, in mention order.
        matched_songs: Matches in mention order with their review status.
        playlist_id: Identifier returned by the playlist backend.
        playlist_name: Name of the created playlist.
        created_at: Creation time (UTC).
        completed_at: Time the request completed or failed (UTC).
        error_message: Failure description when status is ERROR.

    Example:
        request = PlaylistRequest(source_file_path="episode-42.json")
        request.mark_processing()
        request.matched_songs = matches
        request.mark_completed()
    """

    id: str = field(default_factory=_new_request_id)
    status: ProcessingStatus = ProcessingStatus.IDLE
    source_url: str | None = None
    source_file_path: str | None = None
    transcript: str | None = None
    extracted_songs: list[Song] = field(default_factory=list)
    matched_songs: list[MatchedSong] = field(default_factory=list)
    playlist_id: str | None = None
    playlist_name: str | None = None
    created_at: datetime = field(default_factory=_utc_now)
    completed_at: datetime | None = None
    error_message: str | None = None

    @property
    def has_source(self) -> bool:
        return self.source_url is not None or self.source_file_path is not None

    @property
    def source_display_name(self) -> str:
        """Last path component of the source URL or file, or "Unknown Source"."""
        if self.source_url is not None:
            name = PurePosixPath(urlparse(self.source_url).path).name
            return name or self.source_url
        if self.source_file_path is not None:
            return Path(self.source_file_path).name
        return "Unknown Source"

    @property
    def is_finished(self) -> bool:
        return self.status in (ProcessingStatus.COMPLETE, ProcessingStatus.ERROR)

    @property
    def can_process(self) -> bool:
        return self.has_source and self.status.can_start_processing

    @property
    def included_song_count(self) -> int:
        return sum(1 for m in self.matched_songs if m.is_included_in_playlist)

    @property
    def pending_song_count(self) -> int:
        return sum(1 for m in self.matched_songs if m.requires_user_action)

    @property
    def processing_duration(self) -> float | None:
        """Seconds between creation and completion, None while unfinished."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.created_at).total_seconds()

    def mark_processing(self) -> None:
        """Enter PROCESSING. Ignored when the request cannot (re)start."""
        if not self.can_process:
            return
        self.status = ProcessingStatus.PROCESSING
        self.error_message = None
        self.completed_at = None

    def mark_completed(self) -> None:
        self.status = ProcessingStatus.COMPLETE
        self.completed_at = _utc_now()
        self.error_message = None

    def mark_failed(self, error_message: str) -> None:
        self.status = ProcessingStatus.ERROR
        self.completed_at = _utc_now()
        self.error_message = error_message

    def __str__(self) -> str:
        return (
            f"PlaylistRequest({self.id[:8]}): {self.source_display_name} - "
            f"{self.status.display_description} - {self.included_song_count} songs"
        )


# =============================================================================
# Collaborator protocols
# =============================================================================

@runtime_checkable
class AudioProcessor(Protocol):
    """Turns an uploaded file or a URL into a normalized audio file."""

    def process_file(self, path: Path) -> Path: ...

    def process_url(self, url: str) -> Path: ...


@runtime_checkable
class Transcriber(Protocol):
    """Speech-to-text for a processed audio file."""

    def transcribe(self, audio_path: Path) -> str: ...


@runtime_checkable
class MusicExtractor(Protocol):
    """Finds song mentions in a transcript, in the order they are mentioned."""

    def extract_songs(self, transcript: str) -> list[Song]: ...
