"""
Playlist request workflow for playlist-creator.

Components:
    - PlaylistRequest: One run from source content to playlist
    - ProcessingStatus: Lifecycle state of a request
    - AudioProcessor, Transcriber, MusicExtractor: Protocols for the
      stages that turn content into extracted songs
    - PlaylistWorkflow: Search, review and playlist creation

Usage:
    from playlist_creator.workflow import PlaylistRequest, PlaylistWorkflow

    request = PlaylistRequest(extracted_songs=songs)
    outcome = workflow.process(request)
"""

from playlist_creator.workflow.models import (
    AudioProcessor,
    MusicExtractor,
    PlaylistRequest,
    ProcessingStatus,
    Transcriber,
)
from playlist_creator.workflow.runner import (
    MatchingOutcome,
    PlaylistWorkflow,
    generate_playlist_name,
)

__all__ = [
    # Models
    "PlaylistRequest",
    "ProcessingStatus",
    "AudioProcessor",
    "Transcriber",
    "MusicExtractor",
    # Workflow
    "MatchingOutcome",
    "PlaylistWorkflow",
    "generate_playlist_name",
]
