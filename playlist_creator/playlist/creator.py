"""
Playlist submission.

Hands the final review result to a playlist backend. Only matches whose
status is included (AUTO or SELECTED) are submitted, in the order they
were mentioned in the source content.

Usage:
    submitter = PlaylistSubmitter(JSONPlaylistExporter(output_dir))
    playlist = submitter.create_playlist(
        "Playlist Creator - Mar 3, 2025",
        session.matches,
        source_name="episode-42.mp3"
    )
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from playlist_creator.core.exceptions import PlaylistCreationError, SongAdditionError
from playlist_creator.core.logger import get_logger
from playlist_creator.matching.models import MatchedSong


logger = get_logger(__name__)


@dataclass(frozen=True)
class CreatedPlaylist:
    """
    Handle to a playlist created by a backend.

    Attributes:
        id: Backend identifier of the playlist.
        name: Playlist name.
        song_count: Number of songs submitted.
        url: Where the playlist can be opened (web URL or file URI), if any.
    """

    id: str
    name: str
    song_count: int
    url: str | None = None


@runtime_checkable
class PlaylistService(Protocol):
    """Backend that stores playlists (a streaming service, a local file, ...)."""

    def create_playlist(
        self,
        name: str,
        description: str,
        song_ids: list[str]
    ) -> CreatedPlaylist: ...

    def add_songs(self, playlist_id: str, song_ids: list[str]) -> None: ...


def included_song_ids(matches: list[MatchedSong]) -> list[str]:
    """
    Catalog IDs of the included matches, in chronological order.

    Matches without a catalog ID cannot be submitted and are left out.
    """
    return [
        match.catalog_id
        for match in matches
        if match.is_included_in_playlist and match.catalog_id is not None
    ]


def generate_playlist_description(
    matches: list[MatchedSong],
    source_name: str | None = None
) -> str:
    """
    Human-readable playlist description.

    N counts every match passed in, included or not.

    Examples:
        generate_playlist_description(matches)            # 3 matches
        # "Playlist with 3 songs. Created with Playlist Creator."
        generate_playlist_description(matches[:1], "ep42.mp3")
        # "Playlist with 1 song from ep42.mp3. Created with Playlist Creator."
    """
    count = len(matches)
    song_word = "song" if count == 1 else "songs"

    if source_name:
        return f"Playlist with {count} {song_word} from {source_name}. Created with Playlist Creator."
    return f"Playlist with {count} {song_word}. Created with Playlist Creator."


class PlaylistSubmitter:
    """
    Submits reviewed matches to a PlaylistService.

    Errors from the backend are re-raised as PlaylistCreationError
    subclasses so callers only need to handle one family.
    """

    def __init__(self, service: PlaylistService) -> None:
        self.service = service

    def create_playlist(
        self,
        name: str,
        matches: list[MatchedSong],
        source_name: str | None = None
    ) -> CreatedPlaylist:
        """
        Create a playlist from the included matches.

        Args:
            name: Playlist name.
            matches: Full match list in chronological order, all statuses.
            source_name: Optional source shown in the description.

        Returns:
            The created playlist.

        Raises:
            PlaylistCreationError: If the backend fails.
        """
        song_ids = included_song_ids(matches)
        description = generate_playlist_description(matches, source_name)

        logger.debug(f"Creating playlist '{name}' with {len(song_ids)} songs")

        try:
            return self.service.create_playlist(name, description, song_ids)
        except PlaylistCreationError:
            raise
        except Exception as e:
            raise PlaylistCreationError(
                f"Failed to create playlist: {e}",
                details={"name": name, "original_error": str(e)}
            ) from e

    def add_songs(self, playlist_id: str, matches: list[MatchedSong]) -> None:
        """
        Append the included matches to an existing playlist.

        Does nothing when no match is included.

        Raises:
            SongAdditionError: If the backend fails.
        """
        song_ids = included_song_ids(matches)
        if not song_ids:
            return

        try:
            self.service.add_songs(playlist_id, song_ids)
        except PlaylistCreationError:
            raise
        except Exception as e:
            raise SongAdditionError(
                f"Failed to add songs to playlist {playlist_id}: {e}",
                details={"playlist_id": playlist_id, "original_error": str(e)}
            ) from e
