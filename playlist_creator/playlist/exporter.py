"""
Local JSON playlist backend.

Writes each playlist to {directory}/{playlist_id}.json:

    {
      "id": "playlist-creator-mar-3-2025-1a2b3c4d",
      "name": "Playlist Creator - Mar 3, 2025",
      "description": "Playlist with 12 songs. Created with Playlist Creator.",
      "song_ids": ["1441164430", "1440833098"],
      "created_at": "2025-03-03T19:42:11.512345+00:00"
    }

The song IDs are Apple Music catalog IDs, so the file can be imported
by any tool that talks to the Apple Music API.
"""

import json
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from playlist_creator.core.exceptions import PlaylistCreationError, SongAdditionError
from playlist_creator.core.logger import get_logger
from playlist_creator.playlist.creator import CreatedPlaylist


logger = get_logger(__name__)


PLAYLISTS_SUBDIRECTORY = "playlists"


def _slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "playlist"


class JSONPlaylistExporter:
    """
    PlaylistService that stores playlists as JSON files.

    Attributes:
        directory: Where playlist files are written. Created on first write.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def playlist_path(self, playlist_id: str) -> Path:
        return self.directory / f"{playlist_id}.json"

    def create_playlist(
        self,
        name: str,
        description: str,
        song_ids: list[str]
    ) -> CreatedPlaylist:
        """
        Write a new playlist file.

        Raises:
            PlaylistCreationError: If the file cannot be written.
        """
        playlist_id = f"{_slugify(name)}-{uuid.uuid4().hex[:8]}"
        data = {
            "id": playlist_id,
            "name": name,
            "description": description,
            "song_ids": list(song_ids),
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        path = self.playlist_path(playlist_id)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._write(path, data)
        except OSError as e:
            raise PlaylistCreationError(
                f"Failed to write playlist file: {e}",
                details={"path": str(path), "original_error": str(e)}
            ) from e

        logger.info(f"Playlist saved to {path}")
        return CreatedPlaylist(
            id=playlist_id,
            name=name,
            song_count=len(song_ids),
            url=path.resolve().as_uri()
        )

    def add_songs(self, playlist_id: str, song_ids: list[str]) -> None:
        """
        Append songs to an existing playlist file.

        Raises:
            SongAdditionError: If the playlist does not exist or cannot be
                               read or written.
        """
        path = self.playlist_path(playlist_id)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            data["song_ids"] = data.get("song_ids", []) + list(song_ids)
            self._write(path, data)
        except (OSError, ValueError) as e:
            raise SongAdditionError(
                f"Failed to add songs to playlist {playlist_id}: {e}",
                details={"path": str(path), "original_error": str(e)}
            ) from e

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
