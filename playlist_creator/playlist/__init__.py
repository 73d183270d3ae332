"""
Playlist creation module for playlist-creator.

Components:
    - PlaylistService: Protocol for playlist backends
    - PlaylistSubmitter: Submits the included matches to a backend
    - JSONPlaylistExporter: Backend writing playlists as JSON files
"""

from playlist_creator.playlist.creator import (
    CreatedPlaylist,
    PlaylistService,
    PlaylistSubmitter,
    generate_playlist_description,
    included_song_ids,
)
from playlist_creator.playlist.exporter import PLAYLISTS_SUBDIRECTORY, JSONPlaylistExporter

__all__ = [
    "CreatedPlaylist",
    "PlaylistService",
    "PlaylistSubmitter",
    "generate_playlist_description",
    "included_song_ids",
    "JSONPlaylistExporter",
    "PLAYLISTS_SUBDIRECTORY",
]
