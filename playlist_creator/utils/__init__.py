"""
Utility functions for playlist-creator.

This module provides common helpers used by the CLI:
    - Directory creation
    - Loading extracted songs from a JSON file

Songs File Format:
    Either a plain list of songs:

        [{"title": "Yesterday", "artist": "The Beatles", "confidence": 0.9}, ...]

    or an object with optional source information:

        {
          "source": "https://example.com/episodes/42.mp3",
          "transcript": "... and then we played Yesterday by the Beatles ...",
          "songs": [{"title": "Yesterday", "artist": "The Beatles"}, ...]
        }

    "confidence" is the extractor's own confidence and defaults to 1.0.

Usage:
    from playlist_creator.utils import ensure_directory, load_extracted_songs

    extracted = load_extracted_songs(Path("episode-42.json"))
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from playlist_creator.core.exceptions import WorkflowError
from playlist_creator.core.logger import get_logger
from playlist_creator.matching.models import Song
from playlist_creator.matching.normalizer import adjust_confidence, normalize_song

logger = get_logger(__name__)


DEFAULT_EXTRACTION_CONFIDENCE = 1.0


@dataclass(frozen=True)
class ExtractedSongs:
    """
    Contents of a songs file.

    Attributes:
        songs: Normalized songs in mention order.
        source: Source URL or path named in the file, if any.
        transcript: Transcript text, if the file includes it.
    """

    songs: list[Song] = field(default_factory=list)
    source: str | None = None
    transcript: str | None = None


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_extracted_songs(path: Path) -> ExtractedSongs:
    """
    Load and normalize songs from a JSON file.

    Titles and artists are cleaned with the normalizer and each song's
    confidence is adjusted for how well-formed the entry is. Entries
    without a title or artist are skipped with a warning.

    Raises:
        WorkflowError: If the file cannot be read or is not a songs file.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise WorkflowError(
            f"Cannot read songs file: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e
    except json.JSONDecodeError as e:
        raise WorkflowError(
            f"Invalid JSON in songs file: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    source = None
    transcript = None
    if isinstance(data, dict):
        source = data.get("source")
        transcript = data.get("transcript")
        entries = data.get("songs")
    else:
        entries = data

    if not isinstance(entries, list):
        raise WorkflowError(
            "Songs file must contain a list of songs or an object with a 'songs' list",
            details={"file_path": str(path)}
        )

    songs = []
    for position, entry in enumerate(entries):
        song = _parse_song_entry(entry)
        if song is None:
            logger.warning(f"Skipping invalid song entry #{position + 1} in {path.name}: {entry!r}")
            continue
        songs.append(song)

    return ExtractedSongs(songs=songs, source=source, transcript=transcript)


def _parse_song_entry(entry: Any) -> Song | None:
    if not isinstance(entry, dict):
        return None

    title = entry.get("title")
    artist = entry.get("artist")
    if not isinstance(title, str) or not title.strip():
        return None
    if not isinstance(artist, str) or not artist.strip():
        return None

    raw_confidence = entry.get("confidence", DEFAULT_EXTRACTION_CONFIDENCE)
    if isinstance(raw_confidence, bool) or not isinstance(raw_confidence, (int, float)):
        raw_confidence = DEFAULT_EXTRACTION_CONFIDENCE

    song = normalize_song(Song(title=title, artist=artist))
    return Song(
        title=song.title,
        artist=song.artist,
        confidence=adjust_confidence(float(raw_confidence), song.title, song.artist)
    )
