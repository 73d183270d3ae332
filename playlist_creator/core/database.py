"""
Thread-safe SQLite request store for playlist-creator.

Stores playlist requests and their ordered matches so that a review can
be interrupted and resumed (CLI --resume) and past runs can be listed
(CLI --list).

Schema:
    schema_version:   Single row with DATABASE_VERSION
    requests:         One row per PlaylistRequest (status, source, playlist info)
    extracted_songs:  Songs extracted for a request, ordered by position
    matched_songs:    Matches for a request, ordered by position, with the
                      match status stored as its tag ("auto", "pending", ...)

Usage:
    db = Database(output_dir / "requests.db")

    db.save_request(request)
    db.update_match_statuses(request.id, session.matches)
    request = db.get_request(request_id)
"""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Generator

from playlist_creator.core.exceptions import DatabaseError, StatusDecodingError
from playlist_creator.matching.models import MatchedSong, MatchStatus, Song
from playlist_creator.workflow.models import PlaylistRequest, ProcessingStatus


DATABASE_VERSION = 1
DATABASE_FILENAME = "requests.db"


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS requests (
    id TEXT PRIMARY KEY,
    status TEXT NOT NULL,
    source_url TEXT,
    source_file_path TEXT,
    transcript TEXT,
    playlist_id TEXT,
    playlist_name TEXT,
    created_at TEXT NOT NULL,
    completed_at TEXT,
    error_message TEXT
);

CREATE TABLE IF NOT EXISTS extracted_songs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    title TEXT NOT NULL,
    artist TEXT NOT NULL,
    confidence REAL,
    FOREIGN KEY (request_id) REFERENCES requests(id) ON DELETE CASCADE,
    UNIQUE(request_id, position)
);

CREATE TABLE IF NOT EXISTS matched_songs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    request_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    original_title TEXT NOT NULL,
    original_artist TEXT NOT NULL,
    original_confidence REAL,
    catalog_title TEXT NOT NULL,
    catalog_artist TEXT NOT NULL,
    catalog_id TEXT,
    confidence REAL NOT NULL,
    preview_url TEXT,
    status TEXT NOT NULL,
    FOREIGN KEY (request_id) REFERENCES requests(id) ON DELETE CASCADE,
    UNIQUE(request_id, position)
);

CREATE INDEX IF NOT EXISTS idx_extracted_songs_request ON extracted_songs(request_id);
CREATE INDEX IF NOT EXISTS idx_matched_songs_request ON matched_songs(request_id);
"""


class Database:
    """
    Thread-safe SQLite store for playlist requests.

    One connection is opened lazily and shared. self._lock is held by
    every public method.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

        if not db_path.parent.exists():
            raise DatabaseError(
                f"Parent directory does not exist: {db_path.parent}",
                details={"path": str(db_path.parent)}
            )

        try:
            self._init_database()
        except sqlite3.Error as e:
            raise DatabaseError(
                f"Failed to initialize database: {e}",
                details={"path": str(db_path)}
            ) from e

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Yield the shared connection, opening it on first use.

        The connection is created once and reused; leaving the context
        does not close it.
        """
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                check_same_thread=False  # serialized by _lock
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
        yield self._conn

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _init_database(self) -> None:
        with self._get_connection() as conn:
            conn.executescript(_SCHEMA_SQL)

            cursor = conn.execute("SELECT version FROM schema_version LIMIT 1")
            row = cursor.fetchone()

            if row is None:
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (DATABASE_VERSION,))
            elif row[0] != DATABASE_VERSION:
                raise DatabaseError(
                    f"Database version mismatch: expected {DATABASE_VERSION}, got {row[0]}",
                    details={"expected": DATABASE_VERSION, "actual": row[0]}
                )
            conn.commit()

    # =========================================================================
    # Request Operations
    # =========================================================================

    def save_request(self, request: PlaylistRequest) -> None:
        """
        Insert or fully replace a request with its songs and matches.

        Song and match rows are rewritten in list order, so positions
        always reflect the current order of the request's lists.
        """
        with self._lock:
            with self._get_connection() as conn:
                try:
                    conn.execute("""
                        INSERT INTO requests (
                            id, status, source_url, source_file_path, transcript,
                            playlist_id, playlist_name, created_at, completed_at,
                            error_message
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            status = excluded.status,
                            source_url = excluded.source_url,
                            source_file_path = excluded.source_file_path,
                            transcript = excluded.transcript,
                            playlist_id = excluded.playlist_id,
                            playlist_name = excluded.playlist_name,
                            completed_at = excluded.completed_at,
                            error_message = excluded.error_message
                    """, (
                        request.id,
                        request.status.value,
                        request.source_url,
                        request.source_file_path,
                        request.transcript,
                        request.playlist_id,
                        request.playlist_name,
                        request.created_at.isoformat(),
                        _iso_or_none(request.completed_at),
                        request.error_message,
                    ))

                    conn.execute("DELETE FROM extracted_songs WHERE request_id = ?", (request.id,))
                    conn.executemany("""
                        INSERT INTO extracted_songs (request_id, position, title, artist, confidence)
                        VALUES (?, ?, ?, ?, ?)
                    """, [
                        (request.id, position, song.title, song.artist, song.confidence)
                        for position, song in enumerate(request.extracted_songs)
                    ])

                    conn.execute("DELETE FROM matched_songs WHERE request_id = ?", (request.id,))
                    conn.executemany("""
                        INSERT INTO matched_songs (
                            request_id, position, original_title, original_artist,
                            original_confidence, catalog_title, catalog_artist,
                            catalog_id, confidence, preview_url, status
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """, [
                        _serialize_match(request.id, position, match)
                        for position, match in enumerate(request.matched_songs)
                    ])
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    raise DatabaseError(
                        f"Failed to save request: {e}",
                        details={"request_id": request.id}
                    ) from e

    def get_request(self, request_id: str) -> PlaylistRequest | None:
        """
        Load a request with its songs and matches.

        Returns:
            The request, or None if no request has that id.

        Raises:
            DatabaseError: If a stored status tag cannot be decoded.
        """
        with self._lock:
            with self._get_connection() as conn:
                row = conn.execute("SELECT * FROM requests WHERE id = ?", (request_id,)).fetchone()
                if row is None:
                    return None

                song_rows = conn.execute(
                    "SELECT * FROM extracted_songs WHERE request_id = ? ORDER BY position",
                    (request_id,)
                ).fetchall()
                match_rows = conn.execute(
                    "SELECT * FROM matched_songs WHERE request_id = ? ORDER BY position",
                    (request_id,)
                ).fetchall()

        try:
            request = _deserialize_request(row)
            request.matched_songs = [_deserialize_match(r) for r in match_rows]
        except StatusDecodingError as e:
            raise DatabaseError(
                f"Corrupted request {request_id}: {e.message}",
                details={"request_id": request_id, **e.details}
            ) from e

        request.extracted_songs = [
            Song(title=r["title"], artist=r["artist"], confidence=r["confidence"] or 0.0)
            for r in song_rows
        ]
        return request

    def list_requests(self) -> list[dict[str, Any]]:
        """
        Summaries of all stored requests, most recent first.

        Returns:
            Dicts with keys id, status, source_url, source_file_path,
            playlist_name, created_at, match_count, pending_count.
        """
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute("""
                    SELECT
                        r.id, r.status, r.source_url, r.source_file_path,
                        r.playlist_name, r.created_at,
                        COUNT(m.id) AS match_count,
                        COALESCE(SUM(CASE WHEN m.status = ? THEN 1 ELSE 0 END), 0) AS pending_count
                    FROM requests r
                    LEFT JOIN matched_songs m ON m.request_id = r.id
                    GROUP BY r.id
                    ORDER BY r.created_at DESC
                """, (MatchStatus.PENDING.value,))
                return [dict(row) for row in cursor.fetchall()]

    def update_match_statuses(self, request_id: str, matches: list[MatchedSong]) -> None:
        """
        Store the current status of every match of a request.

        matches must be the request's full match list in its stored order
        (e.g. ReviewSession.matches); position i gets matches[i].status.

        Raises:
            DatabaseError: If the request does not exist, the number of
                           matches differs from what is stored, or the
                           update fails.
        """
        with self._lock:
            with self._get_connection() as conn:
                try:
                    stored = conn.execute(
                        "SELECT COUNT(*) FROM matched_songs WHERE request_id = ?",
                        (request_id,)
                    ).fetchone()[0]
                    if stored != len(matches):
                        raise DatabaseError(
                            f"Match count mismatch for request {request_id}: "
                            f"stored {stored}, got {len(matches)}",
                            details={"request_id": request_id, "stored": stored, "given": len(matches)}
                        )

                    conn.executemany(
                        "UPDATE matched_songs SET status = ? WHERE request_id = ? AND position = ?",
                        [
                            (match.match_status.value, request_id, position)
                            for position, match in enumerate(matches)
                        ]
                    )
                    conn.commit()
                except sqlite3.Error as e:
                    conn.rollback()
                    raise DatabaseError(
                        f"Failed to update match statuses: {e}",
                        details={"request_id": request_id}
                    ) from e

    def delete_request(self, request_id: str) -> bool:
        """Delete a request and its rows. Returns True if it existed."""
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute("DELETE FROM requests WHERE id = ?", (request_id,))
                conn.commit()
                return cursor.rowcount > 0


# =============================================================================
# Row conversion
# =============================================================================

def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _serialize_match(request_id: str, position: int, match: MatchedSong) -> tuple:
    original = match.original_song
    candidate = match.catalog_song
    return (
        request_id,
        position,
        original.title,
        original.artist,
        original.confidence,
        candidate.title,
        candidate.artist,
        candidate.catalog_id,
        candidate.confidence,
        match.preview_url,
        match.match_status.value,
    )


def _deserialize_match(row: sqlite3.Row) -> MatchedSong:
    return MatchedSong(
        original_song=Song(
            title=row["original_title"],
            artist=row["original_artist"],
            confidence=row["original_confidence"] or 0.0
        ),
        catalog_song=Song(
            title=row["catalog_title"],
            artist=row["catalog_artist"],
            catalog_id=row["catalog_id"],
            confidence=row["confidence"]
        ),
        match_status=MatchStatus.decode(row["status"]),
        preview_url=row["preview_url"]
    )


def _deserialize_request(row: sqlite3.Row) -> PlaylistRequest:
    return PlaylistRequest(
        id=row["id"],
        status=ProcessingStatus.decode(row["status"]),
        source_url=row["source_url"],
        source_file_path=row["source_file_path"],
        transcript=row["transcript"],
        playlist_id=row["playlist_id"],
        playlist_name=row["playlist_name"],
        created_at=datetime.fromisoformat(row["created_at"]),
        completed_at=_parse_datetime(row["completed_at"]),
        error_message=row["error_message"]
    )
