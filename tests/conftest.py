"""Test configuration and fixtures"""

import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest

from playlist_creator.matching.models import MatchedSong, MatchStatus, Song


@dataclass(frozen=True)
class FakeTrack:
    """Catalog candidate as a catalog client would return it."""

    id: str
    title: str
    artist_name: str
    preview_url: str | None = None


class FakeCatalogClient:
    """
    In-memory catalog client.

    responses maps a query string to the tracks returned for it; errors
    maps a query string to the exception raised for it. Every query is
    recorded in self.queries.
    """

    def __init__(self, responses=None, errors=None, authorized=True):
        self.responses = responses or {}
        self.errors = errors or {}
        self.is_authorized = authorized
        self.queries = []
        self.authorization_requests = 0

    def request_authorization(self):
        self.authorization_requests += 1

    def search(self, term):
        self.queries.append(term)
        if term in self.errors:
            raise self.errors[term]
        return list(self.responses.get(term, []))


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def make_track():
    """Factory for catalog candidates"""
    return FakeTrack


@pytest.fixture
def make_client():
    """Factory for in-memory catalog clients"""
    return FakeCatalogClient


@pytest.fixture
def make_match():
    """Factory for matched songs with a given confidence and status"""
    def _make_match(
        title="Yesterday",
        artist="The Beatles",
        confidence=0.95,
        status=MatchStatus.PENDING,
        catalog_id="1",
        preview_url=None
    ):
        return MatchedSong(
            original_song=Song(title=title, artist=artist),
            catalog_song=Song(
                title=title,
                artist=artist,
                catalog_id=catalog_id,
                confidence=confidence
            ),
            match_status=status,
            preview_url=preview_url
        )
    return _make_match


@pytest.fixture
def pending_matches(make_match):
    """Four pending matches in mention order"""
    return [
        make_match("Yesterday", "The Beatles", 0.95, catalog_id="1"),
        make_match("Hey Jude", "The Beatles", 0.6, catalog_id="2"),
        make_match("Let It Be", "The Beatles", 0.3, catalog_id="3"),
        make_match("Help!", "The Beatles", 0.92, catalog_id="4"),
    ]


@pytest.fixture
def sample_songs():
    """Extracted songs as they come out of a songs file"""
    return [
        Song(title="Yesterday", artist="The Beatles", confidence=0.9),
        Song(title="Hey Jude", artist="The Beatles", confidence=0.8),
        Song(title="Mystery Song", artist="Nobody", confidence=0.5),
    ]
