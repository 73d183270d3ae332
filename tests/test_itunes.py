"""Test the iTunes Search API client"""

from unittest.mock import MagicMock, Mock

import pytest
import requests

from playlist_creator.catalog.itunes import ITUNES_SEARCH_URL, ITunesSearchClient, ITunesTrack
from playlist_creator.core.exceptions import (
    RateLimitExceededError,
    SearchFailedError,
    TransientSearchError,
)
from playlist_creator.matching.models import CatalogCandidate


API_TRACK = {
    "trackId": 1441164430,
    "trackName": "Yesterday",
    "artistName": "The Beatles",
    "collectionName": "Help!",
    "previewUrl": "https://audio/preview.m4a",
    "trackViewUrl": "https://music.apple.com/us/album/yesterday/1441164426?i=1441164430",
}


def _client_returning(status_code=200, payload=None, json_error=None):
    response = Mock(status_code=status_code)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload if payload is not None else {"results": []}

    session = MagicMock()
    session.get.return_value = response
    return ITunesSearchClient(country="GB", limit=5, timeout=3.0, session=session), session


class TestITunesTrack:
    """Test the API track model"""

    def test_from_api(self):
        """Test parsing one API result"""
        track = ITunesTrack.from_api(API_TRACK)
        assert track.id == "1441164430"
        assert track.title == "Yesterday"
        assert track.artist_name == "The Beatles"
        assert track.preview_url == "https://audio/preview.m4a"
        assert isinstance(track, CatalogCandidate)

    def test_from_api_missing_field(self):
        """Test that required fields are enforced"""
        with pytest.raises(KeyError):
            ITunesTrack.from_api({"trackName": "Yesterday"})


class TestITunesSearchClient:
    """Test searching through a mocked HTTP session"""

    def test_search_sends_query(self):
        """Test request parameters"""
        client, session = _client_returning(payload={"results": [API_TRACK]})
        tracks = client.search("Yesterday The Beatles")

        session.get.assert_called_once_with(
            ITUNES_SEARCH_URL,
            params={
                "term": "Yesterday The Beatles",
                "media": "music",
                "entity": "song",
                "limit": 5,
                "country": "GB",
            },
            timeout=3.0
        )
        assert [t.id for t in tracks] == ["1441164430"]

    def test_incomplete_results_are_skipped(self):
        """Test entries without required fields"""
        client, _ = _client_returning(payload={"results": [{"trackName": "x"}, API_TRACK]})
        assert len(client.search("Yesterday")) == 1

    def test_always_authorized(self):
        """Test that the public API needs no authorization"""
        client, _ = _client_returning()
        assert client.is_authorized
        client.request_authorization()

    def test_rate_limited(self):
        """Test HTTP 429"""
        client, _ = _client_returning(status_code=429)
        with pytest.raises(RateLimitExceededError):
            client.search("Yesterday")

    def test_server_error_is_transient(self):
        """Test that 5xx responses let the next query run"""
        client, _ = _client_returning(status_code=503)
        with pytest.raises(TransientSearchError) as exc_info:
            client.search("Yesterday")
        assert exc_info.value.reason == "HTTP 503"

    def test_client_error_is_not_transient(self):
        """Test other HTTP errors"""
        client, _ = _client_returning(status_code=404)
        with pytest.raises(SearchFailedError) as exc_info:
            client.search("Yesterday")
        assert not isinstance(exc_info.value, TransientSearchError)
        assert exc_info.value.reason == "HTTP 404"

    def test_transport_error(self):
        """Test connection failures"""
        client, session = _client_returning()
        session.get.side_effect = requests.exceptions.ConnectionError("offline")
        with pytest.raises(TransientSearchError) as exc_info:
            client.search("Yesterday")
        assert isinstance(exc_info.value, SearchFailedError)
        assert exc_info.value.details["query"] == "Yesterday"

    def test_invalid_json(self):
        """Test a body that is not JSON"""
        client, _ = _client_returning(json_error=ValueError("no json"))
        with pytest.raises(TransientSearchError) as exc_info:
            client.search("Yesterday")
        assert exc_info.value.reason == "Invalid JSON response"
