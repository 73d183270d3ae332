"""
Music catalog search module for playlist-creator.

Components:
    - CatalogClient: Protocol every catalog backend implements
    - CatalogSearcher: Multi-strategy search with ranking and rate limiting
    - ITunesSearchClient: Apple Music catalog via the iTunes Search API

Usage:
    from playlist_creator.catalog import CatalogSearcher, ITunesSearchClient

    searcher = CatalogSearcher(ITunesSearchClient(country="US"))
    results = searcher.search(Song("Yesterday", "The Beatles"))
"""

from playlist_creator.catalog.itunes import ITunesSearchClient, ITunesTrack
from playlist_creator.catalog.searcher import CatalogClient, CatalogSearcher

__all__ = [
    "CatalogClient",
    "CatalogSearcher",
    "ITunesSearchClient",
    "ITunesTrack",
]
