"""
Interactive review of ambiguous matches.

Usage:
    from playlist_creator.review import ReviewSession

    session = ReviewSession(pending_matches)
    session.accept_current_match()
"""

from playlist_creator.review.session import (
    DEFAULT_HIGH_CONFIDENCE_THRESHOLD,
    DEFAULT_LOW_CONFIDENCE_THRESHOLD,
    ReviewSession,
)

__all__ = [
    "ReviewSession",
    "DEFAULT_HIGH_CONFIDENCE_THRESHOLD",
    "DEFAULT_LOW_CONFIDENCE_THRESHOLD",
]
