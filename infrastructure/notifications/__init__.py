"""
Notification Boundary
=====================

Fire-and-forget invalidation signals emitted after committed state changes.
"""

from .invalidation import (
    CONVERSATIONS,
    FAVORITES,
    LISTINGS_CATALOG,
    LISTINGS_OWNER,
    LISTINGS_PENDING,
    MESSAGES_PENDING,
    InvalidationNotifier,
)

__all__ = [
    "InvalidationNotifier",
    "LISTINGS_PENDING",
    "LISTINGS_CATALOG",
    "LISTINGS_OWNER",
    "MESSAGES_PENDING",
    "CONVERSATIONS",
    "FAVORITES",
]
