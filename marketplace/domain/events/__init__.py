from .base import DomainEvent
from .listing_events import (
    favorite_changed,
    listing_created,
    listing_deleted,
    listing_moderated,
    listing_sold,
    listing_updated,
)


__all__ = [
    "DomainEvent",
    "listing_created",
    "listing_moderated",
    "listing_updated",
    "listing_sold",
    "listing_deleted",
    "favorite_changed",
]
