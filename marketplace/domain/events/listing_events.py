from .base import DomainEvent


def listing_created(listing) -> DomainEvent:
    return DomainEvent(
        event_type="listing.created",
        aggregate_id=listing.pk,
        actor_id=listing.owner_id,
        payload={
            "owner_id": listing.owner_id,
            "category_id": listing.category_id,
            "server_id": listing.server_id,
            "status": listing.status,
        },
    )


def listing_moderated(listing, moderator_id: int) -> DomainEvent:
    return DomainEvent(
        event_type="listing.moderated",
        aggregate_id=listing.pk,
        actor_id=moderator_id,
        payload={"owner_id": listing.owner_id, "status": listing.status},
    )


def listing_updated(listing, actor_id: int, changed_fields) -> DomainEvent:
    return DomainEvent(
        event_type="listing.updated",
        aggregate_id=listing.pk,
        actor_id=actor_id,
        payload={"owner_id": listing.owner_id, "status": listing.status, "fields": sorted(changed_fields)},
    )


def listing_sold(listing, actor_id: int) -> DomainEvent:
    return DomainEvent(
        event_type="listing.sold",
        aggregate_id=listing.pk,
        actor_id=actor_id,
        payload={"owner_id": listing.owner_id},
    )


def listing_deleted(listing_id: int, owner_id: int, actor_id: int) -> DomainEvent:
    return DomainEvent(
        event_type="listing.deleted",
        aggregate_id=listing_id,
        actor_id=actor_id,
        payload={"owner_id": owner_id},
    )


def favorite_changed(listing_id: int, user_id: int, favorited: bool) -> DomainEvent:
    return DomainEvent(
        event_type="favorite.added" if favorited else "favorite.removed",
        aggregate_id=listing_id,
        actor_id=user_id,
        payload={"user_id": user_id, "favorited": favorited},
    )
