from prometheus_client import Counter, Gauge, Histogram


# Listing lifecycle metrics
listings_created_total = Counter("marketplace_listings_created_total", "Total listings submitted", ["category"])
listing_moderation_decisions_total = Counter(
    "marketplace_listing_moderation_decisions_total", "Moderation decisions applied", ["decision"]
)
listing_transitions_rejected_total = Counter(
    "marketplace_listing_transitions_rejected_total",
    "Status transitions refused because of the listing's current state",
    ["operation"],
)
listings_deleted_total = Counter("marketplace_listings_deleted_total", "Listings deleted", ["actor_role"])
listings_sold_total = Counter("marketplace_listings_sold_total", "Listings marked as sold")

# Queue depth, refreshed whenever the moderation queue is read
pending_queue_size = Gauge("marketplace_pending_queue_size", "Listings awaiting moderation")

# Favorites
favorites_changed_total = Counter("marketplace_favorites_changed_total", "Favorite add/remove calls", ["action"])

# Authorization
authorization_denials_total = Counter(
    "marketplace_authorization_denials_total", "Operations refused for role, ownership or ban", ["operation"]
)

# Performance Metrics
moderation_decision_duration = Histogram(
    "marketplace_moderation_decision_seconds", "Time spent applying a moderation decision"
)
