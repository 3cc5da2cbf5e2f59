from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views.metrics_views import marketplace_prometheus_metrics
from .catalog.api.views import CategoryViewSet, FavoriteViewSet, ListingViewSet, ServerViewSet

# Create the main router
router = DefaultRouter()
router.register(r"listings", ListingViewSet, basename="listing")
router.register(r"servers", ServerViewSet, basename="server")
router.register(r"categories", CategoryViewSet, basename="category")

app_name = "marketplace"

urlpatterns = [
    # Prometheus metrics endpoint
    path("metrics/", marketplace_prometheus_metrics, name="marketplace-metrics"),
    # Favorites are keyed by listing id (manual routing)
    path("favorites/", FavoriteViewSet.as_view({"get": "list"}), name="favorite-list"),
    path(
        "favorites/<int:listing_id>/",
        FavoriteViewSet.as_view({"get": "retrieve", "post": "add", "delete": "destroy"}),
        name="favorite-detail",
    ),
    # Main API routes
    path("", include(router.urls)),
]
