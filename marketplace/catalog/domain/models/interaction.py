from django.conf import settings
from django.db import models

from .catalog import Listing


class ListingFavorite(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorites")
    listing = models.ForeignKey(Listing, on_delete=models.CASCADE, related_name="favorited_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "marketplace"
        constraints = [
            models.UniqueConstraint(fields=["user", "listing"], name="marketplace_favorite_user_listing_uniq"),
        ]
        indexes = [
            models.Index(fields=["user", "-created_at"], name="favorite_user_created_idx"),  # For user's favorites
        ]

    def __str__(self):
        return f"{self.user_id} favorited {self.listing_id}"
