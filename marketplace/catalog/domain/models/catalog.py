from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from .reference import Category, Server


class ListingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    SOLD = "sold", "Sold"


class Listing(models.Model):
    # Ownership and classification (immutable after creation)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="listings")
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="listings")
    subcategory = models.ForeignKey(
        Category, on_delete=models.PROTECT, null=True, blank=True, related_name="sublistings"
    )
    server = models.ForeignKey(Server, on_delete=models.PROTECT, related_name="listings")

    # Content
    title = models.CharField(max_length=200)
    description = models.TextField()
    price = models.PositiveBigIntegerField(validators=[MinValueValidator(1)])
    images = models.JSONField(default=list, blank=True, help_text="Ordered list of stored image URLs")
    metadata = models.JSONField(default=dict, blank=True, help_text="Category-specific attributes")

    # Lifecycle
    status = models.CharField(max_length=20, choices=ListingStatus.choices, default=ListingStatus.PENDING)
    moderator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="moderated_listings",
    )
    moderator_note = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "marketplace"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="listing_status_created_idx"),  # Moderation queue
            models.Index(fields=["status", "category", "-created_at"], name="listing_catalog_idx"),  # Catalog
            models.Index(fields=["owner", "-created_at"], name="listing_owner_created_idx"),  # My listings
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"
