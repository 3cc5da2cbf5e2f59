from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Listing, ListingFavorite, ListingStatus
from marketplace.tests.factories import (
    AdminFactory,
    ApprovedListingFactory,
    BannedUserFactory,
    CategoryFactory,
    ListingFactory,
    ListingFavoriteFactory,
    ModeratorFactory,
    ServerFactory,
    UserFactory,
)


class ListingViewIntegrationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()

        self.owner = UserFactory()
        self.stranger = UserFactory()
        self.moderator = ModeratorFactory()
        self.category = CategoryFactory(name="fish")
        self.server = ServerFactory(name="arbat")

        self.list_url = reverse("marketplace:listing-list")
        self.pending_url = reverse("marketplace:listing-pending")

    def detail_url(self, listing, name="detail"):
        return reverse(f"marketplace:listing-{name}", kwargs={"pk": listing.pk})

    def draft(self, **overrides):
        data = {
            "title": "Pike",
            "description": "Fresh catch",
            "price": 1500,
            "category_id": self.category.id,
            "server_id": self.server.id,
            "metadata": {"fishType": "Pike", "quantity": 2, "contacts": {"telegram": "@fisher"}},
        }
        data.update(overrides)
        return data

    def test_create_listing_starts_pending(self):
        self.client.force_authenticate(user=self.owner)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self.draft(status="approved"), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], ListingStatus.PENDING)
        self.assertEqual(response.data["owner"]["id"], self.owner.id)
        self.assertEqual(response.data["metadata"]["fish_type"], "Pike")
        self.assertIsNone(response.data["moderator_id"])

        bus = container.event_bus()
        self.assertEqual(len(bus.events_of("listings.pending")), 1)

    def test_create_listing_unknown_server(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.post(self.list_url, self.draft(server_id=999999), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "reference_not_found")
        self.assertIn("server_id", response.data["fields"])

    def test_create_listing_requires_authentication(self):
        response = self.client.post(self.list_url, self.draft(), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_banned_user_cannot_create(self):
        self.client.force_authenticate(user=BannedUserFactory())

        response = self.client.post(self.list_url, self.draft(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "user_banned")
        self.assertEqual(Listing.objects.count(), 0)

    def test_catalog_lists_only_approved(self):
        approved = ApprovedListingFactory(owner=self.owner, category=self.category, server=self.server)
        ListingFactory(owner=self.owner, category=self.category, server=self.server)
        ListingFactory(owner=self.owner, status=ListingStatus.SOLD)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual([item["id"] for item in response.data["results"]], [approved.id])
        self.assertNotIn("moderator_note", response.data["results"][0])

    def test_catalog_filters_by_server(self):
        ApprovedListingFactory(server=self.server)
        other = ApprovedListingFactory(server=ServerFactory(name="rublevka"))

        response = self.client.get(self.list_url, {"server_id": other.server_id})

        self.assertEqual([item["id"] for item in response.data["results"]], [other.id])

    def test_pending_listing_visible_to_owner_only(self):
        listing = ListingFactory(owner=self.owner)

        self.assertEqual(self.client.get(self.detail_url(listing)).status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.stranger)
        self.assertEqual(self.client.get(self.detail_url(listing)).status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.owner)
        response = self.client.get(self.detail_url(listing))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("moderator_note", response.data)

    def test_moderator_approves_listing(self):
        listing = ListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.patch(self.detail_url(listing, "decide"), {"status": "approved"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], ListingStatus.APPROVED)
        self.assertEqual(response.data["moderator_id"], self.moderator.id)

        self.client.force_authenticate(user=None)
        catalog = self.client.get(self.list_url)
        self.assertEqual([item["id"] for item in catalog.data["results"]], [listing.id])

    def test_rejection_needs_note(self):
        listing = ListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.patch(self.detail_url(listing, "decide"), {"status": "rejected"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("moderator_note", response.data["fields"])
        listing.refresh_from_db()
        self.assertEqual(listing.status, ListingStatus.PENDING)

    def test_owner_sees_rejection_note(self):
        listing = ListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.moderator)
        self.client.patch(
            self.detail_url(listing, "decide"), {"status": "rejected", "moderator_note": "No photo"}, format="json"
        )

        self.client.force_authenticate(user=self.owner)
        response = self.client.get(reverse("marketplace:listing-mine"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["status"], ListingStatus.REJECTED)
        self.assertEqual(response.data[0]["moderator_note"], "No photo")

    def test_redecision_overwrites_moderator_and_clears_note(self):
        listing = ListingFactory(owner=self.owner)
        second_moderator = ModeratorFactory()

        self.client.force_authenticate(user=self.moderator)
        response = self.client.patch(
            self.detail_url(listing, "decide"), {"status": "rejected", "moderator_note": "Blurry photo"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=second_moderator)
        response = self.client.patch(self.detail_url(listing, "decide"), {"status": "approved"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        listing.refresh_from_db()
        self.assertEqual(listing.status, ListingStatus.APPROVED)
        self.assertEqual(listing.moderator_id, second_moderator.id)
        self.assertIsNone(listing.moderator_note)

    def test_regular_user_cannot_moderate(self):
        listing = ListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.owner)

        response = self.client.patch(self.detail_url(listing, "decide"), {"status": "approved"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_sold_listing_cannot_be_moderated(self):
        listing = ListingFactory(owner=self.owner, status=ListingStatus.SOLD)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.patch(
            self.detail_url(listing, "decide"), {"status": "rejected", "moderator_note": "late"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_transition")

    def test_owner_updates_price(self):
        listing = ApprovedListingFactory(owner=self.owner, price=1000)
        self.client.force_authenticate(user=self.owner)

        response = self.client.patch(self.detail_url(listing, "update-price"), {"price": 2500}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["price"], 2500)
        self.assertEqual(response.data["status"], ListingStatus.APPROVED)

    def test_stranger_cannot_update_price(self):
        listing = ApprovedListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.stranger)

        response = self.client.patch(self.detail_url(listing, "update-price"), {"price": 2500}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_price_above_column_range_is_rejected(self):
        listing = ApprovedListingFactory(owner=self.owner, price=1000)
        self.client.force_authenticate(user=self.owner)

        response = self.client.patch(self.detail_url(listing, "update-price"), {"price": 10**20}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("price", response.data)
        listing.refresh_from_db()
        self.assertEqual(listing.price, 1000)

    def test_create_listing_price_above_column_range(self):
        self.client.force_authenticate(user=self.owner)

        response = self.client.post(self.list_url, self.draft(price=10**20), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("price", response.data)
        self.assertFalse(Listing.objects.exists())

    def test_staff_content_edit_above_column_range(self):
        listing = ApprovedListingFactory(owner=self.owner, price=1000)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.put(self.detail_url(listing), {"price": 10**20}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("price", response.data["fields"])

    def test_content_edit_is_staff_only(self):
        listing = ApprovedListingFactory(owner=self.owner)

        self.client.force_authenticate(user=self.owner)
        response = self.client.put(self.detail_url(listing), {"title": "Better title"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=AdminFactory())
        response = self.client.put(self.detail_url(listing), {"title": "Better title"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["title"], "Better title")

    def test_content_edit_with_non_object_body(self):
        listing = ApprovedListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.moderator)

        response = self.client.put(self.detail_url(listing), [1, 2], format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "validation_error")

    def test_mark_sold(self):
        pending = ListingFactory(owner=self.owner)
        approved = ApprovedListingFactory(owner=self.owner)
        self.client.force_authenticate(user=self.owner)

        response = self.client.post(self.detail_url(pending, "mark-sold"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(self.detail_url(approved, "mark-sold"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], ListingStatus.SOLD)
        self.assertIsNone(response.data["moderator_id"])

        response = self.client.post(self.detail_url(approved, "mark-sold"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete_listing_removes_favorites(self):
        listing = ApprovedListingFactory(owner=self.owner)
        ListingFavoriteFactory(listing=listing, user=self.stranger)
        self.client.force_authenticate(user=self.owner)

        response = self.client.delete(self.detail_url(listing))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Listing.objects.filter(pk=listing.pk).exists())
        self.assertFalse(ListingFavorite.objects.filter(listing_id=listing.pk).exists())

        response = self.client.delete(self.detail_url(listing))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_pending_queue_oldest_first(self):
        first = ListingFactory(owner=self.owner)
        second = ListingFactory(owner=self.stranger)
        ApprovedListingFactory()
        self.client.force_authenticate(user=self.moderator)

        response = self.client.get(self.pending_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["results"]], [first.id, second.id])

        response = self.client.get(self.list_url, {"status": "pending"})
        self.assertEqual(response.data["count"], 2)

    def test_pending_queue_is_staff_only(self):
        self.client.force_authenticate(user=self.owner)

        self.assertEqual(self.client.get(self.pending_url).status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get(self.list_url, {"status": "pending"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ReferenceDataViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.cars = CategoryFactory(name="cars")
        self.sport = CategoryFactory(name="cars-sport", parent=self.cars)
        ServerFactory(name="arbat")

    def test_root_categories(self):
        response = self.client.get(reverse("marketplace:category-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["name"] for item in response.data], ["cars"])
        self.assertTrue(response.data[0]["has_children"])

    def test_subcategories(self):
        response = self.client.get(reverse("marketplace:category-list"), {"parent": self.cars.id})

        self.assertEqual([item["id"] for item in response.data], [self.sport.id])

    def test_servers(self):
        response = self.client.get(reverse("marketplace:server-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["name"], "arbat")
