from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Listing, ListingFavorite, ListingStatus
from marketplace.tests.factories import ApprovedListingFactory, BannedUserFactory, ListingFactory, UserFactory


class FavoriteViewIntegrationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.user = UserFactory()
        self.listing = ApprovedListingFactory()

        self.list_url = reverse("marketplace:favorite-list")
        self.detail_url = reverse("marketplace:favorite-detail", kwargs={"listing_id": self.listing.pk})

    def test_add_favorite_is_idempotent(self):
        self.client.force_authenticate(user=self.user)

        first = self.client.post(self.detail_url)
        second = self.client.post(self.detail_url)

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.data, {"listing_id": self.listing.pk, "is_favorited": True})
        self.assertEqual(ListingFavorite.objects.filter(user=self.user).count(), 1)

    def test_list_and_check_favorites(self):
        self.client.force_authenticate(user=self.user)
        self.client.post(self.detail_url)

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["listing"]["id"] for item in response.data], [self.listing.pk])

        response = self.client.get(self.detail_url)
        self.assertTrue(response.data["is_favorited"])

    def test_remove_favorite_twice(self):
        self.client.force_authenticate(user=self.user)
        self.client.post(self.detail_url)

        with self.captureOnCommitCallbacks(execute=True):
            first = self.client.delete(self.detail_url)
        second = self.client.delete(self.detail_url)

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertFalse(second.data["is_favorited"])
        self.assertEqual(len(container.event_bus().events_of("favorites")), 1)

    def test_favorite_unknown_listing(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse("marketplace:favorite-detail", kwargs={"listing_id": 999999}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_banned_user_cannot_favorite(self):
        self.client.force_authenticate(user=BannedUserFactory())

        response = self.client.post(self.detail_url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_user_is_rejected(self):
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cannot_favorite_pending_listing_of_another_user(self):
        pending = ListingFactory()
        self.client.force_authenticate(user=self.user)

        response = self.client.post(reverse("marketplace:favorite-detail", kwargs={"listing_id": pending.pk}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(ListingFavorite.objects.filter(user=self.user).exists())

    def test_rejected_listing_drops_out_of_favorites(self):
        self.client.force_authenticate(user=self.user)
        self.client.post(self.detail_url)
        Listing.objects.filter(pk=self.listing.pk).update(status=ListingStatus.REJECTED, moderator_note="Fake")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])
        self.assertTrue(ListingFavorite.objects.filter(user=self.user, listing=self.listing).exists())
