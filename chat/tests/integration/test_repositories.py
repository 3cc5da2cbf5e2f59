from django.db import IntegrityError, transaction
from django.test import TestCase

from chat.domain.repositories import ConversationRepository
from chat.models import Conversation
from marketplace.tests.factories import ApprovedListingFactory, UserFactory


class ConversationRepositoryTest(TestCase):
    def setUp(self):
        self.repository = ConversationRepository()
        first, second = UserFactory(), UserFactory()
        self.low, self.high = sorted([first, second], key=lambda user: user.pk)

    def test_second_insert_for_same_pair_returns_existing_row(self):
        conversation, created = self.repository.insert(self.low.pk, self.high.pk)
        again, created_again = self.repository.insert(self.low.pk, self.high.pk)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(again.pk, conversation.pk)
        self.assertEqual(Conversation.objects.count(), 1)

    def test_second_insert_for_same_listing_returns_existing_row(self):
        listing = ApprovedListingFactory(owner=self.high)

        conversation, created = self.repository.insert(self.low.pk, self.high.pk, listing.pk)
        again, created_again = self.repository.insert(self.low.pk, self.high.pk, listing.pk)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(again.pk, conversation.pk)

    def test_listing_conversation_is_separate_from_direct_one(self):
        listing = ApprovedListingFactory(owner=self.high)

        direct, _ = self.repository.insert(self.low.pk, self.high.pk)
        anchored, created = self.repository.insert(self.low.pk, self.high.pk, listing.pk)

        self.assertTrue(created)
        self.assertNotEqual(direct.pk, anchored.pk)
        self.assertEqual(self.repository.find(self.low.pk, self.high.pk).pk, direct.pk)
        self.assertEqual(self.repository.find(self.low.pk, self.high.pk, listing.pk).pk, anchored.pk)

    def test_reversed_pair_is_rejected_by_the_database(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Conversation.objects.create(user_low_id=self.high.pk, user_high_id=self.low.pk)
