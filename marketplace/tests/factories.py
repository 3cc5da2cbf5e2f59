import factory
from django.contrib.auth import get_user_model
from faker import Faker

from marketplace.models import Category, Listing, ListingFavorite, ListingStatus, Server

User = get_user_model()
fake = Faker()


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    username = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Sequence(lambda n: f"user_{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True
    role = "user"
    is_banned = False


class ModeratorFactory(UserFactory):
    role = "moderator"
    username = factory.Sequence(lambda n: f"moderator_{n}")
    email = factory.Sequence(lambda n: f"moderator_{n}@example.com")


class AdminFactory(UserFactory):
    role = "admin"
    is_staff = True
    username = factory.Sequence(lambda n: f"admin_{n}")
    email = factory.Sequence(lambda n: f"admin_{n}@example.com")


class BannedUserFactory(UserFactory):
    is_banned = True
    ban_reason = "Spam"


class ServerFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Server
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: f"server-{n}")
    display_name = factory.LazyAttribute(lambda o: o.name.replace("-", " ").title())


class CategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Category
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: f"category-{n}")
    display_name = factory.LazyAttribute(lambda o: o.name.replace("-", " ").title())
    icon = "tag"
    color = "#4a90e2"
    parent = None


class ListingFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Listing

    owner = factory.SubFactory(UserFactory)
    category = factory.SubFactory(CategoryFactory)
    server = factory.SubFactory(ServerFactory)
    title = factory.Faker("sentence", nb_words=4)
    description = factory.Faker("paragraph", nb_sentences=3)
    price = factory.Faker("random_int", min=1000, max=500000)
    images = factory.LazyFunction(lambda: [fake.image_url()])
    metadata = factory.LazyFunction(lambda: {"contacts": {"discord": f"{fake.user_name()}#0001"}})
    status = ListingStatus.PENDING


class ApprovedListingFactory(ListingFactory):
    status = ListingStatus.APPROVED
    moderator = factory.SubFactory(ModeratorFactory)


class ListingFavoriteFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ListingFavorite

    user = factory.SubFactory(UserFactory)
    listing = factory.SubFactory(ApprovedListingFactory)
