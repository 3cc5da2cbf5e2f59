"""
Category-specific listing metadata.

Each root category has its own variant with its own required fields; anything
else falls back to ``GenericMetadata``. Variants are validated with DRF
serializers from the loosely shaped JSON clients send (camelCase keys are
accepted) and stored back as snake_case dicts.

    >>> meta = parse_metadata("cars", {"category": "sport", "maxSpeed": 320, "tuning": "ft",
    ...                                "contacts": {"discord": "racer#1"}})
    >>> meta.to_dict()["max_speed"]
    320
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from rest_framework import serializers

from utils.service_base import ValidationError
from utils.validation import collect_errors

CARS = "cars"
REAL_ESTATE = "realestate"
FISH = "fish"
TREASURES = "treasures"

# Categories whose listings must carry at least one image
IMAGE_REQUIRED_CATEGORIES = frozenset({CARS, REAL_ESTATE})

CAR_CLASSES = ("standard", "coupe", "suv", "sport", "motorcycle", "special")
TUNING_LEVELS = ("none", "ft", "fft")


def _optional_text(**kwargs):
    return serializers.CharField(required=False, allow_blank=True, allow_null=True, **kwargs)


class ContactsSerializer(serializers.Serializer):
    discord = _optional_text(max_length=100)
    telegram = _optional_text(max_length=100)
    phone = _optional_text(max_length=32)


class RequiredContactsSerializer(ContactsSerializer):
    def validate(self, attrs):
        if not any(attrs.get(name) for name in ("discord", "telegram", "phone")):
            raise serializers.ValidationError("Provide at least one of discord, telegram or phone.")
        return attrs


class MetadataSerializer(serializers.Serializer):
    """Base for variant serializers; maps camelCase aliases onto field names."""

    ALIASES: Dict[str, Tuple[str, ...]] = {}

    def to_internal_value(self, data):
        if isinstance(data, dict) and self.ALIASES:
            data = dict(data)
            for name, aliases in self.ALIASES.items():
                if data.get(name) not in (None, ""):
                    continue
                for alias in aliases:
                    if data.get(alias) not in (None, ""):
                        data[name] = data[alias]
                        break
        return super().to_internal_value(data)


class CarMetadataSerializer(MetadataSerializer):
    ALIASES = {"car_class": ("carClass", "category"), "max_speed": ("maxSpeed",)}

    car_class = serializers.ChoiceField(choices=CAR_CLASSES)
    max_speed = serializers.IntegerField(min_value=1)
    tuning = serializers.ChoiceField(choices=TUNING_LEVELS)
    contacts = RequiredContactsSerializer()


class RealEstateMetadataSerializer(MetadataSerializer):
    ALIASES = {"garage_spaces": ("garageSpaces",)}

    garage_spaces = serializers.IntegerField(min_value=1, max_value=6)
    warehouses = serializers.IntegerField(min_value=1, max_value=2)
    helipads = serializers.IntegerField(min_value=1, max_value=2)
    income = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    contacts = RequiredContactsSerializer()


class FishMetadataSerializer(MetadataSerializer):
    ALIASES = {"fish_type": ("fishType",), "catch_method": ("catchMethod",)}

    fish_type = serializers.CharField(max_length=100)
    quantity = serializers.IntegerField(min_value=1)
    species = _optional_text(max_length=100)
    weight = _optional_text(max_length=50)
    length = _optional_text(max_length=50)
    catch_method = _optional_text(max_length=100)
    bait = _optional_text(max_length=100)
    notes = _optional_text()
    contacts = RequiredContactsSerializer()


class TreasureMetadataSerializer(MetadataSerializer):
    ALIASES = {"treasure_type": ("treasureType",), "additional_info": ("additionalInfo",)}

    treasure_type = serializers.CharField(max_length=100)
    quantity = serializers.IntegerField(min_value=1)
    rarity = serializers.CharField(max_length=50)
    condition = serializers.CharField(max_length=50)
    location = serializers.CharField(max_length=200)
    additional_info = _optional_text()
    contacts = RequiredContactsSerializer()


class GenericMetadataSerializer(MetadataSerializer):
    contacts = ContactsSerializer(required=False, allow_null=True)


@dataclass(frozen=True)
class Contacts:
    discord: Optional[str] = None
    telegram: Optional[str] = None
    phone: Optional[str] = None

    def has_any(self) -> bool:
        return bool(self.discord or self.telegram or self.phone)

    @classmethod
    def from_validated(cls, data: Optional[Dict[str, Any]]) -> "Contacts":
        data = data or {}
        return cls(**{name: data.get(name) or None for name in ("discord", "telegram", "phone")})


@dataclass(frozen=True)
class _MetadataBase:
    def to_dict(self) -> Dict[str, Any]:
        def _clean(value):
            if isinstance(value, dict):
                return {k: _clean(v) for k, v in value.items() if v is not None}
            return value

        return _clean(asdict(self))

    @classmethod
    def from_validated(cls, data: Dict[str, Any], raw: Dict[str, Any]):
        values = {name: (value if value != "" else None) for name, value in data.items() if name != "contacts"}
        return cls(contacts=Contacts.from_validated(data.get("contacts")), **values)


@dataclass(frozen=True)
class CarMetadata(_MetadataBase):
    car_class: str
    max_speed: int
    tuning: str
    contacts: Contacts

    serializer_class = CarMetadataSerializer


@dataclass(frozen=True)
class RealEstateMetadata(_MetadataBase):
    garage_spaces: int
    warehouses: int
    helipads: int
    contacts: Contacts
    income: Optional[int] = None

    serializer_class = RealEstateMetadataSerializer


@dataclass(frozen=True)
class FishMetadata(_MetadataBase):
    fish_type: str
    quantity: int
    contacts: Contacts
    species: Optional[str] = None
    weight: Optional[str] = None
    length: Optional[str] = None
    catch_method: Optional[str] = None
    bait: Optional[str] = None
    notes: Optional[str] = None

    serializer_class = FishMetadataSerializer


@dataclass(frozen=True)
class TreasureMetadata(_MetadataBase):
    treasure_type: str
    quantity: int
    rarity: str
    condition: str
    location: str
    contacts: Contacts
    additional_info: Optional[str] = None

    serializer_class = TreasureMetadataSerializer


@dataclass(frozen=True)
class GenericMetadata(_MetadataBase):
    contacts: Contacts = field(default_factory=Contacts)
    extra: Dict[str, Any] = field(default_factory=dict)

    serializer_class = GenericMetadataSerializer

    @classmethod
    def from_validated(cls, data: Dict[str, Any], raw: Dict[str, Any]) -> "GenericMetadata":
        extra = {k: v for k, v in raw.items() if k != "contacts"}
        return cls(contacts=Contacts.from_validated(data.get("contacts")), extra=extra)


ListingMetadata = Union[CarMetadata, RealEstateMetadata, FishMetadata, TreasureMetadata, GenericMetadata]

METADATA_VARIANTS = {
    CARS: CarMetadata,
    REAL_ESTATE: RealEstateMetadata,
    FISH: FishMetadata,
    TREASURES: TreasureMetadata,
}


def parse_metadata(category_name: str, raw: Optional[Dict[str, Any]]) -> ListingMetadata:
    """Parse raw metadata for the given root category.

    Raises:
        ValidationError: with ``metadata.<field>`` keys for every problem found.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationError.for_fields({"metadata": ["Must be an object."]}, "Invalid metadata")

    variant = METADATA_VARIANTS.get(category_name, GenericMetadata)
    serializer = variant.serializer_class(data=raw)
    errors = collect_errors(serializer, prefix="metadata")
    if errors:
        raise ValidationError.for_fields(errors, "Invalid metadata")
    return variant.from_validated(serializer.validated_data, raw)


def requires_images(category_name: str) -> bool:
    return category_name in IMAGE_REQUIRED_CATEGORIES
