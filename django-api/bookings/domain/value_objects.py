"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Self


class EventStatus(Enum):
    """Lifecycle of a booking."""

    PLANNED = "planned"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or cls.PLANNED.value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown event status: {value!r}") from None


class Role(Enum):
    """Role held by a signed-in session."""

    ADMIN = "admin"
    STAFF = "staff"
    NONE = "none"


PREDEFINED_ROOMS = ("Event 1", "Event 2", "Restaurant")

# Selectable services offered with a booking, key -> display label.
SERVICE_CATALOG: dict[str, str] = {
    "round_tables": "Runde Tische",
    "square_tables": "Eckige Tische",
    "chicken_saute": "Hähnchengeschnetzeltes",
    "beef_goulash": "Rindergulasch",
    "half_chicken": "Halbes Hähnchen",
    "rice": "Reis",
    "vegetables": "Gemüse",
    "seasonal_salad": "Salat der Jahreszeit",
    "fries_or_potatoes": "Pommes / Salzkartoffeln",
    "antipasti_starters": "Antipasti, Vorspeisen & Brot",
    "snacks": "Knabbereien",
    "fruit_bowl": "Obstschale",
    "baklava_dessert": "Nachtisch Baklava",
    "tea_coffee_service": "Tee- & Kaffeeservice",
    "soft_drinks_water": "Softgetränke & Mineralwasser",
    "wedding_cake_three_tier": "Hochzeitstorte 3 Etagen",
    "wedding_cake_flat": "Hochzeitstorte flach",
    "fruit_cake_buffet": "Obst- & Kuchenbuffet",
    "soup_main_course": "Suppe & Hauptgang",
    "cocktail_reception": "Cocktailempfang",
    "standard_decoration": "Standard-Dekoration",
    "column_flowers_fireworks": "Säulenabgrenzung mit Blumen & Feuerwerk",
    "column_cake_cutting": "Säulenabgrenzung zum Kuchenanschneiden",
    "entrance_fireworks": "Eingangsfeuerwerk Brautpaar",
    "general_service": "Service allgemein",
    "band_dj": "Band / DJ",
    "drum_zurna_4h": "Davul & Zurna (4 Stunden)",
    "drum_zurna_bride_pickup": "Davul & Zurna mit Brautabholung",
    "video_crane_without_groom": "Videokamera-Kran HD ohne Bräutigam",
    "video_crane_with_groom": "Videokamera-Kran HD mit Bräutigam",
    "photoshoot_usb": "Fotoshooting auf USB",
    "wedding_story_clip": "Wedding Story Clip",
    "photo_album": "Fotoalbum",
    "helicopter_landing": "Helikopterlandung",
}

# Top-level boolean keys older documents used for each service.
LEGACY_SERVICE_FLAGS: dict[str, tuple[str, ...]] = {
    "round_tables": ("rundeTische",),
    "square_tables": ("eckigeTische",),
    "chicken_saute": ("etSoteHaehnchengeschnetzeltes",),
    "beef_goulash": ("tavukSoteRindergulasch",),
    "half_chicken": ("halbesHaehnchen",),
    "rice": ("reis",),
    "vegetables": ("gemuese",),
    "seasonal_salad": ("salatJahreszeit",),
    "fries_or_potatoes": ("pommesSalzkartoffel",),
    "antipasti_starters": ("antipastiVorspeisenBrot",),
    "snacks": ("knabbereienCerez",),
    "fruit_bowl": ("obstschale",),
    "baklava_dessert": ("nachtischBaklava",),
    "tea_coffee_service": ("teeKaffeeservice",),
    "soft_drinks_water": ("softgetraenkeMineralwasser",),
    "wedding_cake_three_tier": ("hochzeitstorte3Etagen",),
    "wedding_cake_flat": ("hochzeitstorteFlach",),
    "fruit_cake_buffet": ("obstKuchenbuffetTatli",),
    "soup_main_course": ("suppeHauptgang",),
    "cocktail_reception": ("cocktailEmpfang",),
    "standard_decoration": ("standardDekoration",),
    "column_flowers_fireworks": ("saeulenabgrenzungBlumenFeuerwerk",),
    "column_cake_cutting": ("saeulenabgrenzungKuchenAnschneiden",),
    "entrance_fireworks": ("eingangsfeuerwerkBrautpaar",),
    "general_service": ("serviceAllgemein",),
    "band_dj": ("bandDj",),
    "drum_zurna_4h": ("davulZurna4Stunden",),
    "drum_zurna_bride_pickup": ("davulZurnaMitBrautabholung",),
    "video_crane_without_groom": ("videoKameraKranHDOhne",),
    "video_crane_with_groom": ("videoKameraKranHDMit", "videoKameraKranHDMitBrautigam"),
    "photoshoot_usb": ("fotoshootingUSB",),
    "wedding_story_clip": ("weddingStoryClip",),
    "photo_album": ("fotoalbum",),
    "helicopter_landing": ("helikopterlandung",),
}


def service_key(name: str) -> str | None:
    """Resolve a catalog key, legacy flag name or display label to its catalog key."""
    name = name.strip()
    if name in SERVICE_CATALOG:
        return name
    for key, legacy in LEGACY_SERVICE_FLAGS.items():
        if name in legacy or name == SERVICE_CATALOG[key]:
            return key
    return None


# "1.250" and "12.500.000": dots grouping thousands, no decimal part.
_GROUPED_THOUSANDS = re.compile(r"\d{1,3}(\.\d{3})+")


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    def __sub__(self, other: "Money") -> "Money":
        return Money(max(self.amount - other.amount, Decimal("0")))

    @classmethod
    def parse(cls, value: Any) -> Self | None:
        """Build from a number or decimal-like string; blank values yield None.

        Accepts a currency sign and German formatting ("1.250,50 €", "1.250 €").
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, Money):
            return value
        if isinstance(value, (int, float, Decimal)):
            text = str(value)
        else:
            text = str(value).replace("€", "").replace(" ", "").strip()
            if not text:
                return None
            if "," in text or _GROUPED_THOUSANDS.fullmatch(text):
                text = text.replace(".", "").replace(",", ".")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Invalid money amount: {value!r}") from None
        if not amount.is_finite():
            raise ValueError(f"Invalid money amount: {value!r}")
        return cls(amount=amount)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")

    @classmethod
    def parse(cls, value: Any) -> Self | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, Capacity):
            return value
        text = str(value).strip()
        if not text:
            return None
        try:
            return cls(value=int(text))
        except ValueError:
            raise ValueError(f"Invalid guest count: {value!r}") from None


@dataclass(frozen=True)
class Preferences:
    """Broad service preferences recorded on a customer."""

    catering: bool = False
    decoration: bool = False
    music: bool = False
    photography: bool = False

    @classmethod
    def from_mapping(cls, data: dict[str, Any] | None) -> Self:
        data = data or {}
        return cls(**{f.name: bool(data.get(f.name, False)) for f in fields(cls)})

    def to_mapping(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ContactInfo:
    """Contact fields captured with a booking before a customer exists."""

    first_name: str = ""
    last_name: str = ""
    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    street_and_number: str = ""
    zip_and_city: str = ""
    notes: str = ""

    @property
    def display_name(self) -> str:
        return compose_name(self.first_name, self.last_name) or self.name.strip()

    @property
    def address(self) -> str:
        return compose_address(self.street_and_number, self.zip_and_city)


# Contact fields an event may carry and push onto its customer.
CONTACT_FIELDS = (
    "first_name",
    "last_name",
    "company",
    "email",
    "phone",
    "mobile",
    "street_and_number",
    "zip_and_city",
    "notes",
)


def compose_name(first_name: str | None, last_name: str | None) -> str:
    return " ".join(part.strip() for part in (first_name, last_name) if part and part.strip())


def compose_address(
    street_and_number: str | None,
    zip_and_city: str | None,
    existing: str | None = None,
) -> str:
    """Join street and zip/city into one display address.

    A non-blank ``existing`` address always wins. A street value that already
    ends with the zip/city part is returned as is, so recomposing a composed
    address is a no-op.
    """
    if existing and existing.strip():
        return existing
    street = (street_and_number or "").strip()
    city = (zip_and_city or "").strip()
    if street and city and (street == city or street.endswith(", " + city)):
        return street
    return ", ".join(part for part in (street, city) if part)
