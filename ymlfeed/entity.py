"""Data records that make up a YML catalogue."""

from dataclasses import dataclass, field


@dataclass
class Version:
    """Digest of the last published catalogue and its publication date."""

    hash: str = ""
    pub_date: str = ""


@dataclass(frozen=True)
class Category:
    """A catalogue category."""

    id: int = 0
    name: str = ""


@dataclass
class Offer:
    """A single offer in the catalogue."""

    id: int = 0
    vendor: str = ""
    price: int = 0
    currency_id: str = ""
    category_id: int = 0
    picture: str = ""
    url: str = ""
    name: str = ""
    description: str = ""
    short_description: str = ""


@dataclass
class Catalog:
    """The whole catalogue: shop categories and offers plus shop details."""

    date: str = ""
    name: str = ""
    company: str = ""
    categories: list[Category] = field(default_factory=list)
    offers: list[Offer] = field(default_factory=list)