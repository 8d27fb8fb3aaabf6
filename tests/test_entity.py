import dataclasses

import pytest

from ymlfeed.entity import Catalog, Category, Offer, Version


def test_offer_defaults_are_zero_values():
    offer = Offer()
    assert (offer.id, offer.price, offer.category_id) == (0, 0, 0)
    assert offer.name == offer.description == offer.short_description == ""
    assert offer.currency_id == offer.url == offer.picture == offer.vendor == ""


def test_offer_replace_round_trip():
    offer = Offer(id=3, name="Lesson", price=700, currency_id="RUR", category_id=2)
    changed = dataclasses.replace(offer, price=900)
    assert changed.price == 900
    assert dataclasses.replace(changed, price=700) == offer


def test_category_is_immutable():
    category = Category(id=2, name="Абонементы")
    with pytest.raises(dataclasses.FrozenInstanceError):
        category.name = "other"
    assert category == Category(2, "Абонементы")


def test_catalog_lists_are_independent():
    first = Catalog()
    second = Catalog()
    first.offers.append(Offer(id=1))
    assert second.offers == []
    assert first.offers == [Offer(id=1)]


def test_catalog_equality_ignores_identity():
    offers = [Offer(id=1), Offer(id=2)]
    categories = [Category(1, "a")]
    left = Catalog(date="d", name="n", company="c", categories=categories, offers=offers)
    right = Catalog(
        date="d", name="n", company="c", categories=list(categories), offers=list(offers)
    )
    assert left == right
    assert dataclasses.replace(left, date="") != right


def test_version_is_updatable():
    version = Version()
    assert (version.hash, version.pub_date) == ("", "")
    version.hash = "abc"
    version.pub_date = "2024-01-01T10:00+03:00"
    assert version == Version("abc", "2024-01-01T10:00+03:00")