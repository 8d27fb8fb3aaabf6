"""Rendering the catalogue as a YML document with a stable publication date."""

import hashlib
import logging
import re
import threading
from dataclasses import replace
from datetime import datetime

from .entity import Catalog, Offer, Version

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'

_ESCAPES = str.maketrans({
    '"': "&#34;", "'": "&#39;", "&": "&amp;", "<": "&lt;", ">": "&gt;",
    "\t": "&#x9;", "\n": "&#xA;", "\r": "&#xD;",
})
_INVALID = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _escape(value) -> str:
    return _INVALID.sub("\ufffd", str(value)).translate(_ESCAPES)


def _leaf(tag: str, value, depth: int, attrs: str = "") -> str:
    return f"{'  ' * depth}<{tag}{attrs}>{_escape(value)}</{tag}>"


def _container(tag: str, children: list[str], depth: int, attrs: str = "") -> list[str]:
    pad = "  " * depth
    if not children:
        return [f"{pad}<{tag}{attrs}></{tag}>"]
    return [f"{pad}<{tag}{attrs}>", *children, f"{pad}</{tag}>"]


def _offer_lines(offer: Offer) -> list[str]:
    fields = {
        "vendor": offer.vendor, "price": offer.price, "currencyId": offer.currency_id,
        "categoryId": offer.category_id, "picture": offer.picture, "url": offer.url,
        "name": offer.name, "description": offer.description,
        "shortDescription": offer.short_description,
    }
    children = [_leaf(tag, value, 4) for tag, value in fields.items()]
    return _container("offer", children, 3, f' id="{_escape(offer.id)}"')


def marshal_catalog(catalog: Catalog) -> bytes:
    """Serialise the catalogue as indented XML, without the XML declaration."""
    categories = [_leaf("category", c.name, 3, f' id="{_escape(c.id)}"') for c in catalog.categories]
    offers = [line for offer in catalog.offers for line in _offer_lines(offer)]
    shop = _container("categories", categories, 2) + _container("offers", offers, 2)
    lines = [
        f'<yml_catalog date="{_escape(catalog.date)}">',
        *_container("shop", shop, 1),
        _leaf("name", catalog.name, 1),
        _leaf("company", catalog.company, 1),
        "</yml_catalog>",
    ]
    return "\n".join(lines).encode("utf-8")


def hash_bytes(data: bytes) -> str:
    """Return the hex SHA-256 digest of ``data``."""
    return hashlib.sha256(data).hexdigest()


class VersionTracker:
    """Keeps the publication date until the catalogue content changes."""

    def __init__(self):
        self._lock = threading.Lock()
        self.version = Version()

    def update(self, digest: str, now: datetime) -> str:
        """Record ``digest``; return the publication date, renewed only on change."""
        with self._lock:
            if self.version.hash != digest:
                stamp = now.astimezone() if now.tzinfo is None else now
                offset = stamp.strftime("%z")
                pub_date = f"{stamp:%Y-%m-%dT%H:%M}{offset[:3]}:{offset[3:5]}"
                self.version = Version(hash=digest, pub_date=pub_date)
                logger.info("Updating version: %s", pub_date)
            return self.version.pub_date


def render_feed(repository, config, tracker: VersionTracker, pass_link: str = "", class_link: str = "") -> bytes:
    """Build the full YML document; fetch failures are raised as RuntimeError.

    Non-empty links replace the configured default links for this and later feeds.
    """
    if pass_link:
        config.pass_default_link = pass_link
    if class_link:
        config.class_default_link = class_link
    logger.info("passLink: %s", pass_link)
    logger.info("classLink: %s", class_link)

    try:
        classes = repository.fetch_classes()
    except Exception as exc:
        raise RuntimeError(f"fetchClasses error: {exc}") from exc
    try:
        passes = repository.fetch_passes()
    except Exception as exc:
        raise RuntimeError(f"fetchPasses error: {exc}") from exc

    undated = Catalog(
        name=config.company_name,
        company=config.company_name,
        categories=list(config.categories),
        offers=[*classes, *passes],
    )
    pub_date = tracker.update(hash_bytes(marshal_catalog(undated)), datetime.now().astimezone())
    return XML_HEADER.encode("utf-8") + marshal_catalog(replace(undated, date=pub_date))