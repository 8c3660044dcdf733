"""Storefront URL classification.

The `Store` field holds whitespace-separated URLs. Each URL is mapped to a known store by host
substring; Steam URLs additionally carry the Steam application id.
"""

from __future__ import annotations

import re

from pobsd.parsing.schema import Store, StoreLink

STORE_HOST_MARKERS: tuple[tuple[str, Store], ...] = (
    ("steampowered", Store.steam),
    ("gog.com", Store.gog),
    ("humblebundle.com", Store.humble_bundle),
    ("itch.io", Store.itch_io),
    ("epicgames.com", Store.epic),
)

_STEAM_APP_RE = re.compile(r"https?://store\.steampowered\.com/app/(?P<id>\d+)")


def classify_store(url: str) -> Store:
    """Return the store a URL belongs to (`Store.unknown` if none matches)."""

    lowered = url.lower()
    for marker, store in STORE_HOST_MARKERS:
        if marker in lowered:
            return store
    return Store.unknown


def steam_app_id(url: str) -> int | None:
    """Extract the Steam application id from a store URL."""

    match = _STEAM_APP_RE.match(url)
    if not match:
        return None
    return int(match.group("id"))


def store_link_from_url(url: str) -> StoreLink:
    store = classify_store(url)
    store_id = steam_app_id(url) if store == Store.steam else None
    return StoreLink(url=url, store=store, store_id=store_id)


def parse_store_links(value: str) -> tuple[StoreLink, ...]:
    """Split a `Store` value on whitespace into store links (order preserved)."""

    return tuple(store_link_from_url(url) for url in value.split())
