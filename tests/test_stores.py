"""Tests for storefront URL classification."""

from __future__ import annotations

import pytest

from pobsd.parsing.schema import Store
from pobsd.parsing.stores import classify_store, parse_store_links, steam_app_id


@pytest.mark.parametrize(
    ("url", "store"),
    [
        ("https://store.steampowered.com/app/1869200/The_Adventures_of_Mr_Hat/", Store.steam),
        ("https://www.gog.com/game/barrow_hill_curse_of_the_ancient_circle", Store.gog),
        ("https://www.humblebundle.com/store/aaaaaaaaaaaaaaaaaaaaaaaaa", Store.humble_bundle),
        ("https://lasercat.itch.io/aeternum", Store.itch_io),
        ("https://store.epicgames.com/en-US/p/some-game", Store.epic),
        ("https://example.org/some-game", Store.unknown),
    ],
)
def test_classify_store(url: str, store: Store) -> None:
    assert classify_store(url) == store


def test_steam_app_id() -> None:
    assert steam_app_id("https://store.steampowered.com/app/342560/Airships/") == 342560
    assert steam_app_id("https://store.steampowered.com/bundle/232/") is None


def test_parse_store_links_keeps_order() -> None:
    links = parse_store_links(
        "https://www.gog.com/game/shuggy  https://store.steampowered.com/app/211820/Shuggy/"
    )
    assert [link.url for link in links] == [
        "https://www.gog.com/game/shuggy",
        "https://store.steampowered.com/app/211820/Shuggy/",
    ]
    assert links[0].store_id is None
    assert links[1].store_id == 211820
