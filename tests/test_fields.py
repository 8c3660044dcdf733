"""Tests for database line splitting and per-key value conversion."""

from __future__ import annotations

from datetime import date

import pytest

from pobsd.parsing.fields import (
    FieldKey,
    MalformedLineError,
    parse_field,
    parse_status,
    render_game,
    split_items,
    split_line,
)
from pobsd.parsing.schema import Game, GameStatus, Status, Store


def test_split_line_on_first_tab() -> None:
    assert split_line("Game\tFoo\tBar") == ("Game", "Foo\tBar")
    assert split_line("Engine\t") == ("Engine", "")


def test_split_line_without_tab() -> None:
    assert split_line("Cover") == ("Cover", None)
    assert split_line("Cover   ") == ("Cover", None)


def test_split_items_drops_blank_items() -> None:
    assert split_items(" indie, ,local co-op ,") == ("indie", "local co-op")
    assert split_items(" , ") == ()


def test_parse_text_field() -> None:
    field = parse_field("Engine\t  godot ")
    assert field.key == FieldKey.engine
    assert field.attribute == "engine"
    assert field.value == "godot"


def test_bare_key_is_blank_field() -> None:
    field = parse_field("Cover")
    assert field.key == FieldKey.cover
    assert field.value is None


def test_empty_value_is_blank_field() -> None:
    assert parse_field("Hints\t   ").value is None


def test_multi_valued_fields_keep_order() -> None:
    assert parse_field("Genre\tStrategy, Simulation").value == ("Strategy", "Simulation")
    assert parse_field("Dev\tB, A").value == ("B", "A")
    assert parse_field("Pub\tFun Quarter").attribute == "publis"


def test_multi_valued_field_of_separators_is_blank() -> None:
    assert parse_field("Tags\t , ,").value is None


def test_integer_fields() -> None:
    assert parse_field("Year\t2011").value == 2011
    assert parse_field("IgdbId\t128743").value == 128743


@pytest.mark.parametrize("line", ["Year\tsoon", "Year\t20x1", "IgdbId\t-4", "IgdbId\t1.5"])
def test_non_integer_value_is_malformed(line: str) -> None:
    with pytest.raises(MalformedLineError) as exc_info:
        parse_field(line)
    assert exc_info.value.key in {FieldKey.year, FieldKey.igdb_id}
    assert "invalid" in str(exc_info.value)


def test_calendar_dates() -> None:
    assert parse_field("Added\t2022-05-13").value == date(2022, 5, 13)


@pytest.mark.parametrize("value", ["13/05/2022", "2022-5-13", "2022-02-30", "yesterday"])
def test_bad_calendar_date_is_malformed(value: str) -> None:
    with pytest.raises(MalformedLineError) as exc_info:
        parse_field(f"Updated\t{value}")
    assert exc_info.value.key == FieldKey.updated


def test_store_field() -> None:
    links = parse_field(
        "Store\thttps://store.steampowered.com/app/211820/Shuggy/ https://www.gog.com/game/shuggy"
    ).value
    assert [link.store for link in links] == [Store.steam, Store.gog]
    assert links[0].store_id == 211820
    assert links[1].store_id is None


def test_unknown_key_is_malformed() -> None:
    with pytest.raises(MalformedLineError, match="unknown field 'Platform'") as exc_info:
        parse_field("Platform\tOpenBSD")
    assert exc_info.value.key is None


def test_keys_are_case_sensitive() -> None:
    with pytest.raises(MalformedLineError, match="unknown field"):
        parse_field("game\tAeternum")


def test_line_without_tab_is_malformed() -> None:
    with pytest.raises(MalformedLineError, match="missing tab separator"):
        parse_field("Aeternum is a shoot'em up")


def test_parse_status_with_level_and_date() -> None:
    status = parse_status("5 completable (2021-03-02)")
    assert status.text == "5 completable (2021-03-02)"
    assert status.level == Status.completable
    assert status.tested_on == date(2021, 3, 2)


def test_parse_status_without_level() -> None:
    status = parse_status("runs")
    assert status.level == Status.unknown
    assert status.tested_on is None


def test_parse_status_with_unparseable_annotation() -> None:
    status = parse_status("4 minor bugs (see hints)")
    assert status.level == Status.minor_bugs
    assert status.tested_on is None


def test_render_game_writes_every_key_in_order() -> None:
    game = Game(
        name="Aeternum",
        engine="Godot",
        tags=("indie", "bullet hell"),
        year=2019,
        status=GameStatus(text="6 perfect", level=Status.perfect),
        added=date(2021, 5, 5),
    )
    lines = render_game(game).split("\n")
    assert [line.split("\t")[0] for line in lines] == [key.value for key in FieldKey]
    assert lines[0] == "Game\tAeternum"
    assert lines[1] == "Cover"
    assert "Tags\tindie, bullet hell" in lines
    assert "Year\t2019" in lines
    assert "Status\t6 perfect" in lines
    assert "Added\t2021-05-05" in lines
