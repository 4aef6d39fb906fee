import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rumikube.rules import Ruleset
from rumikube.tiles import JOKER_COLOR, Tile, build_full_set, hand_sort_key


def test_full_set_has_106_unique_tiles():
    tiles = build_full_set()
    assert len(tiles) == 106
    assert len({t.id for t in tiles}) == 106
    jokers = [t for t in tiles if t.is_joker()]
    assert [t.id for t in jokers] == ["j1", "j2"]
    assert all(t.color == JOKER_COLOR and t.value == 0 for t in jokers)
    assert sum(1 for t in tiles if t.color == "red" and t.value == 7) == 2


def test_tile_identity_is_immutable_but_flags_are_not():
    tile = Tile("red", 5, "red-5-a")
    with pytest.raises(AttributeError):
        tile.value = 6
    tile.is_new = True
    tile.is_fixed = True
    assert tile.signature() == ("red", 5, "red-5-a", True, True)


def test_tiles_compare_by_identity():
    a = Tile("red", 5, "red-5-a")
    b = Tile("red", 5, "red-5-a")
    assert a != b
    assert a == a


def test_hand_sort_key_orders_by_value_then_color():
    tiles = [Tile("red", 3, "red-3-a"), Tile("blue", 3, "blue-3-a"), Tile("black", 1, "black-1-a"), Tile.joker(1)]
    ordered = sorted(tiles, key=hand_sort_key)
    assert [t.id for t in ordered] == ["j1", "black-1-a", "blue-3-a", "red-3-a"]


def test_ruleset_deck_size_and_validation():
    assert Ruleset().deck_size() == 106
    assert Ruleset(num_jokers=0, copies_per_tiletype=1).deck_size() == 52
    with pytest.raises(ValueError):
        Ruleset(board_check="groups")
    with pytest.raises(ValueError):
        Ruleset(initial_hand_size=200)
