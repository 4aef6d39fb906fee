import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rumikube.engine import Outcome, TileEngine, TurnError
from rumikube.gui import (
    build_parser,
    control_states,
    hit_test,
    layout_row,
    resolve_screenshot_path,
    status_text,
    tile_label,
    tile_rgb,
)
from rumikube.cli import ruleset_from_args
from rumikube.state import Zone
from rumikube.tiles import Tile


def test_layout_row_wraps_and_hit_test_finds_tiles():
    rects = layout_row(5, (0, 0), max_width=100, tile_w=44, tile_h=60, gap=8)
    assert rects[0] == (0, 0, 44, 60)
    assert rects[1] == (52, 0, 44, 60)
    assert rects[2] == (0, 68, 44, 60)

    assert hit_test(rects, (53, 1)) == 1
    assert hit_test(rects, (10, 70)) == 2
    assert hit_test(rects, (47, 1)) is None


def test_control_states_follow_phase():
    engine = TileEngine(seed=1)
    states = control_states(engine)
    assert states == {
        "validate": True,
        "pass": True,
        "retract": False,
        "draw": False,
        "end": False,
        "new": True,
    }

    engine.move_tile(Zone.HAND, Zone.BOARD, 0)
    assert control_states(engine)["retract"]

    engine.pass_turn()
    states = control_states(engine)
    assert states["draw"] and not states["validate"]

    engine.draw_tile()
    assert control_states(engine)["end"]


def test_tile_label_and_color():
    assert tile_label(Tile("red", 12, "red-12-a")) == "12"
    assert tile_label(Tile.joker(1)) == "J"
    assert tile_rgb(Tile("blue", 1, "blue-1-a")) == (40, 90, 200)


def test_status_text():
    engine = TileEngine(seed=1)
    assert "30 points" in status_text(engine, None)
    failure = Outcome.failure(TurnError.WRONG_PHASE, "still playing")
    assert status_text(engine, failure) == "still playing"


def test_resolve_screenshot_path_reads_env(tmp_path, monkeypatch):
    path = tmp_path / "shot.png"
    monkeypatch.setenv("RUMIKUBE_GUI_SCREENSHOT_PATH", str(path))
    assert resolve_screenshot_path() == path
    monkeypatch.delenv("RUMIKUBE_GUI_SCREENSHOT_PATH")
    assert resolve_screenshot_path() is None


def test_gui_parser_builds_ruleset_like_cli():
    args = build_parser().parse_args(["--partition-board", "--same-color-runs", "--seed", "4"])
    rules = ruleset_from_args(args)
    assert rules.board_check == "partition"
    assert rules.run_requires_same_color
    assert args.seed == 4

    default = ruleset_from_args(build_parser().parse_args([]))
    assert default.board_check == "whole"
    assert not default.run_requires_same_color
