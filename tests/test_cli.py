import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rumikube.cli import describe, execute_command, format_tile, main, play_bot_turn, run_game
from rumikube.engine import TileEngine
from rumikube.rules import Ruleset
from rumikube.state import TurnPhase
from rumikube.tiles import Tile


def _set_hand(engine, tile_ids):
    session = engine.session
    session.deck.extend(session.hand)
    session.hand.clear()
    for tile_id in tile_ids:
        idx = next(i for i, tile in enumerate(session.deck) if tile.id == tile_id)
        session.hand.append(session.deck.pop(idx))
    session.sort_hand()


def test_format_tile():
    tile = Tile("blue", 7, "blue-7-a")
    assert format_tile(tile) == "B7"
    tile.is_new = True
    assert format_tile(tile) == "B7*"
    assert format_tile(Tile.joker(2)) == "J"


def test_execute_command_maps_onto_engine():
    engine = TileEngine(seed=1)
    assert "refused (WRONG_PHASE)" in execute_command(engine, "draw")

    first = engine.hand[0]
    execute_command(engine, "play 0")
    assert engine.board == (first,)
    execute_command(engine, "take 0")
    assert engine.board == ()

    assert execute_command(engine, "play x") == "usage: play N"
    assert execute_command(engine, "play \u00b2") == "usage: play N"
    assert execute_command(engine, "take 3") == "move ignored"
    assert execute_command(engine, "") == ""
    assert "unknown command" in execute_command(engine, "shuffle")
    assert "validate" in execute_command(engine, "help")

    assert execute_command(engine, "pass").startswith("ok")
    assert execute_command(engine, "draw").startswith("ok")
    assert execute_command(engine, "end").startswith("ok")
    assert engine.phase == TurnPhase.PLAYING


def test_new_command_resets_game():
    engine = TileEngine(seed=1)
    execute_command(engine, "play 0")
    output = execute_command(engine, "new 4")
    assert "30 points" in output
    assert engine.board == ()
    assert [t.id for t in engine.hand] == [t.id for t in TileEngine(seed=4).hand]


def test_describe_shows_indexes_and_phase():
    engine = TileEngine(seed=1)
    text = describe(engine)
    assert "phase=PLAYING" in text
    assert "deck=92" in text
    assert "board: -" in text
    assert "hand:  0:" in text


def test_bot_opens_with_a_set():
    engine = TileEngine(seed=6)
    _set_hand(engine, ["red-10-a", "blue-10-a", "yellow-10-a", "black-2-a"])
    assert play_bot_turn(engine)
    assert len(engine.board) == 3
    assert all(t.is_fixed for t in engine.board)
    assert engine.phase == TurnPhase.PLAYING
    assert len(engine.hand) == 1


def test_bot_draws_when_it_cannot_open():
    engine = TileEngine(seed=6)
    _set_hand(engine, ["red-1-a", "blue-5-a", "black-9-a"])
    assert not play_bot_turn(engine)
    assert engine.board == ()
    assert len(engine.hand) == 4
    assert engine.phase == TurnPhase.PLAYING


def test_run_game_keeps_every_tile():
    for rules in (Ruleset(), Ruleset(board_check="partition", run_requires_same_color=True)):
        engine = run_game(seed=2, ruleset=rules, max_turns=40)
        assert engine.tile_count() == 106
        assert all(t.is_fixed for t in engine.board)


def test_main_prints_summary(capsys):
    main(["--seed", "1", "--max-turns", "5"])
    out = capsys.readouterr().out
    assert "Game finished with" in out


def test_main_interactive(monkeypatch, capsys):
    lines = iter(["show", "draw", "quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    main(["--interactive", "--seed", "3"])
    out = capsys.readouterr().out
    assert "phase=PLAYING" in out
    assert "refused (WRONG_PHASE)" in out


def test_numeric_lookalikes_do_not_break_the_loop(monkeypatch, capsys):
    engine = TileEngine(seed=1)
    assert execute_command(engine, "play ²") == "usage: play N"
    assert execute_command(engine, "new ¹") == "usage: new [SEED]"
    assert engine.board == ()

    lines = iter(["play ²", "show", "quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    main(["--interactive", "--seed", "1"])
    out = capsys.readouterr().out
    assert "usage: play N" in out
