from __future__ import annotations

import argparse
from typing import List, Optional, Sequence

from .combinations import board_is_valid, calculate_tiles_value, iter_combinations
from .engine import TileEngine
from .logging_config import get_game_logger, setup_logging
from .rules import Ruleset
from .state import TurnPhase, Zone
from .tiles import Tile

logger = get_game_logger(__name__)

HELP_TEXT = """commands:
  play N     put hand tile N on the board
  take N     take board tile N back to the hand (only tiles placed this turn)
  retract    take back every tile placed this turn
  validate   check the board and finish playing
  pass       give up playing this turn and go draw
  draw       draw a tile (after validating or passing)
  end        start the next turn
  new [SEED] start a new game
  show       print the table
  quit       leave"""


def format_tile(tile: Tile) -> str:
    if tile.is_joker():
        return "J"
    mark = "*" if tile.is_new else ""
    return f"{tile.color[0].upper()}{tile.value}{mark}"


def describe(engine: TileEngine) -> str:
    hand = " ".join(f"{i}:{format_tile(t)}" for i, t in enumerate(engine.hand)) or "-"
    board = " ".join(f"{i}:{format_tile(t)}" for i, t in enumerate(engine.board)) or "-"
    status = f"phase={engine.phase.value} deck={engine.deck_count} opened={'yes' if engine.initial_move_made else 'no'}"
    if engine.won:
        status += " WON"
    return f"{status}\nboard: {board}\nhand:  {hand}"


def _hand_index(engine: TileEngine, tile: Tile) -> int:
    for idx, candidate in enumerate(engine.hand):
        if candidate is tile:
            return idx
    raise ValueError(f"tile {tile.id} is not in hand")


def _place(engine: TileEngine, tiles: Sequence[Tile]) -> None:
    for tile in tiles:
        engine.move_tile(Zone.HAND, Zone.BOARD, _hand_index(engine, tile))


def _best_combination(engine: TileEngine) -> Optional[List[Tile]]:
    best: Optional[List[Tile]] = None
    for combo in iter_combinations(engine.hand, engine.ruleset):
        if best is None or calculate_tiles_value(combo) > calculate_tiles_value(best):
            best = combo
    if best is None:
        return None
    if not engine.initial_move_made and calculate_tiles_value(best) < engine.ruleset.initial_meld_min_points:
        return None
    return best


def _extend_board(engine: TileEngine) -> int:
    placed = 0
    progress = True
    while progress and engine.hand:
        progress = False
        for tile in list(engine.hand):
            engine.move_tile(Zone.HAND, Zone.BOARD, _hand_index(engine, tile))
            ok, _ = board_is_valid(engine.board, engine.ruleset)
            if ok:
                placed += 1
                progress = True
                break
            engine.move_tile(Zone.BOARD, Zone.HAND, len(engine.board) - 1)
    return placed


def play_bot_turn(engine: TileEngine) -> bool:
    """Play one full turn greedily. Returns True when tiles were laid down."""
    if engine.phase != TurnPhase.PLAYING:
        raise ValueError(f"bot turn must start in PLAYING, not {engine.phase.value}")

    if not engine.board or engine.ruleset.board_check == "partition":
        combo = _best_combination(engine)
        if combo is not None:
            _place(engine, combo)
    if engine.initial_move_made:
        _extend_board(engine)

    placed = bool(engine.new_tiles())
    if placed and engine.validate_turn().ok:
        if not engine.won:
            engine.validate_turn()
    else:
        engine.pass_turn()
        if not engine.draw_tile().ok:
            engine.validate_turn()
        placed = False
    if not engine.won:
        engine.end_turn()
    return placed


def run_game(seed: Optional[int] = None, ruleset: Optional[Ruleset] = None, max_turns: int = 200) -> TileEngine:
    engine = TileEngine(ruleset=ruleset, seed=seed)
    for turn in range(max_turns):
        if engine.won:
            break
        placed = play_bot_turn(engine)
        logger.debug(f"turn {turn}: placed={placed} hand={len(engine.hand)} deck={engine.deck_count}")
        if not placed and engine.deck_count == 0:
            break
    return engine


def execute_command(engine: TileEngine, line: str) -> str:
    parts = line.split()
    if not parts:
        return ""
    command, args = parts[0].lower(), parts[1:]

    if command in ("play", "take"):
        if len(args) != 1 or not args[0].isdecimal():
            return f"usage: {command} N"
        index = int(args[0])
        source, target = (Zone.HAND, Zone.BOARD) if command == "play" else (Zone.BOARD, Zone.HAND)
        if engine.move_tile(source, target, index):
            return describe(engine)
        return "move ignored"
    if command == "retract":
        return f"{engine.retract_new_tiles()} tile(s) returned\n{describe(engine)}"
    if command == "validate":
        outcome = engine.validate_turn()
    elif command == "pass":
        outcome = engine.pass_turn()
    elif command == "draw":
        outcome = engine.draw_tile()
    elif command == "end":
        outcome = engine.end_turn()
    elif command == "new":
        if args and not args[0].lstrip("-").isdecimal():
            return "usage: new [SEED]"
        engine.new_game(seed=int(args[0]) if args else None)
        return f"new game, first play must be worth {engine.ruleset.initial_meld_min_points} points\n{describe(engine)}"
    elif command == "show":
        return describe(engine)
    elif command == "help":
        return HELP_TEXT
    else:
        return f"unknown command {command!r}, try 'help'"

    prefix = "ok" if outcome.ok else f"refused ({outcome.error.value})"
    return f"{prefix}: {outcome.message}\n{describe(engine)}"


def _interactive(engine: TileEngine) -> None:
    print(describe(engine))
    while True:
        try:
            line = input("> ")
        except EOFError:
            break
        if line.strip().lower() in ("quit", "exit"):
            break
        output = execute_command(engine, line)
        if output:
            print(output)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play or simulate a single-player Rummikube game.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible deck order.")
    parser.add_argument("--max-turns", type=int, default=200, help="Turn limit for the bot simulation.")
    parser.add_argument("--same-color-runs", action="store_true", help="Runs must share one color.")
    parser.add_argument(
        "--partition-board", action="store_true", help="Accept a board made of several runs and sets."
    )
    parser.add_argument("--interactive", action="store_true", help="Play from the terminal instead of the bot.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    return parser


def ruleset_from_args(args: argparse.Namespace) -> Ruleset:
    return Ruleset(
        run_requires_same_color=args.same_color_runs,
        board_check="partition" if args.partition_board else "whole",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    rules = ruleset_from_args(args)

    if args.interactive:
        _interactive(TileEngine(ruleset=rules, seed=args.seed))
        return

    engine = run_game(seed=args.seed, ruleset=rules, max_turns=args.max_turns)
    print(f"Game finished with {len(engine.hand)} tiles in hand, {engine.deck_count} in deck")
    print("Won!" if engine.won else "No win (turn limit reached or deck exhausted)")
    print("Board:", " ".join(format_tile(t) for t in engine.board) or "-")


if __name__ == "__main__":
    main()
