"""Single-player Rummikube rule engine."""

from .rules import Ruleset
from .tiles import Tile, build_full_set
from .state import GameEvent, GameSession, TurnPhase, Zone, new_session
from .combinations import (
    calculate_tiles_value,
    is_run,
    is_set,
    board_is_valid,
    partition_board,
)
from .engine import Outcome, TileEngine, TurnError
from .actions import Action, ActionKind, ActionQueue, apply_action, replay_event_log

__all__ = [
    "Ruleset",
    "Tile",
    "build_full_set",
    "GameEvent",
    "GameSession",
    "TurnPhase",
    "Zone",
    "new_session",
    "calculate_tiles_value",
    "is_run",
    "is_set",
    "board_is_valid",
    "partition_board",
    "Outcome",
    "TileEngine",
    "TurnError",
    "Action",
    "ActionKind",
    "ActionQueue",
    "apply_action",
    "replay_event_log",
]
