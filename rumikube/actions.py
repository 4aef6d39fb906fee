from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Iterable, List, Optional

from .engine import Outcome, TileEngine, TurnError
from .rules import Ruleset
from .state import GameEvent, Zone


class ActionKind(str, Enum):
    MOVE = "MOVE"
    DRAW = "DRAW"
    VALIDATE = "VALIDATE"
    PASS = "PASS"
    END_TURN = "END_TURN"
    RETRACT = "RETRACT"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    from_zone: Optional[Zone] = None
    to_zone: Optional[Zone] = None
    index: int = -1

    @staticmethod
    def move(from_zone: Zone, to_zone: Zone, index: int) -> "Action":
        return Action(ActionKind.MOVE, Zone(from_zone), Zone(to_zone), index)

    @staticmethod
    def play(index: int) -> "Action":
        return Action.move(Zone.HAND, Zone.BOARD, index)

    @staticmethod
    def take_back(index: int) -> "Action":
        return Action.move(Zone.BOARD, Zone.HAND, index)

    @staticmethod
    def draw() -> "Action":
        return Action(ActionKind.DRAW)

    @staticmethod
    def validate() -> "Action":
        return Action(ActionKind.VALIDATE)

    @staticmethod
    def skip() -> "Action":
        return Action(ActionKind.PASS)

    @staticmethod
    def end_turn() -> "Action":
        return Action(ActionKind.END_TURN)

    @staticmethod
    def retract() -> "Action":
        return Action(ActionKind.RETRACT)


def apply_action(engine: TileEngine, action: Action) -> Outcome:
    if action.kind == ActionKind.MOVE:
        if action.from_zone is None or action.to_zone is None:
            raise ValueError("move action needs both zones")
        if engine.move_tile(action.from_zone, action.to_zone, action.index):
            return Outcome.success("tile moved")
        return Outcome.failure(TurnError.MOVE_IGNORED, "move ignored")
    if action.kind == ActionKind.DRAW:
        return engine.draw_tile()
    if action.kind == ActionKind.VALIDATE:
        return engine.validate_turn()
    if action.kind == ActionKind.PASS:
        return engine.pass_turn()
    if action.kind == ActionKind.END_TURN:
        return engine.end_turn()
    if action.kind == ActionKind.RETRACT:
        return Outcome.success(f"{engine.retract_new_tiles()} tiles returned to hand")
    raise ValueError(f"Unknown action kind {action.kind}")


class ActionQueue:
    """Pending actions applied one after another in the caller's thread."""

    def __init__(self, actions: Iterable[Action] = ()) -> None:
        self._pending: Deque[Action] = deque(actions)

    def __len__(self) -> int:
        return len(self._pending)

    def push(self, action: Action) -> None:
        self._pending.append(action)

    def extend(self, actions: Iterable[Action]) -> None:
        self._pending.extend(actions)

    def clear(self) -> None:
        self._pending.clear()

    def drain(self, engine: TileEngine, stop_on_error: bool = False) -> List[Outcome]:
        outcomes: List[Outcome] = []
        while self._pending:
            outcome = apply_action(engine, self._pending.popleft())
            outcomes.append(outcome)
            if stop_on_error and not outcome.ok:
                break
        return outcomes


def _action_from_event(event: GameEvent) -> Action:
    if event.action == ActionKind.MOVE.value:
        return Action.move(Zone(event.payload["from"]), Zone(event.payload["to"]), event.payload["index"])
    if event.action in (ActionKind.DRAW.value, ActionKind.VALIDATE.value, ActionKind.PASS.value, ActionKind.END_TURN.value):
        return Action(ActionKind(event.action))
    raise ValueError(f"Unknown event kind {event.action}")


def replay_event_log(
    events: Iterable[GameEvent], seed: Optional[int], ruleset: Ruleset | None = None
) -> TileEngine:
    engine = TileEngine(ruleset=ruleset, seed=seed)
    for event in list(events):
        outcome = apply_action(engine, _action_from_event(event))
        if not outcome.ok and outcome.error != TurnError.TURN_FINISHED:
            raise ValueError(f"event {event.action} could not be replayed: {outcome.message}")
    return engine
