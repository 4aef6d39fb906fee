from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .combinations import board_is_valid, calculate_tiles_value
from .logging_config import get_game_logger
from .rules import Ruleset
from .state import GameEvent, GameSession, TurnPhase, Zone, new_session
from .tiles import Tile

logger = get_game_logger(__name__)


class TurnError(str, Enum):
    WRONG_PHASE = "WRONG_PHASE"
    EMPTY_DECK = "EMPTY_DECK"
    OPENING_TOO_LOW = "OPENING_TOO_LOW"
    INVALID_BOARD = "INVALID_BOARD"
    TURN_FINISHED = "TURN_FINISHED"
    GAME_OVER = "GAME_OVER"
    MOVE_IGNORED = "MOVE_IGNORED"


@dataclass(frozen=True)
class Outcome:
    ok: bool
    error: Optional[TurnError] = None
    message: str = ""
    value: Optional[int] = None

    @staticmethod
    def success(message: str = "") -> "Outcome":
        return Outcome(True, None, message)

    @staticmethod
    def failure(error: TurnError, message: str, value: Optional[int] = None) -> "Outcome":
        return Outcome(False, error, message, value)


class TileEngine:
    """Rule engine for one single-player game.

    Every public operation runs to completion and leaves the session
    consistent. Rejected actions are reported through an ``Outcome``; tile
    moves that break a precondition are ignored.
    """

    def __init__(self, ruleset: Ruleset | None = None, seed: Optional[int] = None) -> None:
        self.ruleset = ruleset or Ruleset()
        self.session: GameSession = new_session(self.ruleset, seed)

    # --- Game control ----------------------------------------------------------

    def new_game(self, seed: Optional[int] = None) -> None:
        self.session = new_session(self.ruleset, seed)
        logger.debug(
            f"New game (seed={seed}): {len(self.session.hand)} tiles dealt, {len(self.session.deck)} in deck"
        )

    def move_tile(self, from_zone: Zone, to_zone: Zone, index: int) -> bool:
        session = self.session
        source = session.zone(Zone(from_zone))
        target = session.zone(Zone(to_zone))
        if session.won or session.phase != TurnPhase.PLAYING:
            return False
        if source is target or not 0 <= index < len(source):
            return False
        tile = source[index]
        if source is session.board and target is session.hand and tile.is_fixed:
            return False

        del source[index]
        target.append(tile)
        if target is session.board:
            tile.is_new = True
        else:
            tile.is_new = False
            session.sort_hand()
        self._record("MOVE", {"from": Zone(from_zone).value, "to": Zone(to_zone).value, "index": index, "tile": tile.id})
        return True

    def retract_new_tiles(self) -> int:
        session = self.session
        if session.won or session.phase != TurnPhase.PLAYING:
            return 0
        moved = 0
        for index in range(len(session.board) - 1, -1, -1):
            if session.board[index].is_new and self.move_tile(Zone.BOARD, Zone.HAND, index):
                moved += 1
        return moved

    def draw_tile(self) -> Outcome:
        session = self.session
        if session.won:
            return Outcome.failure(TurnError.GAME_OVER, "the game is over")
        if session.phase != TurnPhase.DRAWING or session.has_drawn:
            return Outcome.failure(
                TurnError.WRONG_PHASE, "still playing: validate your turn or pass before drawing"
            )
        if not session.deck:
            return Outcome.failure(TurnError.EMPTY_DECK, "the deck is empty")

        tile = session.deck.pop()
        session.hand.append(tile)
        session.sort_hand()
        session.has_drawn = True
        session.phase = TurnPhase.END_TURN
        self._record("DRAW", {"tile": tile.id})
        return Outcome.success(f"tile drawn, turn over; {len(session.deck)} left in deck")

    def validate_turn(self) -> Outcome:
        session = self.session
        if session.won:
            return Outcome.failure(TurnError.GAME_OVER, "the game is over")
        if session.phase == TurnPhase.DRAWING:
            session.phase = TurnPhase.END_TURN
            self._record("VALIDATE", {"finished": True})
            return Outcome.failure(TurnError.TURN_FINISHED, "turn already finished")
        if session.phase == TurnPhase.END_TURN:
            return Outcome.failure(TurnError.TURN_FINISHED, "turn already finished")

        if not session.initial_move_made:
            value = calculate_tiles_value(self.new_tiles())
            threshold = self.ruleset.initial_meld_min_points
            if value < threshold:
                logger.info(f"Opening rejected: {value} < {threshold}")
                return Outcome.failure(
                    TurnError.OPENING_TOO_LOW,
                    f"opening must be worth at least {threshold} points, placed {value}",
                    value,
                )

        ok, reason = board_is_valid(session.board, self.ruleset)
        if not ok:
            logger.info(f"Board rejected: {reason}")
            return Outcome.failure(TurnError.INVALID_BOARD, f"invalid board: {reason}")

        for tile in session.board:
            tile.is_fixed = True
            tile.is_new = False
        session.initial_move_made = True
        session.phase = TurnPhase.DRAWING
        session.has_drawn = False
        if not session.hand:
            session.won = True
            logger.info("Hand emptied: game won")
        self._record("VALIDATE", {"finished": False})
        if session.won:
            return Outcome.success("you won the game")
        return Outcome.success(f"turn validated; {len(session.deck)} left in deck")

    def pass_turn(self) -> Outcome:
        session = self.session
        if session.won:
            return Outcome.failure(TurnError.GAME_OVER, "the game is over")
        if session.phase != TurnPhase.PLAYING:
            return Outcome.failure(TurnError.WRONG_PHASE, "can only pass while playing")
        returned = self.retract_new_tiles()
        session.phase = TurnPhase.DRAWING
        session.has_drawn = False
        self._record("PASS", {"returned": returned})
        return Outcome.success("passed; draw a tile")

    def end_turn(self) -> Outcome:
        session = self.session
        if session.won:
            return Outcome.failure(TurnError.GAME_OVER, "the game is over")
        if session.phase != TurnPhase.END_TURN:
            return Outcome.failure(TurnError.WRONG_PHASE, "the turn is not over yet")
        session.phase = TurnPhase.PLAYING
        session.has_drawn = False
        self._record("END_TURN", {})
        return Outcome.success("new turn")

    # --- Accessors -------------------------------------------------------------

    @property
    def deck_count(self) -> int:
        return len(self.session.deck)

    @property
    def hand(self) -> Tuple[Tile, ...]:
        return tuple(self.session.hand)

    @property
    def board(self) -> Tuple[Tile, ...]:
        return tuple(self.session.board)

    @property
    def phase(self) -> TurnPhase:
        return self.session.phase

    @property
    def has_drawn(self) -> bool:
        return self.session.has_drawn

    @property
    def initial_move_made(self) -> bool:
        return self.session.initial_move_made

    @property
    def won(self) -> bool:
        return self.session.won

    def new_tiles(self) -> List[Tile]:
        return [tile for tile in self.session.board if tile.is_new]

    def tile_count(self) -> int:
        return self.session.tile_count()

    def can_move(self) -> bool:
        return not self.session.won and self.session.phase == TurnPhase.PLAYING

    def can_validate(self) -> bool:
        return self.can_move()

    def can_draw(self) -> bool:
        session = self.session
        return (
            not session.won
            and session.phase == TurnPhase.DRAWING
            and not session.has_drawn
            and bool(session.deck)
        )

    def _record(self, action: str, payload: dict) -> None:
        self.session.event_log.append(GameEvent(action=action, payload=payload))
        logger.debug(f"{action} {payload} -> phase={self.session.phase.value}")
