from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .rules import Ruleset
from .tiles import Tile, hand_sort_key, iter_full_set


class Zone(str, Enum):
    HAND = "HAND"
    BOARD = "BOARD"


class TurnPhase(str, Enum):
    PLAYING = "PLAYING"
    DRAWING = "DRAWING"
    END_TURN = "END_TURN"


@dataclass
class GameEvent:
    action: str
    payload: dict


@dataclass
class GameSession:
    ruleset: Ruleset
    deck: List[Tile]
    hand: List[Tile]
    board: List[Tile] = field(default_factory=list)
    phase: TurnPhase = TurnPhase.PLAYING
    has_drawn: bool = False
    initial_move_made: bool = False
    won: bool = False
    rng_seed: Optional[int] = None
    event_log: List[GameEvent] = field(default_factory=list)

    def zone(self, zone: Zone) -> List[Tile]:
        if zone == Zone.HAND:
            return self.hand
        if zone == Zone.BOARD:
            return self.board
        raise ValueError(f"unknown zone {zone!r}")

    def sort_hand(self) -> None:
        self.hand.sort(key=hand_sort_key)

    def tile_count(self) -> int:
        return len(self.deck) + len(self.hand) + len(self.board)

    def state_key(self) -> Tuple:
        return (
            tuple(t.id for t in self.deck),
            tuple(t.id for t in self.hand),
            tuple(t.signature() for t in self.board),
            self.phase.value,
            self.has_drawn,
            self.initial_move_made,
            self.won,
        )

    def stable_hash(self) -> str:
        return hashlib.sha256(repr(self.state_key()).encode("utf-8")).hexdigest()


def _shuffled_set(ruleset: Ruleset, rng: random.Random) -> List[Tile]:
    tiles = list(
        iter_full_set(ruleset.colors, ruleset.values, ruleset.copies_per_tiletype, ruleset.num_jokers)
    )
    rng.shuffle(tiles)
    return tiles


def new_session(ruleset: Ruleset | None = None, rng_seed: Optional[int] = None) -> GameSession:
    ruleset = ruleset or Ruleset()
    rng = random.Random(rng_seed)
    deck = _shuffled_set(ruleset, rng)
    hand = [deck.pop() for _ in range(ruleset.initial_hand_size)]
    session = GameSession(ruleset=ruleset, deck=deck, hand=hand, rng_seed=rng_seed)
    session.sort_hand()
    return session
