from dataclasses import dataclass
from typing import Tuple

from .tiles import TILE_COLORS

BOARD_CHECKS = ("whole", "partition")


@dataclass(frozen=True)
class Ruleset:
    colors: Tuple[str, ...] = TILE_COLORS
    values: int = 13
    copies_per_tiletype: int = 2
    num_jokers: int = 2
    initial_hand_size: int = 14
    initial_meld_min_points: int = 30
    run_requires_same_color: bool = False
    board_check: str = "whole"

    def __post_init__(self) -> None:
        if self.board_check not in BOARD_CHECKS:
            raise ValueError(f"board_check must be one of {BOARD_CHECKS}, got {self.board_check!r}")
        if self.initial_hand_size > self.deck_size():
            raise ValueError("initial hand cannot exceed the tile set")

    def deck_size(self) -> int:
        normal_tiles = len(self.colors) * self.values * self.copies_per_tiletype
        return normal_tiles + self.num_jokers
