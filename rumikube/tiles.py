from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

JOKER_COLOR = "joker"
JOKER_VALUE = 0
TILE_COLORS: Tuple[str, ...] = ("red", "blue", "yellow", "black")
COPY_SUFFIXES = "abcdefghijklmnopqrstuvwxyz"


@dataclass(eq=False)
class Tile:
    """One physical tile.

    ``color``, ``value`` and ``id`` identify the tile and never change once it
    is built. ``is_new`` and ``is_fixed`` track where it stands in the current
    turn.
    """

    color: str
    value: int
    id: str
    is_new: bool = False
    is_fixed: bool = False

    _IDENTITY = ("color", "value", "id")

    def __setattr__(self, name: str, value) -> None:
        if name in self._IDENTITY and name in self.__dict__:
            raise AttributeError(f"tile {name} is immutable")
        super().__setattr__(name, value)

    def is_joker(self) -> bool:
        return self.color == JOKER_COLOR

    def points(self) -> int:
        return 0 if self.is_joker() else self.value

    def label(self) -> str:
        return "J" if self.is_joker() else str(self.value)

    def signature(self) -> Tuple[str, int, str, bool, bool]:
        return (self.color, self.value, self.id, self.is_new, self.is_fixed)

    @classmethod
    def joker(cls, number: int) -> "Tile":
        return cls(JOKER_COLOR, JOKER_VALUE, f"j{number}")


def hand_sort_key(tile: Tile) -> Tuple[int, str, str]:
    return (tile.value, tile.color, tile.id)


def iter_full_set(
    colors: Sequence[str], values: int, copies: int, num_jokers: int
) -> Iterable[Tile]:
    if copies > len(COPY_SUFFIXES):
        raise ValueError(f"at most {len(COPY_SUFFIXES)} copies per tile type")
    for color in colors:
        for value in range(1, values + 1):
            for copy_idx in range(copies):
                yield Tile(color, value, f"{color}-{value}-{COPY_SUFFIXES[copy_idx]}")
    for number in range(1, num_jokers + 1):
        yield Tile.joker(number)


def build_full_set(
    colors: Sequence[str] = TILE_COLORS, values: int = 13, copies: int = 2, num_jokers: int = 2
) -> List[Tile]:
    return list(iter_full_set(colors, values, copies, num_jokers))
