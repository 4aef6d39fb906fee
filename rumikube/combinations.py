from __future__ import annotations

from enum import Enum
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .rules import Ruleset
from .tiles import Tile, hand_sort_key


class CombinationKind(str, Enum):
    RUN = "RUN"
    SET = "SET"


def calculate_tiles_value(tiles: Iterable[Tile]) -> int:
    return sum(tile.points() for tile in tiles)


def _run_reason(tiles: Sequence[Tile], same_color: bool) -> str:
    if len(tiles) < 3:
        return "run too short"
    colors = {tile.color for tile in tiles}
    if same_color:
        if len(colors) != 1:
            return "run must have same color"
    elif len(colors) != len(tiles):
        return "run colors must be distinct"
    sorted_vals = sorted(tile.value for tile in tiles)
    for prev, cur in zip(sorted_vals, sorted_vals[1:]):
        if cur != prev + 1:
            return "run must be consecutive"
    return ""


def _set_reason(tiles: Sequence[Tile]) -> str:
    if len(tiles) not in (3, 4):
        return "set must have length 3 or 4"
    if len({tile.value for tile in tiles}) != 1:
        return "set must share value"
    if len({tile.color for tile in tiles}) != len(tiles):
        return "set colors must be distinct"
    return ""


def is_run(tiles: Sequence[Tile], same_color: bool = False) -> bool:
    """Consecutive ascending values with no repeat.

    By default every tile must carry a different color, which is what the
    game has always accepted. ``same_color=True`` switches to the classic
    Rummikube run where every tile shares one color.
    """
    return not _run_reason(tiles, same_color)


def is_set(tiles: Sequence[Tile]) -> bool:
    return not _set_reason(tiles)


def classify(tiles: Sequence[Tile], ruleset: Ruleset) -> Optional[CombinationKind]:
    if is_run(tiles, ruleset.run_requires_same_color):
        return CombinationKind.RUN
    if is_set(tiles):
        return CombinationKind.SET
    return None


def is_valid_combination(tiles: Sequence[Tile], ruleset: Ruleset) -> bool:
    return classify(tiles, ruleset) is not None


def _run_candidates(pivot: Tile, pool: Sequence[Tile], same_color: bool) -> Iterable[List[Tile]]:
    by_value: Dict[int, List[Tile]] = {}
    for tile in pool:
        by_value.setdefault(tile.value, []).append(tile)

    def extend(chain: List[Tile]) -> Iterable[List[Tile]]:
        if len(chain) >= 3:
            yield list(chain)
        used_colors = {t.color for t in chain}
        for tile in by_value.get(chain[-1].value + 1, []):
            if same_color and tile.color != pivot.color:
                continue
            if not same_color and tile.color in used_colors:
                continue
            chain.append(tile)
            yield from extend(chain)
            chain.pop()

    yield from extend([pivot])


def _set_candidates(pivot: Tile, pool: Sequence[Tile]) -> Iterable[List[Tile]]:
    others = [t for t in pool if t.value == pivot.value and t.color != pivot.color]
    for size in (2, 3):
        for combo in combinations(others, size):
            group = [pivot, *combo]
            if is_set(group):
                yield group


MAX_SPLIT_RUN = 5

TileType = Tuple[str, int]


def partition_board(tiles: Sequence[Tile], ruleset: Ruleset) -> Optional[List[List[Tile]]]:
    """Split ``tiles`` into runs and sets that each stand on their own.

    Exact-cover backtracking over tile counts per (color, value). The lowest
    remaining tile is the smallest member of whichever combination covers it,
    so only combinations starting from it are tried. Runs longer than
    ``MAX_SPLIT_RUN`` always split into two shorter runs and are never tried.
    Returns the combinations found, or ``None`` when no split works.
    """
    by_type: Dict[TileType, List[Tile]] = {}
    for tile in sorted(tiles, key=hand_sort_key):
        by_type.setdefault((tile.color, tile.value), []).append(tile)
    types = sorted(by_type, key=lambda k: (k[1], k[0]))
    slot = {tile_type: idx for idx, tile_type in enumerate(types)}
    colors_at: Dict[int, List[str]] = {}
    for color, value in types:
        colors_at.setdefault(value, []).append(color)
    counts = [len(by_type[tile_type]) for tile_type in types]
    same_color = ruleset.run_requires_same_color
    dead_ends: Set[Tuple[int, ...]] = set()

    def available(color: str, value: int) -> bool:
        idx = slot.get((color, value))
        return idx is not None and counts[idx] > 0

    def colors_left(value: int, exclude: str) -> Set[str]:
        return {c for c in colors_at.get(value, []) if c != exclude and counts[slot[(c, value)]] > 0}

    def coverable(color: str, value: int) -> bool:
        if len(colors_left(value, color)) >= 2:
            return True
        for start in range(value - 2, value + 1):
            others = [v for v in range(start, start + 3) if v != value]
            if same_color:
                if all(available(color, v) for v in others):
                    return True
                continue
            first, second = (colors_left(v, color) for v in others)
            if first and second and len(first | second) >= 2:
                return True
        return False

    def run_candidates(pivot: int) -> Iterable[List[int]]:
        color, value = types[pivot]

        def extend(chain: List[int], used: Set[str]) -> Iterable[List[int]]:
            if len(chain) >= 3:
                yield list(chain)
            if len(chain) == MAX_SPLIT_RUN:
                return
            nxt = value + len(chain)
            for c in [color] if same_color else colors_at.get(nxt, []):
                if (not same_color and c in used) or not available(c, nxt):
                    continue
                chain.append(slot[(c, nxt)])
                yield from extend(chain, used | {c})
                chain.pop()

        yield from extend([pivot], {color})

    def set_candidates(pivot: int) -> Iterable[List[int]]:
        color, value = types[pivot]
        others = sorted(colors_left(value, color))
        for size in (2, 3):
            for combo in combinations(others, size):
                yield [pivot] + [slot[(c, value)] for c in combo]

    def search() -> Optional[List[List[int]]]:
        pivot = next((idx for idx, n in enumerate(counts) if n), None)
        if pivot is None:
            return []
        key = tuple(counts)
        if key in dead_ends:
            return None
        # only tiles within reach of the last combination can have lost cover
        reach = types[pivot][1] + MAX_SPLIT_RUN + 1
        for idx in range(pivot, len(types)):
            if types[idx][1] > reach:
                break
            if counts[idx] and not coverable(*types[idx]):
                dead_ends.add(key)
                return None
        for candidate in [*run_candidates(pivot), *set_candidates(pivot)]:
            for idx in candidate:
                counts[idx] -= 1
            rest = search()
            for idx in candidate:
                counts[idx] += 1
            if rest is not None:
                return [candidate] + rest
        dead_ends.add(key)
        return None

    if not all(coverable(*tile_type) for tile_type in types):
        return None
    found = search()
    if found is None:
        return None
    pools = {tile_type: list(group) for tile_type, group in by_type.items()}
    return [[pools[types[idx]].pop() for idx in group] for group in found]


def board_is_valid(board: Sequence[Tile], ruleset: Ruleset) -> Tuple[bool, str]:
    if not board:
        return True, ""
    if ruleset.board_check == "partition":
        if partition_board(board, ruleset) is None:
            return False, "board cannot be split into valid runs and sets"
        return True, ""
    if is_valid_combination(board, ruleset):
        return True, ""
    run_reason = _run_reason(board, ruleset.run_requires_same_color)
    set_reason = _set_reason(board)
    return False, f"board is not a single combination ({run_reason}; {set_reason})"


def iter_combinations(tiles: Sequence[Tile], ruleset: Ruleset) -> Iterable[List[Tile]]:
    """Every run or set that can be formed from ``tiles``."""
    ordered = sorted(tiles, key=hand_sort_key)
    for idx, pivot in enumerate(ordered):
        pool = ordered[idx + 1 :]
        yield from _run_candidates(pivot, pool, ruleset.run_requires_same_color)
        yield from _set_candidates(pivot, pool)
