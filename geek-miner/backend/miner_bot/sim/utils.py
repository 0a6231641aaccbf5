from __future__ import annotations

import math
from typing import NamedTuple, List, Tuple

# 4-neighbourhood (Up, Down, Left, Right)
DIRS4: List[Tuple[int, int]] = [(0, -1), (0, 1), (-1, 0), (1, 0)]

# Robots move at most this many cells per turn.
MOVE_RANGE: int = 4


class Position(NamedTuple):
    x: int
    y: int

    def neighbours4(self, w: int, h: int) -> List["Position"]:
        out: List[Position] = []
        for dx, dy in DIRS4:
            nx, ny = self.x + dx, self.y + dy
            if in_bounds(nx, ny, w, h):
                out.append(Position(nx, ny))
        return out

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def in_bounds(x: int, y: int, w: int, h: int) -> bool:
    return 0 <= x < w and 0 <= y < h


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def turns_to_dig_at(src: Tuple[int, int], dst: Tuple[int, int], move_range: int = MOVE_RANGE) -> int:
    """Turns needed to walk next to `dst` and dig it (adjacent cells dig in place)."""
    dist = manhattan(src, dst)
    if dist <= 1:
        return 1
    return 1 + math.ceil((dist - 1) / move_range)


def turns_to_dig_at_and_return(src: Tuple[int, int], dst: Tuple[int, int], move_range: int = MOVE_RANGE) -> int:
    """Dig turns plus the walk from `dst` back to the home column."""
    return turns_to_dig_at(src, dst, move_range) + math.ceil(dst[0] / move_range)
