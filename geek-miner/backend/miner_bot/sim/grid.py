from __future__ import annotations

from typing import Optional

import numpy as np

from miner_bot.stdio_bridge.codec import TokenReader, parse_hole_token, parse_ore_token

UNKNOWN_ORE = -1


class Grid:
    """
    Observed map state, one entry per cell in (H, W) arrays:
    - ore: revealed ore count, UNKNOWN_ORE where no radar covers the cell
    - hole: whether anyone has dug the cell
    - hole_age: turns since the hole first appeared (0 on that turn)
    """

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"empty grid {width}x{height}")
        self._ore = np.full((height, width), UNKNOWN_ORE, dtype=np.int16)
        self._hole = np.zeros((height, width), dtype=bool)
        self._hole_age = np.zeros((height, width), dtype=np.int32)

    @property
    def width(self) -> int:
        return self._ore.shape[1]

    @property
    def height(self) -> int:
        return self._ore.shape[0]

    def ore_at(self, x: int, y: int) -> Optional[int]:
        v = int(self._ore[y, x])
        return None if v == UNKNOWN_ORE else v

    def has_hole(self, x: int, y: int) -> bool:
        return bool(self._hole[y, x])

    def hole_age(self, x: int, y: int) -> int:
        return int(self._hole_age[y, x])

    # vectorised read-only views for the belief model
    @property
    def ore(self) -> np.ndarray:
        return self._ore

    @property
    def revealed(self) -> np.ndarray:
        return self._ore != UNKNOWN_ORE

    @property
    def holes(self) -> np.ndarray:
        return self._hole

    @property
    def hole_ages(self) -> np.ndarray:
        return self._hole_age

    def fresh_holes(self) -> np.ndarray:
        return self.holes & (self.hole_ages == 0)

    def apply_observation(self, tokens: TokenReader) -> None:
        """Consume width*height (ore, hole) token pairs in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                ore = parse_ore_token(tokens.next_token())
                self._ore[y, x] = UNKNOWN_ORE if ore is None else ore
                if self._hole[y, x]:
                    self._hole_age[y, x] += 1
                self._hole[y, x] = parse_hole_token(tokens.next_token())
