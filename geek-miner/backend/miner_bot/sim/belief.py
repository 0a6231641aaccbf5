from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from miner_bot.sim.entities import ActionKind, BotConfig, ItemKind
from miner_bot.sim.grid import Grid
from miner_bot.sim.registry import EntityRegistry
from miner_bot.sim.utils import Position

logger = logging.getLogger(__name__)


def initial_ore_estimate(width: int, height: int, scale: float) -> np.ndarray:
    """Ore is likelier further from home; no prior over rows."""
    cols = scale * np.arange(width, dtype=np.float32) / float(width)
    est = np.tile(cols, (height, 1))
    est[:, 0] = 0.0
    return est


def cross_mask(p: Tuple[int, int], width: int, height: int) -> np.ndarray:
    """Boolean (H, W) mask of p and its in-bounds 4-neighbours."""
    center = Position(*p)
    mask = np.zeros((height, width), dtype=bool)
    for x, y in [center] + center.neighbours4(width, height):
        mask[y, x] = True
    return mask


class BeliefModel:
    """
    Per-cell beliefs over what the observation does not show:
    - ore_estimate: expected remaining ore (>= 0, always 0 on the home column)
    - trap_risk: probability that the cell is mined, in [0, 1]
    """

    def __init__(self, width: int, height: int, config: Optional[BotConfig] = None):
        self.cfg = config or BotConfig()
        self.width = width
        self.height = height
        self.ore_estimate = initial_ore_estimate(width, height, self.cfg.ore_prior_scale)
        self.trap_risk = np.zeros((height, width), dtype=np.float32)

    # --------------------------
    # Direct evidence
    # --------------------------
    def report_suspected_trap_placement(self, p: Tuple[int, int]) -> None:
        mask = cross_mask(p, self.width, self.height)
        self.trap_risk[mask] = np.minimum(1.0, self.trap_risk[mask] + self.cfg.suspect_trap_risk_step)

    def note_own_trap_placement(self, p: Tuple[int, int]) -> None:
        x, y = p
        self.trap_risk[y, x] = 1.0

    # --------------------------
    # Per-turn update
    # --------------------------
    def collect_dig_outcomes(self, registry: EntityRegistry) -> Tuple[List[Position], List[Position]]:
        """
        Outcomes of last turn's own digs: a robot that now carries ore dug successfully,
        any other robot whose last command was a dig came back empty.
        """
        successful: List[Position] = []
        fruitless: List[Position] = []
        for robot in registry.my_robots():
            if robot.dead:
                continue
            last = robot.last_command
            if last is None or last.kind != ActionKind.DIG:
                continue
            if robot.carried == ItemKind.ORE:
                successful.append(last.target)
            else:
                fruitless.append(last.target)
        return successful, fruitless

    def _mask_of(self, cells: List[Position]) -> np.ndarray:
        mask = np.zeros((self.height, self.width), dtype=bool)
        for x, y in cells:
            mask[y, x] = True
        return mask

    def update(self, grid: Grid, registry: EntityRegistry) -> None:
        successful, fruitless = self.collect_dig_outcomes(registry)
        est = self.ore_estimate

        revealed = grid.revealed
        success = self._mask_of(successful) & ~revealed
        failed = self._mask_of(fruitless) & ~revealed & ~success
        enemy_hole = grid.fresh_holes() & ~revealed & ~success & ~failed

        est[success] = np.maximum(0.0, est[success] - 1.0)
        est[failed] = 0.0

        dug = est[enemy_hole]
        est[enemy_hole] = np.where(dug >= 1.0, dug - 1.0, dug * 0.5)
        self.trap_risk[enemy_hole] = np.maximum(self.trap_risk[enemy_hole], self.cfg.enemy_hole_trap_risk)

        est[revealed] = grid.ore[revealed]
        est[:, 0] = 0.0
        np.clip(self.trap_risk, 0.0, 1.0, out=self.trap_risk)

        if successful or fruitless or enemy_hole.any():
            logger.debug(
                "belief: %d successful, %d fruitless, %d enemy holes",
                len(successful), len(fruitless), int(enemy_hole.sum()),
            )

    def snapshot(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.ore_estimate.copy(), self.trap_risk.copy()
