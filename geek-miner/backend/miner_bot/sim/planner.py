from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from miner_bot.sim.belief import BeliefModel
from miner_bot.sim.entities import Action, ActionKind, BotConfig, Cooldowns, Entity, ItemKind
from miner_bot.sim.registry import EntityRegistry
from miner_bot.sim.utils import Position, turns_to_dig_at_and_return

logger = logging.getLogger(__name__)


def diamond_offsets(radius: int) -> List[Tuple[int, int]]:
    return [
        (dx, dy)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
        if abs(dx) + abs(dy) <= radius
    ]


def diamond_sum(mask: np.ndarray, radius: int) -> np.ndarray:
    """
    For every cell, how many True cells of `mask` lie within Manhattan `radius`.
    Out-of-bounds cells count as False (zero padding, no wrap-around).
    """
    h, w = mask.shape
    padded = np.pad(mask.astype(np.int32), radius, mode="constant", constant_values=0)
    out = np.zeros((h, w), dtype=np.int32)
    for dx, dy in diamond_offsets(radius):
        out += padded[radius + dy:radius + dy + h, radius + dx:radius + dx + w]
    return out


def radar_coverage(radars: List[Entity], width: int, height: int, radius: int) -> np.ndarray:
    placed = np.zeros((height, width), dtype=bool)
    for r in radars:
        placed[r.position.y, r.position.x] = True
    return diamond_sum(placed, radius) > 0


class Planner:
    """Assigns one action per friendly robot each turn."""

    def __init__(self, width: int, height: int, config: Optional[BotConfig] = None):
        self.cfg = config or BotConfig()
        self.width = width
        self.height = height
        # cells some robot already targets this turn
        self.has_digger = np.zeros((height, width), dtype=bool)

    # --------------------------
    # Turn entry point
    # --------------------------
    def plan_turn(self, registry: EntityRegistry, belief: BeliefModel, cooldowns: Cooldowns) -> List[Action]:
        self.has_digger.fill(False)
        cooldowns = Cooldowns(cooldowns.radar, cooldowns.trap)  # refreshed locally as robots request

        actions: List[Action] = []
        for robot in registry.my_robots():
            action = self.choose_action(robot, registry, belief, cooldowns)
            if not robot.dead:
                robot.history.append(action)
            actions.append(action)
        return actions

    def choose_action(
        self,
        robot: Entity,
        registry: EntityRegistry,
        belief: BeliefModel,
        cooldowns: Cooldowns,
    ) -> Action:
        if robot.dead:
            return Action.wait()

        if robot.carried == ItemKind.ORE:
            return Action.move(0, robot.position.y)

        if robot.carried == ItemKind.RADAR:
            cell = self.pick_radar_cell(registry, belief)
            return Action.dig(*cell) if cell is not None else Action.wait()

        if robot.carried == ItemKind.TRAP:
            cell = self._previous_dig_target(robot)
            if cell is not None:
                self.has_digger[cell.y, cell.x] = True
            else:
                cell = self.pick_dig_cell(robot, belief)
            if cell is None:
                return Action.wait()
            belief.note_own_trap_placement(cell)
            return Action.dig(*cell)

        if robot.at_home:
            for item in (ItemKind.RADAR, ItemKind.TRAP):
                if cooldowns.get(item) == 0:
                    cooldowns.refresh(item, self.cfg.request_cooldown)
                    logger.debug("robot %d requests %s", robot.entity_id, item.name)
                    return Action.request(item)

        cell = self.pick_dig_cell(robot, belief)
        return Action.dig(*cell) if cell is not None else Action.wait()

    def _previous_dig_target(self, robot: Entity) -> Optional[Position]:
        last = robot.last_command
        if last is None or last.kind != ActionKind.DIG:
            return None
        if self.has_digger[last.target.y, last.target.x]:
            return None
        return last.target

    # --------------------------
    # Dig target selection
    # --------------------------
    def _beats(
        self,
        risk: float,
        est: float,
        turns: int,
        best_risk: float,
        best_est: float,
        best_turns: int,
    ) -> bool:
        """Whether a candidate cell should replace the current best one."""
        if risk != best_risk:
            return risk < best_risk
        rich, best_rich = est >= 1.0, best_est >= 1.0
        if rich != best_rich:
            return rich
        if est > best_est and turns <= best_turns:
            return True
        return rich and best_rich and turns <= best_turns

    def pick_dig_cell(self, robot: Entity, belief: BeliefModel) -> Optional[Position]:
        est_grid = belief.ore_estimate
        risk_grid = belief.trap_risk
        move_range = self.cfg.move_range

        best: Optional[Position] = None
        best_risk = best_est = 0.0
        best_turns = 0
        for y in range(self.height):
            for x in range(1, self.width):
                est = float(est_grid[y, x])
                if est == 0.0 or self.has_digger[y, x]:
                    continue
                risk = float(risk_grid[y, x])
                turns = turns_to_dig_at_and_return(robot.position, (x, y), move_range)
                if best is None or self._beats(risk, est, turns, best_risk, best_est, best_turns):
                    best = Position(x, y)
                    best_risk, best_est, best_turns = risk, est, turns

        if best is not None:
            self.has_digger[best.y, best.x] = True
        return best

    # --------------------------
    # Radar placement
    # --------------------------
    def radar_scores(self, registry: EntityRegistry) -> np.ndarray:
        """Per cell: how many in-bounds, not yet covered cells a radar there would reveal."""
        radius = self.cfg.radar_radius
        covered = radar_coverage(registry.radars(), self.width, self.height, radius)
        return diamond_sum(~covered, radius)

    def pick_radar_cell(self, registry: EntityRegistry, belief: BeliefModel) -> Optional[Position]:
        risk = belief.trap_risk
        legal = (risk < 1.0) & ~self.has_digger
        legal[:, 0] = False
        if not legal.any():
            return None

        min_risk = risk[legal].min()
        tier = legal & (risk == min_risk)
        scores = np.where(tier, self.radar_scores(registry), -1)
        y, x = np.unravel_index(int(np.argmax(scores)), scores.shape)  # first max in row-major order

        self.has_digger[y, x] = True
        return Position(int(x), int(y))
