from __future__ import annotations

import logging
from typing import Callable, List, Optional

from miner_bot.sim.belief import BeliefModel
from miner_bot.sim.entities import Action, BotConfig, Cooldowns, Entity
from miner_bot.sim.grid import Grid
from miner_bot.sim.metrics import MatchMetrics
from miner_bot.sim.planner import Planner
from miner_bot.sim.registry import EntityRegistry
from miner_bot.stdio_bridge.codec import TokenReader
from miner_bot.stdio_bridge.serializers import format_heatmap, pack_belief_state

logger = logging.getLogger(__name__)


class Game:
    """
    Owns every piece of match state. One call to play_turn() per driver turn:
    grid first, then entities, then beliefs, then the planner.
    """

    def __init__(
        self,
        width: int,
        height: int,
        config: Optional[BotConfig] = None,
        snapshot_sink: Optional[Callable[[dict], None]] = None,
    ):
        self.cfg = config or BotConfig()
        self.grid = Grid(width, height)
        self.registry = EntityRegistry(on_robot_lost=self._on_robot_lost)
        self.belief = BeliefModel(width, height, self.cfg)
        self.planner = Planner(width, height, self.cfg)
        self.cooldowns = Cooldowns()
        self.metrics = MatchMetrics()
        self.snapshot_sink = snapshot_sink

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def read_observation(self, tokens: TokenReader) -> None:
        my_score = tokens.next_int()
        opponent_score = tokens.next_int()
        self.metrics.record_scores(my_score, opponent_score)

        self.grid.apply_observation(tokens)

        entity_count = tokens.next_int()
        self.cooldowns = Cooldowns(radar=tokens.next_int(), trap=tokens.next_int())
        self.registry.apply_observation(entity_count, tokens)

    def update_beliefs(self) -> None:
        for p in self.registry.update_suspects():
            self.belief.report_suspected_trap_placement(p)
            self.metrics.suspected_traps += 1
        self.belief.update(self.grid, self.registry)

    def plan(self) -> List[Action]:
        actions = self.planner.plan_turn(self.registry, self.belief, self.cooldowns)
        self.metrics.record_actions(actions)
        return actions

    def play_turn(self, tokens: TokenReader) -> List[Action]:
        self.read_observation(tokens)
        self.update_beliefs()
        actions = self.plan()

        if self.snapshot_sink is not None:
            self.snapshot_sink(pack_belief_state(self))
        logger.debug(self.metrics.summary())
        self.metrics.turn += 1
        return actions

    def _on_robot_lost(self, robot: Entity) -> None:
        self.metrics.robots_lost += 1
        logger.info("trap risk when robot %d was lost:\n%s", robot.entity_id, format_heatmap(self.belief.trap_risk))
        if self.snapshot_sink is not None:
            self.snapshot_sink(pack_belief_state(self, event=f"robot_lost:{robot.entity_id}"))
