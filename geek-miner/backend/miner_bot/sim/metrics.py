from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from miner_bot.sim.entities import Action, ActionKind


@dataclass
class MatchMetrics:
    turn: int = 0
    my_score: int = 0
    opponent_score: int = 0
    robots_lost: int = 0
    suspected_traps: int = 0
    commands: Dict[str, int] = field(default_factory=dict)

    def record_scores(self, mine: int, theirs: int) -> None:
        self.my_score = mine
        self.opponent_score = theirs

    def record_actions(self, actions: List[Action]) -> None:
        for a in actions:
            key = a.kind.value if a.kind != ActionKind.REQUEST else f"REQUEST_{a.item.name}"
            self.commands[key] = self.commands.get(key, 0) + 1

    def summary(self) -> str:
        return (
            f"turn={self.turn} score={self.my_score}-{self.opponent_score} "
            f"lost={self.robots_lost} suspected_traps={self.suspected_traps} commands={self.commands}"
        )
