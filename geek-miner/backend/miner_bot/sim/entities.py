from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from miner_bot.sim.utils import Position


@dataclass
class BotConfig:
    # Movement model
    move_range: int = 4

    # Items
    radar_radius: int = 4
    request_cooldown: int = 5  # what the driver resets a cooldown to after a request

    # Belief priors / updates
    ore_prior_scale: float = 0.95  # prior estimate grows linearly with x up to this
    enemy_hole_trap_risk: float = 0.5
    suspect_trap_risk_step: float = 0.25


class EntityKind(Enum):
    MY_ROBOT = 0
    ENEMY_ROBOT = 1
    RADAR = 2
    TRAP = 3


class ItemKind(Enum):
    NONE = -1
    RADAR = 2
    TRAP = 3
    ORE = 4


class ActionKind(Enum):
    WAIT = "WAIT"
    MOVE = "MOVE"
    DIG = "DIG"
    REQUEST = "REQUEST"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    target: Optional[Position] = None
    item: Optional[ItemKind] = None

    @classmethod
    def wait(cls) -> "Action":
        return cls(ActionKind.WAIT)

    @classmethod
    def move(cls, x: int, y: int) -> "Action":
        return cls(ActionKind.MOVE, target=Position(x, y))

    @classmethod
    def dig(cls, x: int, y: int) -> "Action":
        return cls(ActionKind.DIG, target=Position(x, y))

    @classmethod
    def request(cls, item: ItemKind) -> "Action":
        if item not in (ItemKind.RADAR, ItemKind.TRAP):
            raise ValueError(f"Cannot request item {item}")
        return cls(ActionKind.REQUEST, item=item)


@dataclass
class Entity:
    entity_id: int
    kind: EntityKind
    position: Position
    previous_position: Position
    carried: ItemKind = ItemKind.NONE
    dead: bool = False

    # own commands, oldest first (friendly robots only)
    history: List[Action] = field(default_factory=list)

    @property
    def last_command(self) -> Optional[Action]:
        return self.history[-1] if self.history else None

    @property
    def at_home(self) -> bool:
        return self.position.x == 0

    @property
    def idle(self) -> bool:
        return self.position == self.previous_position


@dataclass
class Cooldowns:
    radar: int = 0
    trap: int = 0

    def get(self, item: ItemKind) -> int:
        return self.radar if item == ItemKind.RADAR else self.trap

    def refresh(self, item: ItemKind, turns: int) -> None:
        if item == ItemKind.RADAR:
            self.radar = turns
        else:
            self.trap = turns
