from __future__ import annotations

from typing import TypedDict, List, Optional


class RobotState(TypedDict):
    id: int
    x: int
    y: int
    mine: int  # 0/1
    dead: int  # 0/1
    carried: str  # ItemKind name


class ItemState(TypedDict):
    id: int
    x: int
    y: int
    kind: str  # "RADAR" / "TRAP"


class Heatmap(TypedDict):
    w: int
    h: int
    data: List[float]  # row-major, rounded to 2 decimals


class BeliefState(TypedDict):
    type: str  # "belief"
    event: Optional[str]
    turn: int
    grid_w: int
    grid_h: int
    scores: List[int]  # [mine, opponent]
    cooldowns: List[int]  # [radar, trap]
    robots: List[RobotState]
    items: List[ItemState]
    suspects: List[int]
    holes: List[int]  # row-major 0/1
    ore_estimate: Heatmap
    trap_risk: Heatmap
