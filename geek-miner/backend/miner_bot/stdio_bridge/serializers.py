from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import numpy as np

from miner_bot.sim.entities import EntityKind

if TYPE_CHECKING:
    from miner_bot.sim.game import Game
    from miner_bot.stdio_bridge.protocol import BeliefState, Heatmap


def to_heatmap(mat: np.ndarray) -> "Heatmap":
    h, w = mat.shape
    data: List[float] = np.round(mat.astype(np.float64), 2).reshape(-1).tolist()
    return {"w": int(w), "h": int(h), "data": data}


def from_heatmap(hm: "Heatmap") -> np.ndarray:
    return np.asarray(hm["data"], dtype=np.float32).reshape(hm["h"], hm["w"])


def format_heatmap(mat: np.ndarray) -> str:
    """Fixed two-decimal text grid, one row per line (for stderr)."""
    return "\n".join(" ".join(f"{v:.2f}" for v in row) for row in mat)


def pack_belief_state(game: "Game", event: Optional[str] = None) -> "BeliefState":
    robots = [
        {
            "id": e.entity_id,
            "x": int(e.position.x),
            "y": int(e.position.y),
            "mine": int(e.kind == EntityKind.MY_ROBOT),
            "dead": int(e.dead),
            "carried": e.carried.name,
        }
        for e in game.registry
        if e.kind in (EntityKind.MY_ROBOT, EntityKind.ENEMY_ROBOT)
    ]
    items = [
        {"id": e.entity_id, "x": int(e.position.x), "y": int(e.position.y), "kind": e.kind.name}
        for e in game.registry.radars() + game.registry.traps()
    ]

    return {
        "type": "belief",
        "event": event,
        "turn": int(game.metrics.turn),
        "grid_w": int(game.width),
        "grid_h": int(game.height),
        "scores": [game.metrics.my_score, game.metrics.opponent_score],
        "cooldowns": [game.cooldowns.radar, game.cooldowns.trap],
        "robots": robots,
        "items": items,
        "suspects": sorted(game.registry.suspects),
        "holes": game.grid.holes.astype(np.uint8).reshape(-1).tolist(),
        "ore_estimate": to_heatmap(game.belief.ore_estimate),
        "trap_risk": to_heatmap(game.belief.trap_risk),
    }
