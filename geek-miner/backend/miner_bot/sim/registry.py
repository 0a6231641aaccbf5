from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Set

from miner_bot.sim.entities import Entity, EntityKind, ItemKind
from miner_bot.sim.utils import Position
from miner_bot.stdio_bridge.codec import TokenReader, parse_entity_kind, parse_item_kind

logger = logging.getLogger(__name__)

# Buried items vanish from the entity list instead of being reported at (-1, -1).
_BURIED_KINDS = (EntityKind.RADAR, EntityKind.TRAP)


class EntityRegistry:
    """All entities ever sighted this match, keyed by their stable id."""

    def __init__(self, on_robot_lost: Optional[Callable[[Entity], None]] = None):
        self._entities: Dict[int, Entity] = {}
        self.suspects: Set[int] = set()
        self.on_robot_lost = on_robot_lost

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities.values())

    def get(self, entity_id: int) -> Entity:
        return self._entities[entity_id]

    def _of_kind(self, kind: EntityKind, alive_only: bool) -> List[Entity]:
        out = [e for e in self._entities.values() if e.kind == kind and not (alive_only and e.dead)]
        out.sort(key=lambda e: e.entity_id)
        return out

    def my_robots(self) -> List[Entity]:
        """Friendly robots in id order, dead ones included."""
        return self._of_kind(EntityKind.MY_ROBOT, alive_only=False)

    def enemy_robots(self) -> List[Entity]:
        return self._of_kind(EntityKind.ENEMY_ROBOT, alive_only=True)

    def radars(self) -> List[Entity]:
        return self._of_kind(EntityKind.RADAR, alive_only=True)

    def traps(self) -> List[Entity]:
        return self._of_kind(EntityKind.TRAP, alive_only=True)

    def apply_observation(self, count: int, tokens: TokenReader) -> None:
        """Read `count` (id, kind, x, y, item) tuples and merge them in."""
        seen: Set[int] = set()
        for _ in range(count):
            entity_id = tokens.next_int()
            kind = parse_entity_kind(tokens.next_int())
            x = tokens.next_int()
            y = tokens.next_int()
            carried = parse_item_kind(tokens.next_int())
            self._merge(entity_id, kind, x, y, carried)
            seen.add(entity_id)

        for e in self.enemy_robots():
            if e.carried != ItemKind.NONE:
                logger.debug("enemy %d has %s", e.entity_id, e.carried.name)

        for e in self._entities.values():
            if e.kind in _BURIED_KINDS and not e.dead and e.entity_id not in seen:
                e.dead = True
                logger.debug("%s %d at %s is gone", e.kind.name, e.entity_id, e.position)

    def _merge(self, entity_id: int, kind: EntityKind, x: int, y: int, carried: ItemKind) -> None:
        dead = x == -1 or y == -1
        existing = self._entities.get(entity_id)

        if existing is None:
            pos = Position(max(x, 0), max(y, 0))
            self._entities[entity_id] = Entity(
                entity_id=entity_id,
                kind=kind,
                position=pos,
                previous_position=pos,
                carried=carried,
                dead=dead,
            )
            return

        was_alive = not existing.dead
        existing.kind = kind
        existing.carried = carried
        existing.dead = dead
        existing.previous_position = existing.position
        if not dead:
            existing.position = Position(x, y)

        if was_alive and dead and kind == EntityKind.MY_ROBOT:
            logger.info("robot %d lost at %s", entity_id, existing.position)
            if self.on_robot_lost is not None:
                self.on_robot_lost(existing)

    def update_suspects(self) -> List[Position]:
        """
        Track enemies that pause at the home column (likely picking up a trap).
        Returns positions where a suspect paused again in the field, i.e. where it
        probably buried what it picked up.
        """
        drops: List[Position] = []
        for e in self.enemy_robots():
            if not e.idle:
                continue
            if e.at_home:
                self.suspects.add(e.entity_id)
            elif e.entity_id in self.suspects:
                self.suspects.discard(e.entity_id)
                drops.append(e.position)
                logger.debug("suspect %d paused at %s", e.entity_id, e.position)
        return drops
