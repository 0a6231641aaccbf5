from __future__ import annotations

import sys
import os
from typing import Dict, Iterable, Optional, Set, Tuple

import pytest

THIS_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# entity tuple: (id, kind, x, y, item)
EntityRow = Tuple[int, int, int, int, int]

MY_ROBOT, ENEMY_ROBOT, RADAR, TRAP = 0, 1, 2, 3
NO_ITEM, ITEM_RADAR, ITEM_TRAP, ITEM_ORE = -1, 2, 3, 4


def grid_text(
    width: int,
    height: int,
    ore: Optional[Dict[Tuple[int, int], int]] = None,
    holes: Optional[Set[Tuple[int, int]]] = None,
) -> str:
    ore = ore or {}
    holes = holes or set()
    rows = []
    for y in range(height):
        cells = []
        for x in range(width):
            o = ore.get((x, y))
            cells.append(f"{'?' if o is None else o} {1 if (x, y) in holes else 0}")
        rows.append(" ".join(cells))
    return "\n".join(rows)


def entities_text(entities: Iterable[EntityRow]) -> str:
    return "\n".join(" ".join(str(v) for v in e) for e in entities)


def turn_text(
    width: int,
    height: int,
    entities: Iterable[EntityRow] = (),
    ore: Optional[Dict[Tuple[int, int], int]] = None,
    holes: Optional[Set[Tuple[int, int]]] = None,
    radar_cd: int = 0,
    trap_cd: int = 0,
    scores: Tuple[int, int] = (0, 0),
) -> str:
    entities = list(entities)
    parts = [
        f"{scores[0]} {scores[1]}",
        grid_text(width, height, ore, holes),
        f"{len(entities)} {radar_cd} {trap_cd}",
    ]
    if entities:
        parts.append(entities_text(entities))
    return "\n".join(parts) + "\n"


@pytest.fixture
def turn():
    return turn_text
