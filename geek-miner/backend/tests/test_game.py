from __future__ import annotations

import io
import json

import pytest

from conftest import ENEMY_ROBOT, ITEM_ORE, MY_ROBOT, NO_ITEM
from miner_bot.sim.entities import Action, ItemKind
from miner_bot.sim.game import Game
from miner_bot.stdio_bridge.codec import TokenReader, parse_action
from miner_bot.stdio_bridge.stdio_bot import run


def play(game, text):
    return game.play_turn(TokenReader.from_text(text))


def test_bank_the_ore(turn):
    game = Game(8, 5)
    assert play(game, turn(8, 5, [(0, MY_ROBOT, 5, 3, ITEM_ORE)], radar_cd=2, trap_cd=2)) == [Action.move(0, 3)]


def test_pick_nearest_revealed_ore(turn):
    game = Game(4, 3)
    actions = play(game, turn(4, 3, [(0, MY_ROBOT, 0, 1, NO_ITEM)], ore={(2, 1): 2}, radar_cd=3, trap_cd=3))
    assert actions == [Action.dig(2, 1)]
    assert game.belief.ore_estimate[1, 2] == 2.0


def test_request_radar_then_trap(turn):
    game = Game(8, 5)
    rows = [(0, MY_ROBOT, 0, 0, NO_ITEM), (1, MY_ROBOT, 0, 2, NO_ITEM)]
    actions = play(game, turn(8, 5, rows, radar_cd=0, trap_cd=0))
    assert actions == [Action.request(ItemKind.RADAR), Action.request(ItemKind.TRAP)]
    assert game.metrics.commands == {"REQUEST_RADAR": 1, "REQUEST_TRAP": 1}


def test_enemy_hole_raises_suspicion(turn):
    game = Game(6, 4)
    play(game, turn(6, 4))
    before = float(game.belief.ore_estimate[2, 4])
    play(game, turn(6, 4, holes={(4, 2)}))
    assert game.belief.trap_risk[2, 4] >= 0.5
    assert game.belief.ore_estimate[2, 4] < before


def test_suspect_clears_and_drops_a_trap(turn):
    game = Game(6, 4)
    for x in (0, 0, 3, 3):
        play(game, turn(6, 4, [(5, ENEMY_ROBOT, x, 1, NO_ITEM)]))

    bumped = {(3, 1), (2, 1), (4, 1), (3, 0), (3, 2)}
    for y in range(4):
        for x in range(6):
            assert game.belief.trap_risk[y, x] == pytest.approx(0.25 if (x, y) in bumped else 0.0)
    assert game.registry.suspects == set()
    assert game.metrics.suspected_traps == 1


def test_all_revealed_digs_nearest_positive_cell(turn):
    game = Game(4, 3)
    ore = {(x, y): 3 for x in range(4) for y in range(3)}
    actions = play(game, turn(4, 3, [(0, MY_ROBOT, 0, 1, NO_ITEM)], ore=ore, radar_cd=1, trap_cd=1))
    assert actions == [Action.dig(1, 1)]


def test_dig_outcome_feeds_next_turn(turn):
    game = Game(8, 4)
    [first] = play(game, turn(8, 4, [(0, MY_ROBOT, 0, 1, NO_ITEM)], ore={(1, 1): 2}, radar_cd=3, trap_cd=3))
    assert first == Action.dig(1, 1)

    # the dig landed and found ore; the cell is no longer covered by radar
    game.belief.ore_estimate[1, 1] = 2.0
    [second] = play(game, turn(8, 4, [(0, MY_ROBOT, 0, 1, ITEM_ORE)], holes={(1, 1)}, radar_cd=2, trap_cd=2))
    assert second == Action.move(0, 1)
    assert game.belief.ore_estimate[1, 1] == pytest.approx(1.0)
    assert game.belief.trap_risk[1, 1] == 0.0


def test_robot_loss_is_reported_to_snapshot_sink(turn):
    snapshots = []
    game = Game(6, 4, snapshot_sink=snapshots.append)
    play(game, turn(6, 4, [(0, MY_ROBOT, 2, 1, NO_ITEM)], radar_cd=3, trap_cd=3))
    play(game, turn(6, 4, [(0, MY_ROBOT, -1, -1, NO_ITEM)], radar_cd=3, trap_cd=3))

    events = [s["event"] for s in snapshots]
    assert "robot_lost:0" in events
    assert game.metrics.robots_lost == 1
    assert snapshots[-1]["trap_risk"]["w"] == 6
    assert len(snapshots[-1]["holes"]) == 24


def test_stdio_run_plays_until_eof(turn):
    text = "5 3\n" + turn(5, 3, [(0, MY_ROBOT, 0, 0, NO_ITEM), (1, MY_ROBOT, 3, 2, ITEM_ORE)]) \
        + turn(5, 3, [(0, MY_ROBOT, 0, 0, NO_ITEM), (1, MY_ROBOT, 2, 2, ITEM_ORE)], radar_cd=5, trap_cd=0)
    out = io.StringIO()
    dump = io.StringIO()

    assert run(text.splitlines(), out, dump=dump) == 0

    lines = out.getvalue().splitlines()
    assert lines == ["REQUEST RADAR", "MOVE 0 2", "REQUEST TRAP", "MOVE 0 2"]
    assert [parse_action(line) for line in lines][1] == Action.move(0, 2)
    assert [json.loads(s)["turn"] for s in dump.getvalue().splitlines()] == [0, 1]


def test_stdio_run_fails_on_malformed_input(turn):
    text = "5 3\n" + turn(5, 3, [(0, 9, 0, 0, NO_ITEM)])
    assert run(text.splitlines(), io.StringIO()) == 1


def test_stdio_run_rejects_empty_grid():
    assert run(["0 0"], io.StringIO()) == 1


def test_stdio_run_tolerates_truncated_turn():
    out = io.StringIO()
    assert run(["5 3", "0 0", "? 0 ? 0"], out) == 0
    assert out.getvalue() == ""
