from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO, Iterable, List, Optional

from miner_bot.sim.entities import BotConfig
from miner_bot.sim.game import Game
from miner_bot.stdio_bridge.codec import EndOfInput, ProtocolError, TokenReader, format_action

logger = logging.getLogger(__name__)


def run(lines: Iterable[str], out: IO[str], config: Optional[BotConfig] = None, dump: Optional[IO[str]] = None) -> int:
    """Play a whole match over a token stream. Returns the process exit code."""
    tokens = TokenReader(lines)

    def write_snapshot(state: dict) -> None:
        dump.write(json.dumps(state) + "\n")
        dump.flush()

    try:
        width = tokens.next_int()
        height = tokens.next_int()
        game = Game(width, height, config, snapshot_sink=write_snapshot if dump is not None else None)
    except EndOfInput:
        logger.warning("input closed before the map size was sent")
        return 0
    except ValueError as e:
        logger.error("bad start-up input: %s", e)
        return 1
    logger.info("map %dx%d", width, height)

    while not tokens.at_eof():
        try:
            actions = game.play_turn(tokens)
        except EndOfInput:
            logger.warning("input closed mid-turn (turn %d)", game.metrics.turn)
            break
        except ProtocolError as e:
            logger.error("malformed input on turn %d: %s", game.metrics.turn, e)
            return 1

        for action in actions:
            out.write(format_action(action) + "\n")
        out.flush()

    logger.info("match over: %s", game.metrics.summary())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Grid mining contest bot (stdin/stdout).")
    parser.add_argument("--log-level", type=str, default="WARNING")
    parser.add_argument("--dump", type=str, default=None, help="write one JSON belief snapshot per turn here")
    parser.add_argument("--radar-radius", type=int, default=BotConfig.radar_radius)
    parser.add_argument("--ore-prior-scale", type=float, default=BotConfig.ore_prior_scale)
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = BotConfig(radar_radius=args.radar_radius, ore_prior_scale=args.ore_prior_scale)

    if args.dump:
        with open(args.dump, "w", encoding="utf-8") as dump:
            return run(sys.stdin, sys.stdout, cfg, dump)
    return run(sys.stdin, sys.stdout, cfg)


if __name__ == "__main__":
    sys.exit(main())
