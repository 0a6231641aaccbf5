from __future__ import annotations

import argparse
import json
import sys
import os
from typing import List

import pygame

# Allow running from repo root: python geek-miner/backend/demos/belief_viewer.py
THIS_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from miner_bot.stdio_bridge.serializers import from_heatmap


def load_snapshots(path: str) -> List[dict]:
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def main():
    parser = argparse.ArgumentParser(description="Replay belief snapshots written by `geek-miner --dump`.")
    parser.add_argument("dump", type=str)
    parser.add_argument("--cell", type=int, default=32)
    args = parser.parse_args()

    frames = load_snapshots(args.dump)
    if not frames:
        print("No snapshots in", args.dump)
        return

    CELL = args.cell
    gw, gh = frames[0]["grid_w"], frames[0]["grid_h"]
    W, H = gw * CELL, gh * CELL + 32
    pygame.init()
    screen = pygame.display.set_mode((W, H))
    pygame.display.set_caption("Belief Viewer")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas", 16)

    idx = 0
    paused = True
    show_risk = False

    running = True
    while running:
        clock.tick(10)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_RIGHT:
                    idx = min(idx + 1, len(frames) - 1)
                elif event.key == pygame.K_LEFT:
                    idx = max(idx - 1, 0)
                elif event.key == pygame.K_t:
                    show_risk = not show_risk

        if not paused and idx < len(frames) - 1:
            idx += 1

        frame = frames[idx]
        ore = from_heatmap(frame["ore_estimate"])
        risk = from_heatmap(frame["trap_risk"])
        holes = frame["holes"]

        screen.fill((10, 10, 14))

        # heatmap: ore estimate (green, 4 ore = full) or trap risk (red)
        for y in range(gh):
            for x in range(gw):
                if show_risk:
                    v = float(risk[y, x])
                    col = (int(40 + 215 * v), 30, 30)
                else:
                    v = min(float(ore[y, x]) / 4.0, 1.0)
                    col = (20, int(30 + 200 * v), 40)
                pygame.draw.rect(screen, col, (x * CELL, y * CELL, CELL - 1, CELL - 1))
                if holes[y * gw + x]:
                    pygame.draw.circle(screen, (0, 0, 0), (x * CELL + CELL // 2, y * CELL + CELL // 2), CELL // 6)

        # buried items
        for item in frame["items"]:
            col = (90, 160, 255) if item["kind"] == "RADAR" else (255, 200, 60)
            pygame.draw.rect(screen, col, (item["x"] * CELL + 2, item["y"] * CELL + 2, CELL // 4, CELL // 4))

        # robots
        for r in frame["robots"]:
            if r["dead"]:
                continue
            col = (120, 200, 255) if r["mine"] else (255, 160, 140)
            if r["carried"] != "NONE":
                col = (255, 255, 255)
            pygame.draw.circle(screen, col, (r["x"] * CELL + CELL // 2, r["y"] * CELL + CELL // 2), CELL // 4)

        layer = "trap_risk" if show_risk else "ore_estimate"
        txt = f"turn={frame['turn']}  {layer}  score={frame['scores']}  [SPACE] play  [<-/->] step  [T] layer"
        if frame.get("event"):
            txt += f"  event={frame['event']}"
        screen.blit(font.render(txt, True, (220, 220, 220)), (8, gh * CELL + 8))

        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
