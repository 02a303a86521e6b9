#!/usr/bin/env python3
"""
play.py — игра за колибри против скриптовых или обученных соперников.

Управление:
    W/S, A/D, E/C — движение; стрелки — pitch/yaw
    P/Space — пауза (заморозка всех колибри), R — новый раунд, Esc — выход
"""

import argparse
import logging
import random

from ai.brain import HeuristicBrain, create_brain
from ai.gym_env import GardenSimulation
from garden.config import Presets
from ui.controls import keyboard_input
from ui.pygame_viewer import GardenViewer


def main():
    p = argparse.ArgumentParser(description="Play as a hummingbird")
    p.add_argument("--opponents", type=int, default=1, help="Number of AI hummingbirds")
    p.add_argument("--opponent-brain", choices=["greedy", "rl", "idle"], default="greedy")
    p.add_argument("--model", default=None, help="PPO model .zip for --opponent-brain rl")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--fps", type=int, default=50)
    p.add_argument("--log-level", default="WARNING")
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(name)s %(levelname)s: %(message)s")

    config = Presets.gameplay()
    config.agent_count = 1 + max(0, args.opponents)

    sim = GardenSimulation(config, random.Random(args.seed))
    viewer = GardenViewer(sim)

    brains = [HeuristicBrain(keyboard_input)]
    opponent_brain = create_brain(args.opponent_brain, model_path=args.model)
    brains.extend(opponent_brain for _ in sim.agents[1:])

    print("=" * 60)
    print("  Hummingbird Garden")
    print("=" * 60)
    print(f"  Flowers   : {len(sim.area)}")
    print(f"  Opponents : {len(sim.agents) - 1} ({args.opponent_brain})")
    print("=" * 60)

    sim.reset()
    paused = False
    running = True
    while running:
        events = viewer.handle_events()
        if events['quit']:
            running = False
            continue
        if events['reset']:
            sim.reset()
        if events['toggle_pause']:
            paused = not paused
            for agent in sim.agents:
                if paused:
                    agent.freeze()
                else:
                    agent.unfreeze()

        if not paused:
            actions = [
                brain.decide_action(agent.collect_observations(), agent)
                for brain, agent in zip(brains, sim.agents)
            ]
            sim.step(actions)

        viewer.draw(paused=paused, player_index=0)
        viewer.tick(args.fps)

    viewer.close()

    print()
    for agent in sim.agents:
        print(f"  {agent.name:>14}: nectar {agent.nectar_obtained:.2f}, flowers emptied {agent.flowers_emptied}")


if __name__ == "__main__":
    main()
