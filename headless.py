#!/usr/bin/env python3
"""Headless прогон эпизодов без UI: колибри под управлением greedy/rl мозга"""

import argparse
import logging
import random

from ai.brain import create_brain
from ai.gym_env import GardenSimulation
from garden.config import Presets
from garden.statistics import StatisticsCollector


class HeadlessSimulation:
    """Прогон нескольких эпизодов с печатью итогов"""

    def __init__(self, preset_name="training", episodes=3, steps=1000,
                 brain_type="greedy", model_path=None, seed=0):
        print("=" * 60)
        print(f"HEADLESS SIMULATION: {preset_name}")
        print("=" * 60)

        self.config = Presets.by_name(preset_name)
        self.rng = random.Random(seed)
        self.sim = GardenSimulation(self.config, self.rng)
        self.brain = create_brain(brain_type, model_path=model_path)
        self.episodes = episodes
        # В режиме игры эпизод бесконечный, ограничиваемся steps
        limit = self.config.max_steps
        self.steps = min(steps, limit) if limit > 0 else steps
        self.stats = StatisticsCollector()

        print(f"Plants: {len(self.sim.area.flower_plants)}")
        print(f"Flowers: {len(self.sim.area)}")
        print(f"Hummingbirds: {len(self.sim.agents)}")
        print(f"Brain: {brain_type}")
        print(f"Episodes: {episodes} × {self.steps} steps")
        print()

    def run_episode(self, episode: int):
        self.sim.reset()
        for _ in range(self.steps):
            actions = [
                self.brain.decide_action(agent.collect_observations(), agent)
                for agent in self.sim.agents
            ]
            self.sim.step(actions)
            for agent in self.sim.agents:
                agent.consume_step_reward()

        for agent in self.sim.agents:
            stats = self.stats.collect_episode(episode, agent, self.sim.step_count)
            print(f"{stats.episode:7d} | {stats.agent:>14} | {stats.nectar_obtained:6.2f} | "
                  f"{stats.reward:7.2f} | {stats.flowers_emptied:7d} | {stats.boundary_hits:5d}")

    def run(self):
        print("Episode |          Agent | Nectar |  Reward | Emptied | Walls")
        print("-" * 62)

        self.stats.start_recording()
        for episode in range(1, self.episodes + 1):
            self.run_episode(episode)
        self.stats.stop_recording()

        summary = self.stats.get_summary()
        print()
        print(f"Average nectar : {summary['avg_nectar']:.3f}")
        print(f"Best nectar    : {summary['max_nectar']:.3f}")
        print(f"Average reward : {summary['avg_reward']:.3f}")
        print()
        return summary


def main():
    p = argparse.ArgumentParser(description="Run hummingbird episodes without UI")
    p.add_argument("--preset", default="training", help="training | gameplay | crowded")
    p.add_argument("--episodes", type=int, default=3)
    p.add_argument("--steps", type=int, default=1000, help="Steps per episode")
    p.add_argument("--brain", choices=["greedy", "rl", "idle"], default="greedy")
    p.add_argument("--model", default=None, help="PPO model .zip for --brain rl")
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--json", default=None, help="Save episode statistics to JSON")
    p.add_argument("--log-level", default="WARNING")
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(name)s %(levelname)s: %(message)s")

    sim = HeadlessSimulation(
        preset_name=args.preset,
        episodes=args.episodes,
        steps=args.steps,
        brain_type=args.brain,
        model_path=args.model,
        seed=args.seed,
    )
    sim.run()
    if args.json:
        sim.stats.save_to_json(args.json)
        print(f"Statistics saved to {args.json}")


if __name__ == "__main__":
    main()
