"""Статистика эпизодов: нектар, награды, опустошённые цветы"""

import json
from dataclasses import dataclass, asdict
from typing import List, Dict, Any


@dataclass
class EpisodeStats:
    """Статистика одного эпизода одного агента"""
    episode: int
    agent: str
    steps: int
    nectar_obtained: float
    reward: float
    flowers_emptied: int
    boundary_hits: int


class StatisticsCollector:
    """Собирает статистику по эпизодам"""

    def __init__(self):
        self.episodes: List[EpisodeStats] = []
        self.is_recording = False

    def start_recording(self):
        """Начать запись статистики"""
        self.episodes = []
        self.is_recording = True

    def stop_recording(self):
        self.is_recording = False

    def collect_episode(self, episode: int, agent, steps: int):
        """Записать итоги эпизода агента"""
        if not self.is_recording:
            return None

        stats = EpisodeStats(
            episode=episode,
            agent=agent.name,
            steps=steps,
            nectar_obtained=agent.nectar_obtained,
            reward=agent.episode_reward,
            flowers_emptied=agent.flowers_emptied,
            boundary_hits=agent.boundary_hits,
        )
        self.episodes.append(stats)
        return stats

    def get_summary(self) -> Dict[str, Any]:
        """Сводка по всем записанным эпизодам"""
        if not self.episodes:
            return {}

        count = len(self.episodes)
        return {
            'episodes': count,
            'total_steps': sum(e.steps for e in self.episodes),
            'avg_nectar': sum(e.nectar_obtained for e in self.episodes) / count,
            'max_nectar': max(e.nectar_obtained for e in self.episodes),
            'avg_reward': sum(e.reward for e in self.episodes) / count,
            'flowers_emptied': sum(e.flowers_emptied for e in self.episodes),
            'boundary_hits': sum(e.boundary_hits for e in self.episodes),
        }

    def save_to_json(self, filepath: str):
        """Сохранить статистику в JSON"""
        data = {
            'episodes': [asdict(e) for e in self.episodes],
            'summary': self.get_summary()
        }
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)

    def load_from_json(self, filepath: str):
        with open(filepath, 'r') as f:
            data = json.load(f)

        self.episodes = [EpisodeStats(**e) for e in data['episodes']]
