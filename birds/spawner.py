"""Выбор безопасной точки появления колибри в начале эпизода"""

import logging
import math
import random
from enum import Enum
from typing import Callable, Tuple

from garden.config import SPAWN_ATTEMPT_BUDGET
from garden.errors import SpawnError
from garden.flower_area import FlowerArea
from garden.geometry import Quaternion, Vector3

logger = logging.getLogger(__name__)

# probe(point, radius) -> сколько коллайдеров пересекает сфера
CollisionProbe = Callable[[Vector3, float], int]
Pose = Tuple[Vector3, Quaternion]


class SpawnMode(Enum):
    IN_FRONT_OF_FLOWER = "in_front_of_flower"
    FREE_ROAM = "free_roam"


class SpawnSampler:
    """
    Rejection sampling позы: генерируем кандидата, проверяем пересечения,
    принимаем первый свободный. Бюджет попыток ограничен, исчерпание —
    ошибка конфигурации области (слишком тесно).
    """

    # Перед цветком: 10-20 см вдоль его оси
    MIN_FLOWER_DISTANCE = 0.1
    MAX_FLOWER_DISTANCE = 0.2

    # Свободный полёт: высота над полом и расстояние от центра
    MIN_HEIGHT = 1.2
    MAX_HEIGHT = 2.5
    MIN_RADIUS = 2.0
    MAX_RADIUS = 7.0
    MAX_START_PITCH = 60.0

    def __init__(self, probe_radius: float = 0.05, budget: int = SPAWN_ATTEMPT_BUDGET):
        self.probe_radius = probe_radius
        self.budget = budget

    def candidate(self, mode: SpawnMode, area: FlowerArea, rng: random.Random,
                  center: Vector3 = None) -> Pose:
        """Сгенерировать одну позу-кандидата (без проверки пересечений)"""
        if mode is SpawnMode.IN_FRONT_OF_FLOWER:
            if not area.flowers:
                raise SpawnError("Cannot spawn in front of a flower: the area has no flowers")
            flower = area.flowers[rng.randrange(len(area.flowers))]

            distance = rng.uniform(self.MIN_FLOWER_DISTANCE, self.MAX_FLOWER_DISTANCE)
            position = flower.position + flower.up_vector * distance

            # Клювом на цветок (голова птицы в центре трансформа)
            to_flower = flower.center_position - position
            rotation = Quaternion.look_rotation(to_flower, Vector3.up())
            return position, rotation

        center = center if center is not None else area.center
        height = rng.uniform(self.MIN_HEIGHT, self.MAX_HEIGHT)
        radius = rng.uniform(self.MIN_RADIUS, self.MAX_RADIUS)
        azimuth = math.radians(rng.uniform(-180.0, 180.0))
        position = center + Vector3(math.sin(azimuth) * radius, height, math.cos(azimuth) * radius)

        pitch = rng.uniform(-self.MAX_START_PITCH, self.MAX_START_PITCH)
        yaw = rng.uniform(-180.0, 180.0)
        return position, Quaternion.euler(pitch, yaw, 0.0)

    def sample_pose(self, mode: SpawnMode, area: FlowerArea, probe: CollisionProbe,
                    rng: random.Random, center: Vector3 = None) -> Pose:
        """
        Найти позу без пересечений.

        Raises:
            SpawnError: за budget попыток свободная поза не найдена
        """
        attempts_remaining = self.budget
        while attempts_remaining > 0:
            attempts_remaining -= 1
            position, rotation = self.candidate(mode, area, rng, center)
            if probe(position, self.probe_radius) == 0:
                logger.debug("Spawn (%s) found after %d attempts",
                             mode.value, self.budget - attempts_remaining)
                return position, rotation

        raise SpawnError(
            f"Could not find a safe position to spawn ({mode.value}) "
            f"after {self.budget} attempts"
        )
