"""Отслеживание ближайшего к агенту цветка с нектаром"""

import logging
from typing import Optional

from garden.flower import Flower
from garden.flower_area import FlowerArea
from garden.geometry import Vector3

logger = logging.getLogger(__name__)


class NearestFlowerTracker:
    """
    Кеш ближайшего цветка с нектаром для одного агента.

    Хранит индекс в FlowerArea.flowers (или None, если нектара нигде нет).
    Пересчитывается только по событиям: начало эпизода, опустошение
    цветка, проверка на каждом физическом шаге.
    """

    def __init__(self):
        self.index: Optional[int] = None

    def clear(self):
        self.index = None

    def flower(self, area: FlowerArea) -> Optional[Flower]:
        if self.index is None:
            return None
        return area.flowers[self.index]

    def recompute(self, query_point: Vector3, area: FlowerArea) -> Optional[Flower]:
        """
        Один линейный проход по цветам, начиная с текущего кандидата:
        - цветок с нектаром всегда лучше опустевшего кандидата
        - из двух цветов с нектаром побеждает более близкий
        - при равном расстоянии кандидат остаётся прежним
        """
        best = self.index if self.index is not None and self.index < len(area.flowers) else None

        for i, flower in enumerate(area.flowers):
            if not flower.has_nectar:
                continue
            if best is None:
                best = i
                continue

            current = area.flowers[best]
            if not current.has_nectar:
                best = i
                continue

            distance = flower.position.distance_to(query_point)
            current_distance = current.position.distance_to(query_point)
            if distance < current_distance:
                best = i

        if best is not None and not area.flowers[best].has_nectar:
            best = None

        if best != self.index:
            logger.debug("Nearest flower changed: %s -> %s", self.index, best)
        self.index = best
        return self.flower(area)

    def invalidate_if_depleted(self, query_point: Vector3, area: FlowerArea) -> Optional[Flower]:
        """Пересчитать, если закешированный цветок опустел"""
        current = self.flower(area)
        if current is not None and not current.has_nectar:
            return self.recompute(query_point, area)
        return current
