"""Область с растениями и цветами"""

import logging
import random
from typing import Dict, List

from garden.errors import UnknownNectarError
from garden.flower import Flower
from garden.geometry import Quaternion
from garden.scene import SceneNode, SphereCollider

logger = logging.getLogger(__name__)

FLOWER_PLANT_TAG = "flower_plant"


class FlowerArea:
    """
    Управляет набором растений и цветов на них.

    При создании обходит граф сцены от root:
    - узел с тегом flower_plant — растение, ищем цветы внутри
    - узел с компонентом Flower — цветок (цветы не вкладываются друг в друга)
    - иначе — ищем в потомках

    Словарь nectar_collider.id → Flower строится один раз и больше не меняется.
    """

    def __init__(self, root: SceneNode):
        self.root = root
        self.flower_plants: List[SceneNode] = []
        self.flowers: List[Flower] = []
        self._nectar_lookup: Dict[str, Flower] = {}

        self._find_child_flowers(root)
        logger.debug("Flower area %s: %d plants, %d flowers",
                     root.name, len(self.flower_plants), len(self.flowers))

    def _find_child_flowers(self, parent: SceneNode):
        for child in parent.children:
            if child.tag == FLOWER_PLANT_TAG:
                self.flower_plants.append(child)
                self._find_child_flowers(child)
                continue

            flower = child.get_component(Flower)
            if flower is not None:
                flower.awake()
                self.flowers.append(flower)
                self._nectar_lookup[flower.surface_id] = flower
            else:
                self._find_child_flowers(child)

    @property
    def center(self):
        return self.root.position

    def get_flower_from_nectar(self, surface_id: str) -> Flower:
        """Цветок, которому принадлежит коллайдер нектара"""
        try:
            return self._nectar_lookup[surface_id]
        except KeyError:
            raise UnknownNectarError(surface_id) from None

    def flower_from_collider(self, collider: SphereCollider) -> Flower:
        return self.get_flower_from_nectar(collider.id)

    def reset_flowers(self, rng: random.Random):
        """
        Повернуть каждое растение случайно вокруг вертикали (и чуть-чуть
        по двум другим осям), затем наполнить все цветы.
        """
        for plant in self.flower_plants:
            x_rotation = rng.uniform(-5.0, 5.0)
            y_rotation = rng.uniform(-180.0, 180.0)
            z_rotation = rng.uniform(-5.0, 5.0)
            plant.local_rotation = Quaternion.euler(x_rotation, y_rotation, z_rotation)

        for flower in self.flowers:
            flower.reset_flower()

    @property
    def total_nectar(self) -> float:
        return sum(f.nectar_amount for f in self)

    def colliders(self) -> List[SphereCollider]:
        """Все коллайдеры сцены (для физики)"""
        found = []
        for node in self.root.walk():
            found.extend(c for c in node.components if isinstance(c, SphereCollider))
        return found

    def __len__(self):
        return len(self.flowers)

    def __iter__(self):
        return iter(self.flowers)

    def __repr__(self):
        return f"FlowerArea(plants={len(self.flower_plants)}, flowers={len(self.flowers)})"
