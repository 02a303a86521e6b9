"""Цветок с нектаром — возобновляемый точечный ресурс"""

import logging

from garden.config import EMPTY_FLOWER_COLOR, FULL_FLOWER_COLOR
from garden.errors import FlowerConfigurationError
from garden.geometry import Vector3, clamp
from garden.scene import SceneNode, SphereCollider

logger = logging.getLogger(__name__)

FLOWER_COLLIDER_NAME = "FlowerCollider"
NECTAR_COLLIDER_NAME = "FlowerNectarCollider"


class Flower:
    """
    Один цветок:
    - запас нектара в [0, 1]
    - твёрдый коллайдер лепестков и триггер-коллайдер нектара
    - цвет показывает, есть ли нектар (читается рендером)

    Коллайдеры привязываются в awake(): до этого цветок не готов к работе.
    """

    def __init__(self, node: SceneNode, full_color=FULL_FLOWER_COLOR,
                 empty_color=EMPTY_FLOWER_COLOR):
        self.node = node
        self.full_color = full_color
        self.empty_color = empty_color
        self.color = full_color
        self.nectar_amount = 0.0
        self.flower_collider: SphereCollider = None
        self.nectar_collider: SphereCollider = None

    def awake(self):
        """Найти коллайдеры лепестков и нектара и наполнить цветок"""
        self.flower_collider = self._required_collider(FLOWER_COLLIDER_NAME)
        self.nectar_collider = self._required_collider(NECTAR_COLLIDER_NAME)
        self.reset_flower()

    def _required_collider(self, name: str) -> SphereCollider:
        child = self.node.find(name)
        collider = child.get_component(SphereCollider) if child is not None else None
        if collider is None:
            raise FlowerConfigurationError(
                f"Flower {self.node.name!r} has no {name} collider"
            )
        return collider

    @property
    def position(self) -> Vector3:
        """Позиция крепления цветка"""
        return self.node.position

    @property
    def up_vector(self) -> Vector3:
        """Вектор, направленный прямо из цветка"""
        return self.nectar_collider.node.up

    @property
    def center_position(self) -> Vector3:
        """Центр коллайдера нектара"""
        return self.nectar_collider.center

    @property
    def surface_id(self) -> str:
        return self.nectar_collider.id

    @property
    def has_nectar(self) -> bool:
        return self.nectar_amount > 0.0

    def feed(self, amount: float) -> float:
        """
        Забрать нектар из цветка.

        Args:
            amount: сколько нектара пытаемся забрать

        Returns:
            float: сколько удалось забрать (не больше, чем было)
        """
        nectar_taken = clamp(amount, 0.0, self.nectar_amount)

        self.nectar_amount -= max(amount, 0.0)

        if self.nectar_amount <= 0:
            self.nectar_amount = 0.0

            # Пустой цветок больше не участвует в столкновениях
            self.flower_collider.enabled = False
            self.nectar_collider.enabled = False

            self.color = self.empty_color
            logger.debug("Flower %s is empty", self.node.name)

        return nectar_taken

    def reset_flower(self):
        """Наполнить цветок и включить коллайдеры"""
        self.nectar_amount = 1.0
        self.flower_collider.enabled = True
        self.nectar_collider.enabled = True
        self.color = self.full_color

    def __repr__(self):
        return f"Flower({self.node.name!r}, nectar={self.nectar_amount:.2f})"
