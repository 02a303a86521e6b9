"""Граф сцены: узлы с локальными трансформами, тегами и компонентами"""

import uuid
from typing import List, Optional

from garden.geometry import Quaternion, Vector3


class SceneNode:
    """
    Узел сцены (аналог transform в игровом движке).
    - локальная позиция и поворот относительно родителя
    - тег (flower_plant, nectar, boundary, ...)
    - произвольные компоненты (Flower, SphereCollider)
    """

    def __init__(self, name: str, tag: str = "", position: Vector3 = None,
                 rotation: Quaternion = None, parent: "SceneNode" = None):
        self.name = name
        self.tag = tag
        self.local_position = position if position is not None else Vector3.zero()
        self.local_rotation = rotation if rotation is not None else Quaternion.identity()
        self.children: List["SceneNode"] = []
        self.components = []
        self.parent = None
        if parent is not None:
            parent.add_child(self)

    def add_child(self, child: "SceneNode") -> "SceneNode":
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def add_component(self, component):
        self.components.append(component)
        return component

    def get_component(self, component_type):
        """Первый компонент данного типа или None"""
        for component in self.components:
            if isinstance(component, component_type):
                return component
        return None

    def find(self, name: str) -> Optional["SceneNode"]:
        """Прямой потомок с данным именем"""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def walk(self):
        """Обход в глубину (включая сам узел)"""
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def rotation(self) -> Quaternion:
        """Мировой поворот"""
        if self.parent is None:
            return self.local_rotation
        return (self.parent.rotation * self.local_rotation).normalized()

    @property
    def position(self) -> Vector3:
        """Мировая позиция"""
        if self.parent is None:
            return self.local_position
        return self.parent.position + self.parent.rotation.rotate(self.local_position)

    @property
    def up(self) -> Vector3:
        return self.rotation.up

    @property
    def forward(self) -> Vector3:
        return self.rotation.forward

    def __repr__(self):
        return f"SceneNode({self.name!r}, tag={self.tag!r}, children={len(self.children)})"


class SphereCollider:
    """
    Сферический коллайдер, прикреплённый к узлу сцены.
    is_trigger=True — триггер (нектар), иначе твёрдое тело (лепестки).
    """

    def __init__(self, node: SceneNode, radius: float, is_trigger: bool = False):
        self.id = str(uuid.uuid4())
        self.node = node
        self.radius = radius
        self.is_trigger = is_trigger
        self.enabled = True
        node.add_component(self)

    @property
    def tag(self) -> str:
        return self.node.tag

    @property
    def center(self) -> Vector3:
        return self.node.position

    def closest_point(self, point: Vector3) -> Vector3:
        """
        Ближайшая к point точка коллайдера.
        Если точка внутри — возвращается она сама.
        """
        center = self.center
        offset = point - center
        dist = offset.magnitude()
        if dist <= self.radius:
            return point.copy()
        return center + offset * (self.radius / dist)

    def overlaps_sphere(self, point: Vector3, radius: float) -> bool:
        reach = self.radius + radius
        return self.center.distance_squared_to(point) <= reach * reach

    def contains(self, point: Vector3) -> bool:
        return self.center.distance_squared_to(point) <= self.radius * self.radius

    def __repr__(self):
        kind = "trigger" if self.is_trigger else "solid"
        return f"SphereCollider({self.node.name!r}, r={self.radius}, {kind}, enabled={self.enabled})"
