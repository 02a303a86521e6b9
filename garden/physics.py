"""
Физика сада: твёрдые тела, столкновения со сферами и границей области.

Минимальная замена физического движка: материальные точки с линейным
сопротивлением, сферические коллайдеры, цилиндрическая граница,
запросы на пересечение и события контактов для слушателей.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from garden.geometry import Quaternion, Vector3
from garden.scene import SphereCollider

logger = logging.getLogger(__name__)

BOUNDARY_TAG = "boundary"


class ContactListener(ABC):
    """Получатель событий контакта от физики"""

    @property
    @abstractmethod
    def beak_tip(self) -> Vector3:
        """Точка, которой тело касается триггеров"""

    @abstractmethod
    def on_trigger_contact(self, collider: SphereCollider):
        """Тело вошло в триггер или остаётся в нём (вызывается каждый шаг)"""

    @abstractmethod
    def on_collision_enter(self, tag: str):
        """Тело впервые коснулось твёрдого коллайдера"""


class RigidBody:
    """Твёрдое тело-шар без вращательной динамики"""

    def __init__(self, position: Vector3 = None, rotation: Quaternion = None,
                 mass: float = 1.0, drag: float = 0.0, radius: float = 0.05):
        self.position = position if position is not None else Vector3.zero()
        self.rotation = rotation if rotation is not None else Quaternion.identity()
        self.velocity = Vector3.zero()
        self.angular_velocity = Vector3.zero()
        self.mass = mass
        self.drag = drag
        self.radius = radius
        self.is_sleeping = False
        self.listener: Optional[ContactListener] = None

        self._force = Vector3.zero()
        self._contacts = set()

    def add_force(self, force: Vector3):
        """Приложить силу на ближайший шаг интегрирования"""
        self._force = self._force + force

    def sleep(self):
        """Остановить тело и исключить его из интегрирования"""
        self.is_sleeping = True
        self.velocity = Vector3.zero()
        self.angular_velocity = Vector3.zero()
        self._force = Vector3.zero()

    def wake_up(self):
        self.is_sleeping = False

    def teleport(self, position: Vector3, rotation: Quaternion):
        """Переставить тело, забыв накопленную силу и текущие контакты"""
        self.position = position
        self.rotation = rotation
        self._force = Vector3.zero()
        self._contacts = set()

    def integrate(self, dt: float):
        if self.is_sleeping:
            self._force = Vector3.zero()
            return
        acceleration = self._force / self.mass
        self.velocity = (self.velocity + acceleration * dt) * max(0.0, 1.0 - self.drag * dt)
        self.position = self.position + self.velocity * dt
        self._force = Vector3.zero()

    @property
    def forward(self) -> Vector3:
        return self.rotation.forward

    def __repr__(self):
        return f"RigidBody(pos={self.position}, vel={self.velocity}, sleeping={self.is_sleeping})"


class PhysicsWorld:
    """
    Физический мир одной области.

    Граница — вертикальный цилиндр радиуса area_radius с полом на высоте
    центра и потолком на area_height над ним.
    """

    def __init__(self, colliders: List[SphereCollider], center: Vector3 = None,
                 area_radius: float = 9.0, area_height: float = 6.0):
        self.colliders = list(colliders)
        self.center = center if center is not None else Vector3.zero()
        self.area_radius = area_radius
        self.area_height = area_height
        self.bodies: List[RigidBody] = []

    def add_body(self, body: RigidBody) -> RigidBody:
        self.bodies.append(body)
        return body

    # --- Запросы -----------------------------------------------------------

    def _boundary_overlaps(self, point: Vector3, radius: float) -> int:
        count = 0
        horizontal = Vector3(point.x - self.center.x, 0.0, point.z - self.center.z)
        if horizontal.magnitude() + radius > self.area_radius:
            count += 1
        if point.y - radius < self.center.y:
            count += 1
        if point.y + radius > self.center.y + self.area_height:
            count += 1
        return count

    def overlap_sphere(self, point: Vector3, radius: float,
                       exclude: Optional[RigidBody] = None) -> int:
        """Сколько коллайдеров пересекает сфера (point, radius)"""
        count = self._boundary_overlaps(point, radius)
        for collider in self.colliders:
            if collider.enabled and collider.overlaps_sphere(point, radius):
                count += 1
        for body in self.bodies:
            if body is exclude:
                continue
            reach = body.radius + radius
            if body.position.distance_squared_to(point) <= reach * reach:
                count += 1
        return count

    # --- Шаг ---------------------------------------------------------------

    def _resolve_boundary(self, body: RigidBody, touching: set):
        pos = body.position
        offset = Vector3(pos.x - self.center.x, 0.0, pos.z - self.center.z)
        dist = offset.magnitude()
        limit = self.area_radius - body.radius
        if dist > limit:
            normal = offset / dist
            pos = pos - normal * (dist - limit)
            outward = body.velocity.dot(normal)
            if outward > 0:
                body.velocity = body.velocity - normal * outward
            touching.add("boundary:wall")

        floor = self.center.y + body.radius
        ceiling = self.center.y + self.area_height - body.radius
        if pos.y < floor:
            pos = Vector3(pos.x, floor, pos.z)
            body.velocity = Vector3(body.velocity.x, max(body.velocity.y, 0.0), body.velocity.z)
            touching.add("boundary:floor")
        elif pos.y > ceiling:
            pos = Vector3(pos.x, ceiling, pos.z)
            body.velocity = Vector3(body.velocity.x, min(body.velocity.y, 0.0), body.velocity.z)
            touching.add("boundary:ceiling")
        body.position = pos

    def _resolve_solids(self, body: RigidBody, touching: set):
        for collider in self.colliders:
            if collider.is_trigger or not collider.enabled:
                continue
            if not collider.overlaps_sphere(body.position, body.radius):
                continue
            offset = body.position - collider.center
            dist = offset.magnitude()
            normal = offset / dist if dist > 1e-9 else Vector3.up()
            depth = collider.radius + body.radius - dist
            body.position = body.position + normal * depth
            inward = body.velocity.dot(normal)
            if inward < 0:
                body.velocity = body.velocity - normal * inward
            touching.add(collider.id)

    def _tag_of(self, key: str) -> str:
        if key.startswith(BOUNDARY_TAG):
            return BOUNDARY_TAG
        for collider in self.colliders:
            if collider.id == key:
                return collider.tag
        return ""

    def step(self, dt: float):
        """
        Один фиксированный шаг:
        1. интегрирование всех тел
        2. разрешение столкновений (события collision enter)
        3. события триггеров для каждого тела
        """
        for body in self.bodies:
            body.integrate(dt)

        for body in self.bodies:
            touching = set()
            self._resolve_solids(body, touching)
            self._resolve_boundary(body, touching)

            entered = touching - body._contacts
            body._contacts = touching
            if body.listener is not None:
                for key in sorted(entered):
                    logger.debug("Body entered contact %s", key)
                    body.listener.on_collision_enter(self._tag_of(key))

        for body in self.bodies:
            listener = body.listener
            if listener is None or body.is_sleeping:
                continue
            tip = listener.beak_tip
            for collider in self.colliders:
                if not collider.is_trigger or not collider.enabled:
                    continue
                if collider.overlaps_sphere(body.position, body.radius) or collider.contains(tip):
                    listener.on_trigger_contact(collider)
