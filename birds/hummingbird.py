"""Агент-колибри: управление, наблюдения, награды за нектар"""

import logging
import random
import warnings
from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ai.reward import RewardCalculator
from birds.nearest import NearestFlowerTracker
from birds.spawner import CollisionProbe, SpawnMode, SpawnSampler
from garden.config import AREA_DIAMETER, HummingbirdConfig
from garden.errors import AgentUsageWarning
from garden.flower import Flower
from garden.flower_area import FlowerArea
from garden.geometry import Quaternion, Vector3, clamp, move_towards
from garden.physics import BOUNDARY_TAG, ContactListener, RigidBody
from garden.scene import SphereCollider

logger = logging.getLogger(__name__)

NECTAR_TAG = "nectar"


@dataclass
class HeuristicInput:
    """Дискретные команды игрока (клавиатура)"""
    forward: bool = False
    backward: bool = False
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    pitch_up: bool = False
    pitch_down: bool = False
    yaw_left: bool = False
    yaw_right: bool = False


class GardenAgent(ContactListener):
    """
    Интерфейс агента, которым управляет внешний драйвер шагов
    (gym env, интерактивная игра, скрипт).
    """

    @abstractmethod
    def begin_episode(self):
        """Подготовить агента и область к новому эпизоду"""

    @abstractmethod
    def apply_action(self, action):
        """Применить вектор действия"""

    @abstractmethod
    def collect_observations(self) -> np.ndarray:
        """Вектор наблюдения"""

    @abstractmethod
    def on_resource_contact(self, surface_id: str, contact_point: Vector3) -> float:
        """Контакт с нектаром"""

    @abstractmethod
    def on_boundary_contact(self):
        """Столкновение с границей области"""

    @abstractmethod
    def fixed_update(self):
        """Сверка состояния раз в физический шаг"""


class HummingbirdAgent(GardenAgent):
    """
    Колибри, собирающая нектар.

    action (5 чисел в [-1, 1]):
        0: движение по x (+1 вправо, -1 влево)
        1: движение по y (+1 вверх, -1 вниз)
        2: движение по z (+1 вперёд, -1 назад)
        3: изменение pitch (+1 / -1)
        4: изменение yaw (+1 вправо, -1 влево)

    observation (10 чисел):
        0-3: локальный поворот (кватернион x, y, z, w)
        4-6: направление от клюва к ближайшему цветку
        7:   клюв перед цветком? dot(направление, -up цветка)
        8:   клюв смотрит на цветок? dot(forward, -up цветка)
        9:   расстояние до цветка / диаметр области
    """

    OBSERVATION_SIZE = 10
    ACTION_SIZE = 5

    def __init__(self, area: FlowerArea, body: RigidBody, config: HummingbirdConfig,
                 probe: CollisionProbe, rng: random.Random = None, dt: float = 0.02,
                 name: str = "hummingbird", sampler: SpawnSampler = None):
        self.area = area
        self.body = body
        self.body.listener = self
        self.config = config
        self.probe = probe
        self.rng = rng or random.Random()
        self.dt = dt
        self.name = name
        self.sampler = sampler or SpawnSampler(probe_radius=config.spawn_probe_radius)

        self.tracker = NearestFlowerTracker()
        # Сбрасывать ли цветы в начале эпизода (только если агент в области один)
        self.owns_area = True
        self.smooth_pitch_change = 0.0
        self.smooth_yaw_change = 0.0
        self.frozen = False

        # Итоги текущего эпизода
        self.nectar_obtained = 0.0
        self.episode_reward = 0.0
        self.step_reward = 0.0
        self.flowers_emptied = 0
        self.boundary_hits = 0

    # --- Поза -------------------------------------------------------------

    @property
    def training_mode(self) -> bool:
        return self.config.training_mode

    @property
    def position(self) -> Vector3:
        return self.body.position

    @property
    def rotation(self) -> Quaternion:
        return self.body.rotation

    @property
    def forward(self) -> Vector3:
        return self.body.rotation.forward

    @property
    def beak_tip(self) -> Vector3:
        return self.body.position + self.forward * self.config.beak_tip_offset

    @property
    def nearest_flower(self) -> Optional[Flower]:
        return self.tracker.flower(self.area)

    @property
    def pitch(self) -> float:
        """Текущий pitch в градусах, в [-180, 180)"""
        pitch = self.rotation.euler_angles().x
        return pitch - 360.0 if pitch >= 180.0 else pitch

    # --- Награды ------------------------------------------------------------

    def add_reward(self, value: float):
        self.step_reward += value
        self.episode_reward += value

    def consume_step_reward(self) -> float:
        """Награда, накопленная с прошлого вызова"""
        reward = self.step_reward
        self.step_reward = 0.0
        return reward

    # --- Эпизод -------------------------------------------------------------

    def begin_episode(self):
        if self.training_mode and self.owns_area:
            # Цветы сбрасываем только в обучении, где на область один агент
            self.area.reset_flowers(self.rng)

        self.nectar_obtained = 0.0
        self.episode_reward = 0.0
        self.step_reward = 0.0
        self.flowers_emptied = 0
        self.boundary_hits = 0
        self.smooth_pitch_change = 0.0
        self.smooth_yaw_change = 0.0

        # Обнуляем скорости, чтобы движение остановилось до нового эпизода
        self.body.velocity = Vector3.zero()
        self.body.angular_velocity = Vector3.zero()

        # По умолчанию появляемся перед цветком
        in_front_of_flower = True
        if self.training_mode:
            in_front_of_flower = self.rng.random() < self.config.front_spawn_probability

        mode = SpawnMode.IN_FRONT_OF_FLOWER if in_front_of_flower else SpawnMode.FREE_ROAM
        logger.debug("%s: new episode, spawn mode %s", self.name, mode.value)
        self.move_to_safe_random_position(mode)

        # Агент переместился, пересчитываем ближайший цветок
        self.tracker.clear()
        self.tracker.recompute(self.beak_tip, self.area)

    def move_to_safe_random_position(self, mode: SpawnMode):
        position, rotation = self.sampler.sample_pose(mode, self.area, self.probe, self.rng)
        self.body.teleport(position, rotation)

    # --- Управление ---------------------------------------------------------

    def apply_action(self, action):
        if self.frozen:
            return

        action = np.clip(np.asarray(action, dtype=np.float64).reshape(-1), -1.0, 1.0)
        if action.shape[0] != self.ACTION_SIZE:
            raise ValueError(f"Expected {self.ACTION_SIZE} action values, got {action.shape[0]}")

        move = Vector3(action[0], action[1], action[2])
        self.body.add_force(move * self.config.move_force)

        rotation_vector = self.rotation.euler_angles()

        pitch_change = float(action[3])
        yaw_change = float(action[4])

        # Плавное изменение поворота вместо мгновенного
        max_delta = self.config.smoothing_rate * self.dt
        self.smooth_pitch_change = move_towards(self.smooth_pitch_change, pitch_change, max_delta)
        self.smooth_yaw_change = move_towards(self.smooth_yaw_change, yaw_change, max_delta)

        # Pitch ограничен, чтобы птица не перевернулась
        pitch = rotation_vector.x + self.smooth_pitch_change * self.dt * self.config.pitch_speed
        if pitch > 180.0:
            pitch -= 360.0
        pitch = clamp(pitch, -self.config.max_pitch_angle, self.config.max_pitch_angle)

        yaw = rotation_vector.y + self.smooth_yaw_change * self.dt * self.config.yaw_speed

        self.body.rotation = Quaternion.euler(pitch, yaw, 0.0)

    def collect_observations(self) -> np.ndarray:
        flower = self.nearest_flower
        if flower is None:
            return np.zeros(self.OBSERVATION_SIZE, dtype=np.float32)

        local_rotation = (self.area.root.rotation.conjugate() * self.rotation).normalized()
        flower_down = -flower.up_vector.normalize()

        to_flower = flower.center_position - self.beak_tip
        direction = to_flower.normalize()

        obs = np.array([
            *local_rotation.to_xyzw(),
            *direction.to_tuple(),
            direction.dot(flower_down),
            self.forward.normalize().dot(flower_down),
            to_flower.magnitude() / AREA_DIAMETER,
        ], dtype=np.float64)
        obs[:9] = np.clip(obs[:9], -1.0, 1.0)
        return obs.astype(np.float32)

    def heuristic(self, inputs: HeuristicInput) -> np.ndarray:
        """
        Команды игрока → тот же вектор действия, что и у нейросети.
        Сглаживание поворота происходит позже, в apply_action.
        """
        rotation = self.rotation
        forward = Vector3.zero()
        left = Vector3.zero()
        up = Vector3.zero()
        pitch = 0.0
        yaw = 0.0

        if inputs.forward:
            forward = rotation.forward
        elif inputs.backward:
            forward = -rotation.forward

        if inputs.left:
            left = -rotation.right
        elif inputs.right:
            left = rotation.right

        if inputs.up:
            up = rotation.up
        elif inputs.down:
            up = -rotation.up

        if inputs.pitch_up:
            pitch = 1.0
        elif inputs.pitch_down:
            pitch = -1.0

        if inputs.yaw_left:
            yaw = -1.0
        elif inputs.yaw_right:
            yaw = 1.0

        combined = (forward + left + up).normalize()
        return np.array([combined.x, combined.y, combined.z, pitch, yaw], dtype=np.float32)

    # --- Заморозка (только вне обучения) -----------------------------------

    def freeze(self):
        """Остановить агента: действия игнорируются, тело спит"""
        if self.training_mode:
            warnings.warn("Freeze/Unfreeze not supported in training", AgentUsageWarning, stacklevel=2)
            return
        self.frozen = True
        self.body.sleep()

    def unfreeze(self):
        if self.training_mode:
            warnings.warn("Freeze/Unfreeze not supported in training", AgentUsageWarning, stacklevel=2)
            return
        self.frozen = False
        self.body.wake_up()

    # --- События физики -----------------------------------------------------

    def on_trigger_contact(self, collider: SphereCollider):
        if collider.tag == NECTAR_TAG:
            self.on_resource_contact(collider.id, collider.closest_point(self.beak_tip))

    def on_collision_enter(self, tag: str):
        if tag == BOUNDARY_TAG:
            self.on_boundary_contact()

    def on_resource_contact(self, surface_id: str, contact_point: Vector3) -> float:
        """
        Контакт с нектаром. Засчитывается только касание кончиком клюва,
        столкновения телом игнорируются.

        Returns:
            float: сколько нектара получено
        """
        flower = self.area.get_flower_from_nectar(surface_id)

        if self.beak_tip.distance_to(contact_point) >= self.config.beak_tip_radius:
            return 0.0

        had_nectar = flower.has_nectar
        nectar_received = flower.feed(self.config.nectar_per_step)
        self.nectar_obtained += nectar_received

        if self.training_mode:
            self.add_reward(RewardCalculator.nectar_reward(self.forward, flower.up_vector))

        if not flower.has_nectar:
            if had_nectar:
                self.flowers_emptied += 1
            self.tracker.recompute(self.beak_tip, self.area)

        return nectar_received

    def on_boundary_contact(self):
        self.boundary_hits += 1
        if self.training_mode:
            self.add_reward(RewardCalculator.boundary_penalty())

    def fixed_update(self):
        # Нектар ближайшего цветка мог выпить другой агент
        self.tracker.invalidate_if_depleted(self.beak_tip, self.area)

    def update(self):
        """Отладочная линия от клюва до ближайшего цветка (или None)"""
        flower = self.nearest_flower
        if flower is None:
            return None
        return self.beak_tip, flower.center_position

    def __repr__(self):
        state = "frozen" if self.frozen else "active"
        return f"HummingbirdAgent({self.name!r}, {state}, nectar={self.nectar_obtained:.2f})"
