"""Мозги колибри: базовый класс, управление игроком и скриптовый полёт к цветам"""

import math
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

from birds.hummingbird import HeuristicInput, HummingbirdAgent
from garden.geometry import clamp


class Brain(ABC):
    """Абстрактный класс мозга: наблюдение → вектор действия из 5 чисел"""

    @abstractmethod
    def decide_action(self, observation: np.ndarray, agent: HummingbirdAgent = None) -> np.ndarray:
        """
        Принять решение.

        Args:
            observation: вектор наблюдения агента (10 чисел)
            agent:       управляемая колибри (для доступа к позе)

        Returns:
            np.ndarray: [move_x, move_y, move_z, pitch, yaw] в [-1, 1]
        """


class IdleBrain(Brain):
    """Висит на месте"""

    def decide_action(self, observation, agent=None):
        return np.zeros(HummingbirdAgent.ACTION_SIZE, dtype=np.float32)


class HeuristicBrain(Brain):
    """
    Управление игроком: источник ввода возвращает HeuristicInput,
    агент переводит его в вектор действия.
    """

    def __init__(self, input_source: Callable[[], HeuristicInput]):
        self.input_source = input_source

    def decide_action(self, observation, agent=None):
        if agent is None:
            return np.zeros(HummingbirdAgent.ACTION_SIZE, dtype=np.float32)
        return agent.heuristic(self.input_source())


class GreedyBrain(Brain):
    """
    Скриптовая колибри:
    1. Летит к точке перед ближайшим цветком
    2. Разворачивает клюв против оси цветка
    3. Подлетает вплотную и пьёт
    """

    APPROACH_DISTANCE = 0.15   # точка подлёта перед цветком
    DIVE_DISTANCE = 0.25       # ближе этого летим прямо в нектар
    SPEED_GAIN = 3.0
    TURN_GAIN = 1.0 / 20.0     # градусы ошибки → команда поворота

    def decide_action(self, observation, agent=None):
        action = np.zeros(HummingbirdAgent.ACTION_SIZE, dtype=np.float32)
        if agent is None:
            return action
        flower = agent.nearest_flower
        if flower is None:
            return action

        flower_up = flower.up_vector.normalize()
        center = flower.center_position
        beak = agent.beak_tip

        if beak.distance_to(center) > self.DIVE_DISTANCE:
            target = center + flower_up * self.APPROACH_DISTANCE
        else:
            target = center

        # Желаемая скорость к цели минус текущая: гасим инерцию
        desired_velocity = (target - beak) * self.SPEED_GAIN
        move = (desired_velocity - agent.body.velocity).clamp_magnitude(1.0)

        # Смотрим вдоль -up цветка
        look = -flower_up
        target_yaw = math.degrees(math.atan2(look.x, look.z))
        target_pitch = clamp(-math.degrees(math.asin(clamp(look.y, -1.0, 1.0))),
                             -agent.config.max_pitch_angle, agent.config.max_pitch_angle)

        angles = agent.rotation.euler_angles()
        yaw_error = (target_yaw - angles.y + 180.0) % 360.0 - 180.0
        pitch_error = target_pitch - agent.pitch

        action[0:3] = move.to_tuple()
        action[3] = clamp(pitch_error * self.TURN_GAIN, -1.0, 1.0)
        action[4] = clamp(yaw_error * self.TURN_GAIN, -1.0, 1.0)
        return action


def create_brain(brain_type: str, model_path: str = None,
                 input_source: Callable[[], HeuristicInput] = None) -> Brain:
    """
    Фабрика: создать мозг нужного типа.

    Args:
        brain_type:   "greedy" | "rl" | "heuristic" | "idle"
        model_path:   путь к модели (для RL)
        input_source: источник команд игрока (для heuristic)
    """
    if brain_type == "greedy":
        return GreedyBrain()
    elif brain_type == "rl":
        from ai.rl_brain import RLBrain
        return RLBrain(model_path=model_path)
    elif brain_type == "heuristic":
        if input_source is None:
            raise ValueError("heuristic brain needs an input source")
        return HeuristicBrain(input_source)
    elif brain_type == "idle":
        return IdleBrain()
    raise ValueError(f"Unknown brain type {brain_type!r}")
