"""Система наград для обучения колибри"""

from garden.geometry import Vector3, clamp01


class RewardCalculator:
    """
    Вычисляет награды по событиям контакта.

    Используется только в режиме обучения; агент суммирует награды
    за шаг и передаёт их в gym env.
    """

    NECTAR_BASE_REWARD = 0.01       # за любой глоток нектара
    NECTAR_ALIGNMENT_BONUS = 0.02   # доп. бонус, если клюв направлен в цветок
    BOUNDARY_PENALTY = -0.5         # столкновение с границей области

    @staticmethod
    def alignment(forward: Vector3, flower_up: Vector3) -> float:
        """
        Насколько клюв смотрит в цветок: dot(forward, -up), от -1 до 1.
        """
        return forward.normalize().dot(-flower_up.normalize())

    @staticmethod
    def nectar_reward(forward: Vector3, flower_up: Vector3) -> float:
        """Награда за глоток: база + бонус за направление (отрицательное обрезается)"""
        bonus = RewardCalculator.NECTAR_ALIGNMENT_BONUS * clamp01(
            RewardCalculator.alignment(forward, flower_up)
        )
        return RewardCalculator.NECTAR_BASE_REWARD + bonus

    @staticmethod
    def boundary_penalty() -> float:
        return RewardCalculator.BOUNDARY_PENALTY
