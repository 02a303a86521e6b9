"""Иерархия исключений сада.

У каждого вида отказа симуляции свой тип: вызывающий код ловит ровно то,
что ожидает, остальное пробрасывается дальше.
"""


class GardenError(Exception):
    """Базовое исключение сада"""


class FlowerConfigurationError(GardenError, ValueError):
    """У цветка в сцене нет обязательного коллайдера"""


class SpawnError(GardenError, RuntimeError):
    """За отведённое число попыток не нашлось позы появления без пересечений"""


class UnknownNectarError(GardenError, KeyError):
    """Идентификатор поверхности контакта не принадлежит ни одному цветку"""


class AgentUsageWarning(UserWarning):
    """Операция агента вызвана в режиме, который её не поддерживает"""
