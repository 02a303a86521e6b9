"""Конфигурация сада, колибри и симуляции"""

from dataclasses import dataclass


# Диаметр области, в которой находятся колибри и цветы.
# Используется для нормализации расстояния до цветка в наблюдении.
AREA_DIAMETER = 20.0

# Сколько попыток даётся на поиск безопасной точки появления
SPAWN_ATTEMPT_BUDGET = 100

FULL_FLOWER_COLOR = (1.0, 0.0, 0.3)
EMPTY_FLOWER_COLOR = (0.5, 0.0, 1.0)


@dataclass
class FlowerAreaConfig:
    """Конфигурация области с цветами"""
    area_radius: float = 9.0          # граница области (цилиндр)
    area_height: float = 6.0          # высота потолка над полом
    plant_count: int = 8
    flowers_per_plant: int = 3
    plant_min_radius: float = 1.5     # кольцо, на котором стоят растения
    plant_max_radius: float = 7.5
    flower_min_height: float = 0.6
    flower_max_height: float = 2.4
    flower_offset: float = 0.18       # насколько цветок вынесен от стебля
    flower_collider_radius: float = 0.04
    nectar_collider_radius: float = 0.02


@dataclass
class HummingbirdConfig:
    """Конфигурация колибри"""
    training_mode: bool = True
    move_force: float = 2.0
    pitch_speed: float = 100.0
    yaw_speed: float = 100.0
    max_pitch_angle: float = 80.0     # чтобы не переворачивался
    smoothing_rate: float = 2.0       # макс. изменение сглаженного поворота за секунду
    beak_tip_radius: float = 0.008    # допуск контакта кончика клюва
    beak_tip_offset: float = 0.08     # клюв впереди центра тела
    nectar_per_step: float = 0.01     # за один физический шаг (50 раз в секунду)
    front_spawn_probability: float = 0.5
    body_radius: float = 0.04
    spawn_probe_radius: float = 0.05
    mass: float = 1.0
    drag: float = 2.0


class SimulationConfig:
    """Главная конфигурация симуляции"""

    def __init__(self):
        self.area = FlowerAreaConfig()
        self.hummingbird = HummingbirdConfig()

        self.dt = 0.02          # фиксированный шаг физики, 50 Гц
        self.max_steps = 5000   # 0 = эпизод без ограничения длины
        self.agent_count = 1

    @property
    def training_mode(self) -> bool:
        return self.hummingbird.training_mode


class Presets:
    """Предустановленные конфигурации"""

    @staticmethod
    def training():
        """Обучение: награды, случайные появления, эпизоды по 5000 шагов"""
        return SimulationConfig()

    @staticmethod
    def gameplay():
        """Игра: без наград, всегда перед цветком, бесконечный эпизод"""
        config = SimulationConfig()
        config.hummingbird = HummingbirdConfig(training_mode=False)
        config.max_steps = 0
        return config

    @staticmethod
    def crowded():
        """Тесная область: много растений, несколько колибри делят цветы"""
        config = SimulationConfig()
        config.area = FlowerAreaConfig(
            area_radius=6.0,
            plant_count=14,
            flowers_per_plant=4,
            plant_min_radius=1.0,
            plant_max_radius=5.0,
        )
        config.agent_count = 3
        return config

    @staticmethod
    def by_name(name: str) -> SimulationConfig:
        factories = {
            "training": Presets.training,
            "gameplay": Presets.gameplay,
            "crowded": Presets.crowded,
        }
        if name not in factories:
            raise ValueError(f"Unknown preset {name!r}, expected one of {sorted(factories)}")
        return factories[name]()
