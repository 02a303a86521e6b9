"""Процедурная генерация сада: растения с цветами внутри области"""

import math
import random

from garden.config import FlowerAreaConfig
from garden.flower import FLOWER_COLLIDER_NAME, NECTAR_COLLIDER_NAME, Flower
from garden.flower_area import FLOWER_PLANT_TAG
from garden.geometry import Quaternion, Vector3
from garden.scene import SceneNode, SphereCollider


def add_flower(plant: SceneNode, name: str, position: Vector3, rotation: Quaternion,
               config: FlowerAreaConfig) -> SceneNode:
    """
    Добавить цветок на растение.

    Структура узла:
        Flower_x                 (компонент Flower)
        ├── FlowerCollider       (твёрдый, чуть позади центра)
        └── FlowerNectarCollider (триггер, тег nectar)
    """
    node = SceneNode(name, position=position, rotation=rotation, parent=plant)
    node.add_component(Flower(node))

    petals = SceneNode(FLOWER_COLLIDER_NAME, tag="flower",
                       position=Vector3(0, -0.02, 0), parent=node)
    SphereCollider(petals, config.flower_collider_radius)

    nectar = SceneNode(NECTAR_COLLIDER_NAME, tag="nectar",
                       position=Vector3(0, 0.01, 0), parent=node)
    SphereCollider(nectar, config.nectar_collider_radius, is_trigger=True)
    return node


def build_flower_area_scene(config: FlowerAreaConfig, rng: random.Random,
                            center: Vector3 = None, name: str = "FlowerArea") -> SceneNode:
    """
    Построить граф сцены области: растения на кольце вокруг центра,
    на каждом несколько цветов, смотрящих наружу и вверх.
    """
    root = SceneNode(name, position=center if center is not None else Vector3.zero())

    for i in range(config.plant_count):
        angle = rng.uniform(-math.pi, math.pi)
        radius = rng.uniform(config.plant_min_radius, config.plant_max_radius)
        plant = SceneNode(
            f"FlowerPlant_{i}",
            tag=FLOWER_PLANT_TAG,
            position=Vector3(math.sin(angle) * radius, 0.0, math.cos(angle) * radius),
            parent=root,
        )

        step = 360.0 / max(config.flowers_per_plant, 1)
        for j in range(config.flowers_per_plant):
            heading = j * step + rng.uniform(-step / 4, step / 4)
            heading_rad = math.radians(heading)
            height = rng.uniform(config.flower_min_height, config.flower_max_height)
            offset = Vector3(
                math.sin(heading_rad) * config.flower_offset,
                height,
                math.cos(heading_rad) * config.flower_offset,
            )
            # Положительный pitch наклоняет "верх" цветка наружу от стебля
            tilt = rng.uniform(30.0, 70.0)
            add_flower(plant, f"Flower_{i}_{j}", offset,
                       Quaternion.euler(tilt, heading, 0.0), config)

    return root
