"""Pytest configuration and fixtures for garden tests."""

import functools
import random

import pytest

from garden.config import FlowerAreaConfig, HummingbirdConfig
from garden.flower_area import FLOWER_PLANT_TAG, FlowerArea
from garden.geometry import Quaternion, Vector3
from garden.layout import add_flower
from garden.physics import PhysicsWorld, RigidBody
from garden.scene import SceneNode


# Три цветка на одном растении, все смотрят вверх (+Y)
FLOWER_POSITIONS = (
    Vector3(1.0, 1.0, 0.0),
    Vector3(3.0, 1.0, 0.0),
    Vector3(-2.0, 1.0, 0.0),
)


def build_scene(positions=FLOWER_POSITIONS, config=None):
    """Hand-built area: one plant at the origin with upright flowers."""
    config = config or FlowerAreaConfig()
    root = SceneNode("TestArea")
    plant = SceneNode("Plant", tag=FLOWER_PLANT_TAG, parent=root)
    for i, pos in enumerate(positions):
        add_flower(plant, f"Flower_{i}", pos, Quaternion.identity(), config)
    return root


def make_agent(area, world, training=True, name="hummingbird", seed=42):
    from birds.hummingbird import HummingbirdAgent

    config = HummingbirdConfig(training_mode=training)
    body = world.add_body(RigidBody(radius=config.body_radius, drag=config.drag))
    probe = functools.partial(world.overlap_sphere, exclude=body)
    return HummingbirdAgent(area, body, config, probe, rng=random.Random(seed), name=name)


def place_beak(agent, beak: Vector3, rotation: Quaternion = None):
    """Move the agent so that its beak tip lands on the given point."""
    rotation = rotation if rotation is not None else Quaternion.identity()
    agent.body.teleport(beak - rotation.forward * agent.config.beak_tip_offset, rotation)


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def area():
    """Flower area with three full flowers."""
    return FlowerArea(build_scene())


@pytest.fixture
def world(area):
    return PhysicsWorld(area.colliders(), center=area.center, area_radius=9.0, area_height=6.0)


@pytest.fixture
def agent(area, world):
    """Training-mode hummingbird in the test area."""
    return make_agent(area, world, training=True)


@pytest.fixture
def gameplay_agent(area, world):
    return make_agent(area, world, training=False)
