"""Gymnasium Environment — обёртка над садом для обучения колибри."""

import functools
import logging
import random
from typing import List, Sequence

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from ai.brain import Brain, GreedyBrain
from birds.hummingbird import HummingbirdAgent
from garden.config import Presets, SimulationConfig
from garden.flower_area import FlowerArea
from garden.geometry import Vector3
from garden.layout import build_flower_area_scene
from garden.physics import PhysicsWorld, RigidBody

logger = logging.getLogger(__name__)


class GardenSimulation:
    """
    Одна область с цветами, физика и колибри в ней.

    step() — фиксированный шаг симуляции:
    1. действия всех агентов
    2. физика (она же рассылает события контактов)
    3. сверка ближайшего цветка у каждого агента
    """

    def __init__(self, config: SimulationConfig, rng: random.Random,
                 center: Vector3 = None, root=None):
        self.config = config
        self.rng = rng

        if root is None:
            root = build_flower_area_scene(config.area, rng, center)
        self.area = FlowerArea(root)
        self.world = PhysicsWorld(
            self.area.colliders(),
            center=root.position,
            area_radius=config.area.area_radius,
            area_height=config.area.area_height,
        )
        self.agents: List[HummingbirdAgent] = [
            self._create_agent(i) for i in range(config.agent_count)
        ]
        for agent in self.agents:
            agent.owns_area = len(self.agents) == 1
        self.step_count = 0

    def _create_agent(self, index: int) -> HummingbirdAgent:
        cfg = self.config.hummingbird
        body = self.world.add_body(RigidBody(mass=cfg.mass, drag=cfg.drag, radius=cfg.body_radius))
        probe = functools.partial(self.world.overlap_sphere, exclude=body)
        return HummingbirdAgent(
            self.area, body, cfg, probe,
            rng=self.rng, dt=self.config.dt, name=f"hummingbird_{index}",
        )

    def reset(self):
        """Новый эпизод для всех агентов"""
        if not self.config.training_mode or len(self.agents) > 1:
            # Общую область сбрасываем один раз за раунд, а не каждым агентом
            self.area.reset_flowers(self.rng)
        self.step_count = 0
        for agent in self.agents:
            agent.begin_episode()
        logger.info("New round: %d hummingbird(s), %d flowers", len(self.agents), len(self.area))

    def step(self, actions: Sequence):
        for agent, action in zip(self.agents, actions):
            agent.apply_action(action)

        self.world.step(self.config.dt)

        for agent in self.agents:
            agent.fixed_update()
        self.step_count += 1

    def observations(self) -> List[np.ndarray]:
        return [agent.collect_observations() for agent in self.agents]


class HummingbirdEnv(gym.Env):
    """
    Gymnasium-среда для обучения **одной** колибри.

    Если в конфигурации несколько агентов, остальными управляет
    opponent_brain (по умолчанию GreedyBrain) — они делят с обучаемым
    агентом одни и те же цветы.

    Параметры:
        config:         SimulationConfig (по умолчанию Presets.training())
        layout_seed:    seed генерации сада (сад один на всё время жизни среды)
        render_mode:    None или "human" (pygame)
        opponent_brain: мозг остальных колибри
    """

    metadata = {"render_modes": ["human"], "render_fps": 50}

    def __init__(self, config: SimulationConfig = None, layout_seed: int = 0,
                 render_mode: str = None, opponent_brain: Brain = None):
        super().__init__()

        self.config = config or Presets.training()
        self.render_mode = render_mode
        self.opponent_brain = opponent_brain or GreedyBrain()

        # 0: эпизод без ограничения длины (режим игры)
        self.max_steps = self.config.max_steps if self.config.training_mode else 0
        self.current_step = 0

        self.rng = random.Random(layout_seed)
        self.sim = GardenSimulation(self.config, self.rng)
        self.agent = self.sim.agents[0]

        # --- Action space: [move_x, move_y, move_z, pitch, yaw] ---
        self.action_space = spaces.Box(
            low=-1.0, high=1.0, shape=(HummingbirdAgent.ACTION_SIZE,), dtype=np.float32
        )

        # --- Observation space ---
        # Последняя компонента: относительное расстояние, за пределами
        # области может быть больше 1
        low = np.full(HummingbirdAgent.OBSERVATION_SIZE, -1.0, dtype=np.float32)
        high = np.full(HummingbirdAgent.OBSERVATION_SIZE, 1.0, dtype=np.float32)
        low[-1] = 0.0
        high[-1] = np.inf
        self.observation_space = spaces.Box(low=low, high=high, dtype=np.float32)

        self._viewer = None

    @property
    def opponents(self) -> List[HummingbirdAgent]:
        return self.sim.agents[1:]

    def _get_info(self) -> dict:
        return {
            'nectar_obtained': self.agent.nectar_obtained,
            'episode_reward': self.agent.episode_reward,
            'nearest_flower': self.agent.tracker.index,
            'flowers_emptied': self.agent.flowers_emptied,
            'boundary_hits': self.agent.boundary_hits,
        }

    def reset(self, seed=None, options=None):
        """Сбросить среду и начать новый эпизод."""
        super().reset(seed=seed)
        # Вся случайность эпизода идёт от np_random среды
        self.rng.seed(int(self.np_random.integers(2 ** 31 - 1)))

        self.current_step = 0
        self.sim.reset()

        obs = self.agent.collect_observations()
        if self.render_mode == "human":
            self.render()
        return obs, self._get_info()

    def step(self, action):
        """Один шаг среды."""
        self.current_step += 1

        actions = [np.asarray(action, dtype=np.float32)]
        for opponent in self.opponents:
            actions.append(self.opponent_brain.decide_action(opponent.collect_observations(), opponent))

        self.sim.step(actions)

        reward = float(self.agent.consume_step_reward())
        for opponent in self.opponents:
            opponent.consume_step_reward()

        obs = self.agent.collect_observations()
        terminated = False
        truncated = self.max_steps > 0 and self.current_step >= self.max_steps

        if self.render_mode == "human":
            self.render()
        return obs, reward, terminated, truncated, self._get_info()

    def render(self):
        if self.render_mode != "human":
            return None
        if self._viewer is None:
            from ui.pygame_viewer import GardenViewer
            self._viewer = GardenViewer(self.sim)
        self._viewer.draw()
        self._viewer.tick(self.metadata["render_fps"])
        return None

    def close(self):
        if self._viewer is not None:
            self._viewer.close()
            self._viewer = None
