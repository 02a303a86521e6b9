"""Tests for ai.brain, ai.rl_brain and ai.reward."""

import numpy as np
import pytest

from ai.brain import GreedyBrain, HeuristicBrain, IdleBrain, create_brain
from ai.reward import RewardCalculator
from ai.rl_brain import RLBrain
from birds.hummingbird import HeuristicInput
from conftest import place_beak
from garden.geometry import Quaternion, Vector3


class TestRewardCalculator:

    def test_aligned_sip(self):
        reward = RewardCalculator.nectar_reward(Vector3(0, -1, 0), Vector3(0, 1, 0))
        assert reward == pytest.approx(0.03)

    def test_backwards_sip_gets_only_base(self):
        """Should clamp negative alignment to zero bonus."""
        reward = RewardCalculator.nectar_reward(Vector3(0, 1, 0), Vector3(0, 1, 0))
        assert reward == pytest.approx(0.01)

    def test_partial_alignment(self):
        forward = Vector3(0, -1, 1).normalize()
        reward = RewardCalculator.nectar_reward(forward, Vector3(0, 1, 0))
        assert reward == pytest.approx(0.01 + 0.02 * (2 ** -0.5))

    def test_boundary_penalty(self):
        assert RewardCalculator.boundary_penalty() == -0.5


class TestSimpleBrains:

    def test_idle(self):
        action = IdleBrain().decide_action(np.zeros(10))
        np.testing.assert_array_equal(action, np.zeros(5))

    def test_heuristic_reads_input_source(self, agent):
        brain = HeuristicBrain(lambda: HeuristicInput(forward=True, yaw_right=True))
        action = brain.decide_action(agent.collect_observations(), agent)
        np.testing.assert_allclose(action, [0, 0, 1, 0, 1], atol=1e-6)

    def test_heuristic_without_agent_idles(self):
        brain = HeuristicBrain(HeuristicInput)
        assert not brain.decide_action(np.zeros(10)).any()


class TestGreedyBrain:

    def test_no_agent_no_action(self):
        assert not GreedyBrain().decide_action(np.zeros(10)).any()

    def test_no_flower_no_action(self, agent, area):
        for flower in area.flowers:
            flower.feed(1.0)
        assert not GreedyBrain().decide_action(np.zeros(10), agent).any()

    def test_actions_in_range(self, agent, area):
        brain = GreedyBrain()
        agent.begin_episode()
        for _ in range(100):
            action = brain.decide_action(agent.collect_observations(), agent)
            assert action.shape == (5,)
            assert np.all(np.abs(action) <= 1.0 + 1e-6)
            agent.apply_action(action)
            agent.body.integrate(0.02)

    def test_heads_toward_approach_point(self, agent, area):
        """Should fly toward the flower and tip the nose down to it."""
        flower = area.flowers[0]
        place_beak(agent, flower.center_position + Vector3(0, 1.0, 0), Quaternion.identity())
        agent.tracker.recompute(agent.beak_tip, area)
        action = GreedyBrain().decide_action(agent.collect_observations(), agent)
        assert action[1] < 0.0
        assert action[3] > 0.0


class TestCreateBrain:

    def test_known_types(self):
        assert isinstance(create_brain("greedy"), GreedyBrain)
        assert isinstance(create_brain("idle"), IdleBrain)
        assert isinstance(create_brain("heuristic", input_source=HeuristicInput), HeuristicBrain)

    def test_heuristic_needs_input(self):
        with pytest.raises(ValueError):
            create_brain("heuristic")

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            create_brain("telepathic")

    def test_rl_without_model_idles(self, tmp_path):
        brain = create_brain("rl", model_path=str(tmp_path / "missing.zip"))
        assert isinstance(brain, RLBrain)
        assert brain.model is None
        assert not brain.decide_action(np.zeros(10, dtype=np.float32)).any()
