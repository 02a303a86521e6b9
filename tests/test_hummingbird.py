"""Tests for birds.hummingbird.HummingbirdAgent."""

import numpy as np
import pytest

from birds.hummingbird import HeuristicInput, HummingbirdAgent
from conftest import make_agent, place_beak
from garden.errors import AgentUsageWarning, UnknownNectarError
from garden.geometry import Quaternion, Vector3

LOOK_DOWN = Quaternion.euler(90.0, 0.0, 0.0)


def sip(agent, flower):
    """One beak contact with the flower's nectar."""
    return agent.on_resource_contact(flower.surface_id, agent.beak_tip)


class TestEpisode:

    def test_begin_episode_refills_flowers_in_training(self, agent, area):
        for flower in area.flowers:
            flower.feed(1.0)
        agent.begin_episode()
        assert area.total_nectar == pytest.approx(3.0)

    def test_begin_episode_resets_counters(self, agent, area):
        agent.nectar_obtained = 4.0
        agent.add_reward(2.0)
        agent.boundary_hits = 3
        agent.begin_episode()
        assert agent.nectar_obtained == 0.0
        assert agent.episode_reward == 0.0
        assert agent.consume_step_reward() == 0.0
        assert agent.boundary_hits == 0

    def test_begin_episode_spawns_at_free_spot(self, agent, world):
        for _ in range(10):
            agent.begin_episode()
            assert world.overlap_sphere(agent.position, 0.05, exclude=agent.body) == 0
            assert agent.body.velocity == Vector3.zero()
            assert agent.nearest_flower is not None

    def test_gameplay_always_spawns_in_front_of_flower(self, gameplay_agent, area):
        for _ in range(10):
            gameplay_agent.begin_episode()
            distance = min(f.position.distance_to(gameplay_agent.position) for f in area.flowers)
            assert distance <= 0.2 + 1e-9

    def test_gameplay_does_not_refill_flowers(self, gameplay_agent, area):
        area.flowers[0].feed(1.0)
        gameplay_agent.begin_episode()
        assert not area.flowers[0].has_nectar

    def test_shared_area_is_not_refilled_by_agent(self, agent, area):
        agent.owns_area = False
        area.flowers[0].feed(1.0)
        agent.begin_episode()
        assert not area.flowers[0].has_nectar

    def test_training_mixes_both_spawn_modes(self, agent, area):
        """Should sometimes start at a flower and sometimes in free flight."""
        near_flower = 0
        episodes = 100
        for _ in range(episodes):
            agent.begin_episode()
            distance = min(f.position.distance_to(agent.position) for f in area.flowers)
            if distance <= 0.2 + 1e-9:
                near_flower += 1
        assert 0 < near_flower < episodes

    def test_training_always_in_front_of_flower(self, agent, area):
        agent.config.front_spawn_probability = 1.0
        for _ in range(20):
            agent.begin_episode()
            distance = min(f.position.distance_to(agent.position) for f in area.flowers)
            assert distance <= 0.2 + 1e-9

    def test_training_always_free_roam(self, agent, area):
        """Should spawn in the free-flight band around the area center."""
        agent.config.front_spawn_probability = 0.0
        for _ in range(20):
            agent.begin_episode()
            offset = agent.position - area.center
            horizontal = Vector3(offset.x, 0.0, offset.z).magnitude()
            assert 2.0 - 1e-9 <= horizontal <= 7.0 + 1e-9
            assert 1.2 <= offset.y <= 2.5


class TestApplyAction:

    def test_pitch_never_exceeds_limit(self, gameplay_agent):
        for _ in range(500):
            gameplay_agent.apply_action([0, 0, 0, 1, 0])
            assert abs(gameplay_agent.pitch) <= 80.0 + 1e-6
        assert gameplay_agent.pitch == pytest.approx(80.0)

        for _ in range(500):
            gameplay_agent.apply_action([0, 0, 0, -1, 0])
        assert gameplay_agent.pitch == pytest.approx(-80.0)

    def test_yaw_is_unbounded(self, gameplay_agent):
        total_yaw = 0.0
        previous = gameplay_agent.rotation.euler_angles().y
        for _ in range(400):
            gameplay_agent.apply_action([0, 0, 0, 0, 1])
            current = gameplay_agent.rotation.euler_angles().y
            total_yaw += (current - previous + 180.0) % 360.0 - 180.0
            previous = current
        assert gameplay_agent.smooth_yaw_change == pytest.approx(1.0)
        # Больше полного оборота, pitch не меняется
        assert total_yaw > 360.0
        assert gameplay_agent.rotation.forward.y == pytest.approx(0.0, abs=1e-6)

    def test_rotation_changes_smoothly(self, gameplay_agent):
        gameplay_agent.apply_action([0, 0, 0, 1, -1])
        assert gameplay_agent.smooth_pitch_change == pytest.approx(0.04)
        assert gameplay_agent.smooth_yaw_change == pytest.approx(-0.04)

    def test_move_applies_force(self, gameplay_agent, world):
        gameplay_agent.body.teleport(Vector3(0, 3, 0), Quaternion.identity())
        gameplay_agent.apply_action([0, 0, 1, 0, 0])
        world.step(0.02)
        assert gameplay_agent.body.velocity.z > 0.0
        assert gameplay_agent.position.z > 0.0

    def test_out_of_range_action_is_clipped(self, gameplay_agent):
        gameplay_agent.apply_action([0, 0, 0, 50, 0])
        assert gameplay_agent.smooth_pitch_change == pytest.approx(0.04)

    def test_wrong_action_size_raises(self, gameplay_agent):
        with pytest.raises(ValueError):
            gameplay_agent.apply_action([0, 0, 0])

    def test_frozen_agent_ignores_actions(self, gameplay_agent, world):
        gameplay_agent.body.teleport(Vector3(0, 3, 0), Quaternion.identity())
        gameplay_agent.freeze()
        gameplay_agent.apply_action([1, 1, 1, 1, 1])
        world.step(0.02)
        assert gameplay_agent.position == Vector3(0, 3, 0)
        assert gameplay_agent.rotation.angle_to(Quaternion.identity()) == pytest.approx(0.0)


class TestObservations:

    def test_zero_vector_without_nectar(self, agent, area):
        for flower in area.flowers:
            flower.feed(1.0)
        agent.tracker.recompute(agent.beak_tip, area)
        obs = agent.collect_observations()
        assert obs.shape == (10,)
        assert obs.dtype == np.float32
        assert not obs.any()

    def test_observation_layout(self, agent, area):
        """Should encode direction, alignment and distance to the flower."""
        flower = area.flowers[0]
        place_beak(agent, flower.center_position + Vector3(0, 0.1, 0), LOOK_DOWN)
        agent.tracker.recompute(agent.beak_tip, area)

        obs = agent.collect_observations()
        assert np.linalg.norm(obs[0:4]) == pytest.approx(1.0, abs=1e-6)
        np.testing.assert_allclose(obs[4:7], [0.0, -1.0, 0.0], atol=1e-6)
        assert obs[7] == pytest.approx(1.0, abs=1e-6)
        assert obs[8] == pytest.approx(1.0, abs=1e-6)
        assert obs[9] == pytest.approx(0.1 / 20.0, abs=1e-6)

    def test_observation_bounds_after_random_flight(self, agent, seeded_rng):
        agent.begin_episode()
        for _ in range(200):
            action = [seeded_rng.uniform(-1, 1) for _ in range(5)]
            agent.apply_action(action)
            agent.body.integrate(0.02)
            obs = agent.collect_observations()
            assert np.all(obs[:9] >= -1.0) and np.all(obs[:9] <= 1.0)
            assert obs[9] >= 0.0


class TestNectarContact:

    def test_fifteen_sips(self, agent, area):
        flower = area.flowers[0]
        place_beak(agent, flower.center_position, LOOK_DOWN)
        agent.tracker.recompute(agent.beak_tip, area)

        received = sum(sip(agent, flower) for _ in range(15))

        assert received == pytest.approx(0.15)
        assert flower.nectar_amount == pytest.approx(0.85)
        assert agent.nectar_obtained == pytest.approx(0.15)
        # Клюв смотрит прямо в цветок: полная награда за каждый глоток
        assert agent.episode_reward == pytest.approx(15 * 0.03)
        assert agent.tracker.index == 0

    def test_sideways_sip_gets_base_reward(self, agent, area):
        flower = area.flowers[0]
        place_beak(agent, flower.center_position)
        sip(agent, flower)
        assert agent.consume_step_reward() == pytest.approx(0.01)
        assert agent.consume_step_reward() == 0.0

    def test_last_drop_depletes_and_retargets(self, agent, area):
        flower = area.flowers[1]
        flower.nectar_amount = 0.005
        place_beak(agent, flower.center_position, LOOK_DOWN)
        agent.tracker.recompute(agent.beak_tip, area)
        assert agent.tracker.index == 1

        assert sip(agent, flower) == pytest.approx(0.005)
        assert flower.nectar_amount == 0.0
        assert not flower.nectar_collider.enabled
        assert agent.flowers_emptied == 1
        assert agent.tracker.index == 0

    def test_contact_away_from_beak_is_ignored(self, agent, area):
        """Should only count contacts at the beak tip, not the body."""
        flower = area.flowers[0]
        place_beak(agent, flower.center_position, LOOK_DOWN)
        received = agent.on_resource_contact(flower.surface_id, agent.beak_tip + Vector3(0.01, 0, 0))
        assert received == 0.0
        assert flower.nectar_amount == 1.0
        assert agent.episode_reward == 0.0

    def test_unknown_surface_raises(self, agent):
        with pytest.raises(UnknownNectarError):
            agent.on_resource_contact("no-such-surface", agent.beak_tip)

    def test_gameplay_sip_gives_nectar_but_no_reward(self, gameplay_agent, area):
        flower = area.flowers[0]
        place_beak(gameplay_agent, flower.center_position, LOOK_DOWN)
        assert sip(gameplay_agent, flower) == pytest.approx(0.01)
        assert gameplay_agent.episode_reward == 0.0

    def test_physics_delivers_nectar_contacts(self, agent, area, world):
        flower = area.flowers[0]
        place_beak(agent, flower.center_position)
        world.step(0.02)
        assert flower.nectar_amount == pytest.approx(0.99)
        assert agent.consume_step_reward() == pytest.approx(0.01)


class TestBoundaryContact:

    def test_training_penalty(self, agent):
        agent.on_boundary_contact()
        assert agent.episode_reward == pytest.approx(-0.5)
        assert agent.boundary_hits == 1

    def test_no_penalty_in_gameplay(self, gameplay_agent):
        gameplay_agent.on_boundary_contact()
        assert gameplay_agent.episode_reward == 0.0
        assert gameplay_agent.boundary_hits == 1

    def test_wall_hit_through_physics(self, agent, world):
        agent.body.teleport(Vector3(9.5, 3, 0), Quaternion.identity())
        world.step(0.02)
        world.step(0.02)
        assert agent.episode_reward == pytest.approx(-0.5)


class TestFreeze:

    def test_freeze_in_training_warns(self, agent):
        with pytest.warns(AgentUsageWarning):
            agent.freeze()
        assert not agent.frozen
        assert not agent.body.is_sleeping

    def test_unfreeze_in_training_warns(self, agent):
        with pytest.warns(AgentUsageWarning):
            agent.unfreeze()

    def test_freeze_and_unfreeze_in_gameplay(self, gameplay_agent):
        gameplay_agent.freeze()
        assert gameplay_agent.frozen
        assert gameplay_agent.body.is_sleeping
        gameplay_agent.unfreeze()
        assert not gameplay_agent.frozen
        assert not gameplay_agent.body.is_sleeping


class TestHeuristic:

    def test_no_input_is_zero(self, agent):
        np.testing.assert_array_equal(agent.heuristic(HeuristicInput()), np.zeros(5))

    def test_forward(self, agent):
        action = agent.heuristic(HeuristicInput(forward=True))
        np.testing.assert_allclose(action, [0, 0, 1, 0, 0], atol=1e-6)

    def test_combined_translation_is_normalized(self, agent):
        action = agent.heuristic(HeuristicInput(forward=True, right=True, up=True))
        assert np.linalg.norm(action[:3]) == pytest.approx(1.0)
        assert action[0] > 0 and action[1] > 0 and action[2] > 0

    def test_left_uses_local_axes(self, agent):
        agent.body.rotation = Quaternion.euler(0.0, 90.0)
        action = agent.heuristic(HeuristicInput(left=True))
        np.testing.assert_allclose(action[:3], [0, 0, 1], atol=1e-6)

    def test_rotation_commands_are_discrete(self, agent):
        action = agent.heuristic(HeuristicInput(pitch_down=True, yaw_left=True))
        assert action[3] == -1.0
        assert action[4] == -1.0
        assert action.dtype == np.float32


class TestSharedFlowers:

    def test_other_agent_drains_cached_flower(self, area, world):
        """Should retarget on the next physics tick when a rival empties the flower."""
        first = make_agent(area, world, name="first")
        second = make_agent(area, world, name="second")
        flower = area.flowers[0]

        place_beak(first, flower.center_position, LOOK_DOWN)
        place_beak(second, flower.center_position + Vector3(0, 0.3, 0), LOOK_DOWN)
        second.tracker.recompute(second.beak_tip, area)
        assert second.tracker.index == 0

        flower.nectar_amount = 0.01
        sip(first, flower)
        assert second.tracker.index == 0

        second.fixed_update()
        assert second.tracker.index == 1

    def test_debug_line_targets_nearest_flower(self, agent, area):
        place_beak(agent, area.flowers[2].center_position + Vector3(0, 0.2, 0))
        agent.tracker.recompute(agent.beak_tip, area)
        start, end = agent.update()
        assert start.is_close(agent.beak_tip)
        assert end.is_close(area.flowers[2].center_position)

    def test_repr(self, agent):
        assert "hummingbird" in repr(agent)
        assert isinstance(agent, HummingbirdAgent)
