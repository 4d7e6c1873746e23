"""
Tests for the sample environments and the environment registry.

These tests verify:
    - Maze state mapping, movement, rewards and failure
    - Move-to-target state encoding, rewards and failure
    - Action range checks
    - Registry lookups
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamemind.ai.environment import check_action
from gamemind.exceptions import ActionOutOfRangeError, ConfigurationError
from gamemind.game import (
    MazeEnvironment, MoveToTargetEnvironment,
    get_environment, get_environment_info, list_environments
)


@pytest.fixture
def maze():
    """3x3 maze, goal in the top right corner, one obstacle in the middle."""
    return MazeEnvironment(3, 3, obstacles=[4], goal=8)


@pytest.fixture
def line():
    env = MoveToTargetEnvironment()
    env.reset()
    env.goal = 3
    return env


class TestMazeLayout:
    """Test maze construction and state mapping."""

    def test_state_count(self, maze):
        assert maze.state_count == 9

    def test_state_mapping_round_trip(self, maze):
        for state in range(maze.state_count):
            assert maze.pos_to_state(*maze.state_to_pos(state)) == state

    def test_default_goal_is_last_cell(self):
        assert MazeEnvironment(4, 2).goal == 7

    def test_goal_on_obstacle_rejected(self):
        with pytest.raises(ConfigurationError):
            MazeEnvironment(3, 3, obstacles=[8], goal=8)

    def test_goal_outside_rejected(self):
        with pytest.raises(ConfigurationError):
            MazeEnvironment(3, 3, goal=9)

    def test_render_text(self, maze):
        assert maze.render_text(agent_state=0).splitlines() == [
            ". . G",
            ". # .",
            "A . .",
        ]


class TestMazeMovement:
    """Test the action mapping."""

    @pytest.mark.parametrize("action,expected", [(0, 7), (1, 1), (2, 3), (3, 5)])
    def test_moves_from_centre(self, maze, action, expected):
        assert maze.move(4, action) == expected

    @pytest.mark.parametrize("state,action", [(6, 0), (0, 1), (3, 2), (5, 3)])
    def test_leaving_grid_returns_off_grid(self, maze, state, action):
        """Moving off any edge yields -1, including left/right edges."""
        assert maze.move(state, action) == -1

    def test_invalid_action(self, maze):
        with pytest.raises(ActionOutOfRangeError):
            maze.move(0, 4)


class TestMazeRewards:
    """Test rewards and terminal checks."""

    def test_off_grid_penalty(self, maze):
        assert maze.reward(2, -1) == -10.0

    def test_goal_reward(self, maze):
        assert maze.reward(5, 8) == 10.0
        assert maze.achieved_goal(5, 8)

    def test_closer_reward(self, maze):
        assert maze.reward(3, 6) == pytest.approx(0.1)

    def test_farther_penalty(self, maze):
        assert maze.reward(3, 0) == pytest.approx(-0.1)

    def test_step_combines_reward_and_goal(self, maze):
        assert maze.step(7, 8) == (10.0, True)

    def test_obstacle_fails(self, maze):
        assert maze.failed(3, 4)
        assert not maze.failed(3, 6)

    def test_reset_avoids_goal_and_obstacles(self, maze):
        for _ in range(100):
            state = maze.reset()
            assert state not in (4, 8)
            assert 0 <= state < 9


class TestMoveToTarget:
    """Test the 1-D environment."""

    def test_reset(self):
        env = MoveToTargetEnvironment()
        for _ in range(100):
            env.reset()
            assert env.x == 0
            assert env.goal != 0
            assert -20 <= env.goal < 20

    def test_state_encoding(self, line):
        assert line.get_state(0) == [0.0, 1.0]
        assert line.get_state(3) == [0.0, 1.0]
        assert line.get_state(5) == [1.0, 0.0]

    def test_move(self, line):
        assert line.move(None, 0) == [0.0, 1.0]
        assert line.x == 1
        line.move(None, 1)
        assert line.x == 0

    def test_invalid_action(self, line):
        with pytest.raises(ActionOutOfRangeError):
            line.move(None, 2)

    def test_rewards(self, line):
        line.move(None, 0)
        assert line.reward(None, None) == pytest.approx(0.1)
        line.move(None, 1)
        assert line.reward(None, None) == pytest.approx(-0.1)

    def test_goal(self, line):
        for _ in range(3):
            state = line.move(None, 0)
        assert line.step(None, state) == (1.0, True)

    def test_failed_beyond_thirty(self, line):
        line.x = 30
        assert not line.failed(None, None)
        line.x = 31
        assert line.failed(None, None)
        line.x = -31
        assert line.failed(None, None)


class TestActionCheck:
    """Test the shared action range check."""

    def test_valid(self):
        check_action(1, 2)

    @pytest.mark.parametrize("action", [-1, 2])
    def test_invalid(self, action):
        with pytest.raises(ActionOutOfRangeError) as exc:
            check_action(action, 2)
        assert "0..1" in str(exc.value)


class TestEnvironmentRegistry:
    """Test registry lookups."""

    def test_list(self):
        assert list_environments() == ['maze', 'move_to_target']

    def test_get(self):
        assert get_environment('maze') is MazeEnvironment
        assert get_environment('MOVE_TO_TARGET') is MoveToTargetEnvironment

    def test_unknown(self):
        assert get_environment('chess') is None
        assert get_environment_info('chess') is None

    def test_info_has_no_class(self):
        info = get_environment_info('maze')
        assert 'class' not in info
        assert info['actions'] == ['FORWARD', 'BACK', 'LEFT', 'RIGHT']
