"""
Move-To-Target Environment
==========================

One-dimensional task for the deep Q-learning agent.

The agent starts at x = 0 and the goal sits on a random non-zero integer in
[-20, 20). The agent only observes which side the goal is on:

    [0, 1]  goal is to the right (or under the agent)
    [1, 0]  goal is to the left

Actions:
    0 - RIGHT (x + 1)
    1 - LEFT  (x - 1)

Rewards:
    +1   for reaching the goal
    +0.1 when the distance to the goal did not grow
    -0.1 otherwise

The episode fails once the agent wanders more than 30 cells from the origin.
"""

from typing import List

import numpy as np

from ..ai.environment import Environment
from ..exceptions import ActionOutOfRangeError


class MoveToTargetEnvironment(Environment[List[float]]):
    """
    Headless 1-D goal seeking.

    Example:
        >>> env = MoveToTargetEnvironment()
        >>> agent = DeepQAgent(env, env.move, action_size=2, state_size=2)
    """

    ACTIONS = ['RIGHT', 'LEFT']
    ACTION_SIZE = 2
    STATE_SIZE = 2

    GOAL_RANGE = 20
    FAIL_DISTANCE = 30

    REWARD_GOAL = 1.0
    REWARD_CLOSER = 0.1
    REWARD_FARTHER = -0.1

    def __init__(self):
        self.x = 0
        self.goal = 1
        self.last_x = 0

    def get_state(self, x: int) -> List[float]:
        if self.goal - x >= 0:
            return [0.0, 1.0]
        return [1.0, 0.0]

    def move(self, state: List[float], action: int) -> List[float]:
        """
        Move the agent one cell and observe the new state.

        Raises:
            ActionOutOfRangeError: If action is not 0 or 1
        """
        if action == 0:
            self.x += 1
        elif action == 1:
            self.x -= 1
        else:
            raise ActionOutOfRangeError(action, self.ACTION_SIZE)
        return self.get_state(self.x)

    # ------------------------------------------------------------------
    # Environment interface

    def reset(self) -> List[float]:
        self.x = 0
        self.last_x = 0
        self.goal = 0
        while self.goal == 0:
            self.goal = int(np.random.randint(-self.GOAL_RANGE, self.GOAL_RANGE))
        return self.get_state(self.x)

    def reward(self, state: List[float], next_state: List[float]) -> float:
        if self.achieved_goal(state, next_state):
            return self.REWARD_GOAL

        dist_delta = abs(self.last_x - self.goal) - abs(self.x - self.goal)
        self.last_x = self.x

        if dist_delta >= 0:
            return self.REWARD_CLOSER
        return self.REWARD_FARTHER

    def achieved_goal(self, state: List[float], next_state: List[float]) -> bool:
        return self.x == self.goal

    def failed(self, state: List[float], next_state: List[float]) -> bool:
        return abs(self.x) > self.FAIL_DISTANCE

    def seed(self, seed: int) -> None:
        """Set random seed for reproducibility."""
        np.random.seed(seed)
