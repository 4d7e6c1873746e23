"""
Maze Environment
================

Grid world for the tabular Q-learning agent.

The maze is ``width`` x ``height`` cells. Cell (x, y) has state index
``x + y * width``. The agent starts on a random free cell and must reach the
goal cell without stepping onto an obstacle or off the grid.

Actions:
    0 - FORWARD (y + 1)
    1 - BACK    (y - 1)
    2 - LEFT    (x - 1)
    3 - RIGHT   (x + 1)

Rewards:
    -10  for leaving the grid
    +10  for reaching the goal
    +0.1 when the state index gets closer to the goal's index
    -0.1 otherwise
"""

from typing import Iterable, Optional, Set, Tuple

import numpy as np

from ..ai.environment import DiscreteEnvironment
from ..exceptions import ActionOutOfRangeError, ConfigurationError


OFF_GRID = -1


class MazeEnvironment(DiscreteEnvironment):
    """
    Headless maze with obstacle cells and a single goal.

    Example:
        >>> env = MazeEnvironment(4, 4, obstacles=[5, 6], goal=15)
        >>> agent = QAgent(env, env.move, action_size=4)
    """

    ACTIONS = ['FORWARD', 'BACK', 'LEFT', 'RIGHT']
    ACTION_SIZE = 4

    REWARD_OFF_GRID = -10.0
    REWARD_GOAL = 10.0
    REWARD_CLOSER = 0.1
    REWARD_FARTHER = -0.1

    def __init__(
        self,
        width: int = 5,
        height: int = 5,
        obstacles: Iterable[int] = (),
        goal: Optional[int] = None
    ):
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Maze must be at least 1x1, got {width}x{height}.")

        self.width = width
        self.height = height
        self.goal = self.state_count - 1 if goal is None else goal
        self.obstacles: Set[int] = set(obstacles)

        if not self.in_range(self.goal):
            raise ConfigurationError(f"Goal {self.goal} is outside the maze.")
        if self.goal in self.obstacles:
            raise ConfigurationError("Goal cell cannot be an obstacle.")
        if any(not self.in_range(cell) for cell in self.obstacles):
            raise ConfigurationError("Obstacle outside the maze.")
        if len(self.obstacles) + 1 >= self.state_count:
            raise ConfigurationError("Maze has no free starting cell.")

    @property
    def state_count(self) -> int:
        return self.width * self.height

    def pos_to_state(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return OFF_GRID
        return x + y * self.width

    def state_to_pos(self, state: int) -> Tuple[int, int]:
        return state % self.width, state // self.width

    def move(self, state: int, action: int) -> int:
        """
        Apply an action to a state.

        Returns:
            The next state, or -1 when the move leaves the grid

        Raises:
            ActionOutOfRangeError: If action is not 0-3
        """
        x, y = self.state_to_pos(state)
        if action == 0:
            y += 1
        elif action == 1:
            y -= 1
        elif action == 2:
            x -= 1
        elif action == 3:
            x += 1
        else:
            raise ActionOutOfRangeError(action, self.ACTION_SIZE)
        return self.pos_to_state(x, y)

    # ------------------------------------------------------------------
    # Environment interface

    def reset(self) -> int:
        """Pick a random cell that is neither the goal nor an obstacle."""
        while True:
            state = int(np.random.randint(0, self.state_count))
            if state != self.goal and state not in self.obstacles:
                return state

    def reward(self, state: int, next_state: int) -> float:
        if not self.in_range(next_state):
            return self.REWARD_OFF_GRID
        if next_state == self.goal:
            return self.REWARD_GOAL
        if abs(next_state - self.goal) < abs(state - self.goal):
            return self.REWARD_CLOSER
        return self.REWARD_FARTHER

    def achieved_goal(self, state: int, next_state: int) -> bool:
        return next_state == self.goal

    def failed(self, state: int, next_state: int) -> bool:
        return next_state in self.obstacles

    def seed(self, seed: int) -> None:
        """Set random seed for reproducibility."""
        np.random.seed(seed)

    def render_text(self, agent_state: Optional[int] = None) -> str:
        """
        ASCII picture of the maze, top row first.

        ``A`` agent, ``G`` goal, ``#`` obstacle, ``.`` free cell.
        """
        rows = []
        for y in reversed(range(self.height)):
            cells = []
            for x in range(self.width):
                state = self.pos_to_state(x, y)
                if state == agent_state:
                    cells.append('A')
                elif state == self.goal:
                    cells.append('G')
                elif state in self.obstacles:
                    cells.append('#')
                else:
                    cells.append('.')
            rows.append(' '.join(cells))
        return '\n'.join(rows)
