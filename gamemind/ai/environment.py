"""
Environment Interface
=====================

Abstract base classes that define what the Q-learning agents need from a
game. The environment judges transitions; it never moves anything itself.
Turning an action into the next state is the job of the ``do_action``
callable handed to the agent.

To add a new environment:
1. Create a new file in gamemind/game/
2. Inherit from Environment (vector states) or DiscreteEnvironment (integer states)
3. Implement all abstract methods
4. Register it in gamemind/game/__init__.py
"""

from abc import ABC, abstractmethod
from typing import Generic, Tuple, TypeVar

from ..exceptions import ActionOutOfRangeError


S = TypeVar('S')


class Environment(ABC, Generic[S]):
    """
    Abstract base class for environments.

    Methods:
        reset() -> state
            Reinitialize and return a starting state

        step(state, next_state) -> (reward, goal_achieved)
            Judge a transition. Defaults to reward() and achieved_goal().

        failed(state, next_state) -> bool
            Whether the transition ended the episode without reaching the goal
    """

    @abstractmethod
    def reset(self) -> S:
        """Reset the environment and return the starting state."""

    @abstractmethod
    def reward(self, state: S, next_state: S) -> float:
        """Reward for moving from ``state`` to ``next_state``."""

    @abstractmethod
    def achieved_goal(self, state: S, next_state: S) -> bool:
        """True if ``next_state`` reaches the goal."""

    @abstractmethod
    def failed(self, state: S, next_state: S) -> bool:
        """True if the transition is a failure (independent of the goal)."""

    def step(self, state: S, next_state: S) -> Tuple[float, bool]:
        """
        Judge one transition.

        Returns:
            Tuple of (reward, goal_achieved)
        """
        return self.reward(state, next_state), self.achieved_goal(state, next_state)

    def seed(self, seed: int) -> None:
        """Set random seed for reproducibility. Override if the environment has randomness."""
        pass


class DiscreteEnvironment(Environment[int]):
    """Environment whose states are integers in ``range(state_count)``."""

    @property
    @abstractmethod
    def state_count(self) -> int:
        """Total number of discrete states (sizes the Q-table)."""

    def in_range(self, state: int) -> bool:
        return 0 <= state < self.state_count


def check_action(action: int, action_size: int) -> None:
    """
    Raise if ``action`` is not a valid index for ``action_size`` actions.

    Raises:
        ActionOutOfRangeError: If the action does not exist
    """
    if not 0 <= action < action_size:
        raise ActionOutOfRangeError(action, action_size)
