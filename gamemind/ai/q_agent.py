"""
Tabular Q-Learning Agent
========================

Q-learning over a discrete state space, with one table row per state.

Update rule (Bellman):
    Q(s, a) ← Q(s, a) + lr * (r + γ * max_a' Q(s', a') - Q(s, a))

When s' lies outside the table (the agent walked off the board) the future
term is dropped and the transition ends the episode.

Example:
    >>> env = MazeEnvironment(4, 4, goal=15)
    >>> agent = QAgent(env, env.move, action_size=4)
    >>> agent.fit(1000)
    >>> agent.play_step()
"""

from typing import Callable, Optional

import numpy as np

from config import Config

from .agent import BaseAgent
from .environment import DiscreteEnvironment, check_action
from ..exceptions import ConfigurationError
from ..utils.logger import get_logger


logger = get_logger(__name__)


class QAgent(BaseAgent[int]):
    """
    Epsilon-greedy tabular Q-learning agent.

    Attributes:
        q_table: Array of shape (state_count, action_size), zero-initialized
        learning_rate: Step size of the Bellman update (config.Q_LEARNING_RATE)
        gamma: Discount factor
    """

    def __init__(
        self,
        env: DiscreteEnvironment,
        do_action: Callable[[int, int], int],
        action_size: Optional[int] = None,
        config: Optional[Config] = None
    ):
        super().__init__(env, do_action, action_size, config)

        self.state_count = env.state_count
        if self.state_count <= 0:
            raise ConfigurationError("Environment must have at least one state.")

        self.learning_rate = self.config.Q_LEARNING_RATE
        self.gamma = self.config.GAMMA
        self.q_table = np.zeros((self.state_count, self.action_size), dtype=np.float64)

    def out_of_range(self, state: int) -> bool:
        return not 0 <= state < self.state_count

    def best_action(self, state: int) -> int:
        return int(np.argmax(self.q_table[state]))

    def best_value(self, state: int) -> float:
        """Highest Q-value of ``state``."""
        return float(np.max(self.q_table[state]))

    def update(self, state: int, action: int, reward: float, next_state: int) -> float:
        """
        Apply one Bellman update to Q[state][action].

        Returns:
            The new Q-value
        """
        check_action(action, self.action_size)

        target = reward
        if not self.out_of_range(next_state):
            target += self.gamma * self.best_value(next_state)

        current = self.q_table[state, action]
        self.q_table[state, action] = current + self.learning_rate * (target - current)
        return float(self.q_table[state, action])

    def is_terminal(self, state: int, next_state: int, goal_achieved: bool) -> bool:
        return goal_achieved or self.out_of_range(next_state) or self.env.failed(state, next_state)

    def _learn_step(self, state: int, action: int, reward: float, next_state: int, done: bool) -> None:
        self.update(state, action, reward, next_state)
        return None

    def format_q_table(self, precision: int = 2) -> str:
        """Render the table, one row per state."""
        header = "state | " + " ".join(f"a{a:<{precision + 5}}" for a in range(self.action_size))
        rows = [header]
        for state, values in enumerate(self.q_table):
            cells = " ".join(f"{v:>{precision + 6}.{precision}f}" for v in values)
            rows.append(f"{state:>5} | {cells}")
        return "\n".join(rows)

    def _on_training_finished(self) -> None:
        logger.debug("Q-table:\n" + self.format_q_table())
