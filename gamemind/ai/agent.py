"""
Agent Base
==========

Episode loop shared by the tabular and the deep Q-learning agents.

Training Algorithm (per episode):
    1. Reset the environment, observe state s
    2. Choose action a (epsilon-greedy)
    3. next state s' = do_action(s, a)
    4. (reward, goal) = env.step(s, s')
    5. Learn from (s, a, reward, s', done)
    6. Repeat 2-5 until done or MAX_STEPS_PER_EPISODE
    7. Decay epsilon: END + (START - END) * exp(-DECAY_RATE * episode)

The loop is resumable. Everything it needs between steps (episode index,
step within the episode, current state, epsilon, running reward) is stored on
the agent, so a host can call :meth:`BaseAgent.step` once per frame, or
iterate :meth:`BaseAgent.train`, which yields after every episode.
"""

import math
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional

from config import Config

from .environment import Environment, S, check_action
from .metrics import EpisodeStats, TrainingMetrics
from ..exceptions import ConfigurationError
from ..utils.logger import get_logger, log_training_metrics


logger = get_logger(__name__)


@dataclass
class StepResult:
    """Outcome of a single training step."""
    action: int
    reward: float
    next_state: Any
    done: bool
    goal_achieved: bool
    explored: bool
    loss: Optional[float] = None
    episode_stats: Optional[EpisodeStats] = None


class BaseAgent(ABC, Generic[S]):
    """
    Epsilon-greedy agent driving an :class:`Environment`.

    Attributes:
        env: Environment judging transitions
        action_size: Number of possible actions
        do_action: Callable (state, action) -> next state
        epsilon: Current exploration rate
        episode: Index of the current (or next) episode
        metrics: Statistics of finished episodes
    """

    def __init__(
        self,
        env: Environment,
        do_action: Callable[[S, int], S],
        action_size: Optional[int] = None,
        config: Optional[Config] = None
    ):
        """
        Initialize the agent.

        Args:
            env: Environment instance
            do_action: Turns (state, action index) into the next state
            action_size: Number of possible actions (default: config.ACTION_SIZE)
            config: Configuration object
        """
        self.config = config or Config()

        if env is None:
            raise ConfigurationError("Environment is null!")
        if do_action is None:
            raise ConfigurationError("do_action is null!")

        self.action_size = action_size if action_size is not None else self.config.ACTION_SIZE
        if self.action_size < 2:
            raise ConfigurationError("Agent must have 2 or more actions.")

        self.env = env
        self.do_action = do_action

        # Exploration
        self.epsilon = self.config.EPSILON_START
        self.last_action_explored = False

        # Resumable loop state
        self.episode = 0
        self.episode_step = 0
        self.episode_reward = 0.0
        self.total_steps = 0
        self.state: Optional[S] = None
        self._episode_active = False
        self._episode_started_at = 0.0
        self._episode_losses: List[float] = []
        self._play_state: Optional[S] = None

        self.metrics = TrainingMetrics(self.config.HISTORY_LENGTH)

    # ------------------------------------------------------------------
    # Policy

    @abstractmethod
    def best_action(self, state: S) -> int:
        """Greedy action for ``state`` (first index on ties)."""

    def select_action(self, state: S, training: bool = True) -> int:
        """
        Select an action using the epsilon-greedy policy.

        Args:
            state: Current state
            training: If True, explore with probability epsilon; if False, act greedily

        Returns:
            Selected action index
        """
        if training and random.random() < self.epsilon:
            self.last_action_explored = True
            return random.randrange(self.action_size)

        self.last_action_explored = False
        return self.best_action(state)

    def decay_epsilon(self, episode: int) -> None:
        """Exponential decay from EPSILON_START towards EPSILON_END."""
        start, end = self.config.EPSILON_START, self.config.EPSILON_END
        self.epsilon = end + (start - end) * math.exp(-self.config.EPSILON_DECAY_RATE * episode)

    # ------------------------------------------------------------------
    # Learning hooks

    @abstractmethod
    def _learn_step(self, state: S, action: int, reward: float, next_state: S, done: bool) -> Optional[float]:
        """Learn from one transition. Returns a loss value if one was computed."""

    def is_terminal(self, state: S, next_state: S, goal_achieved: bool) -> bool:
        """Whether a transition ends the episode."""
        return goal_achieved or self.env.failed(state, next_state)

    # ------------------------------------------------------------------
    # Resumable training loop

    @property
    def is_finished(self) -> bool:
        """True once MAX_EPISODES episodes have been trained."""
        return self.episode >= self.config.MAX_EPISODES

    def _begin_episode(self) -> None:
        self.state = self.env.reset()
        self.episode_step = 0
        self.episode_reward = 0.0
        self._episode_losses = []
        self._episode_started_at = time.time()
        self._episode_active = True

    def step(self) -> StepResult:
        """
        Advance training by exactly one environment step.

        Starts a new episode when none is running. When the step ends the
        episode, epsilon is decayed and ``episode_stats`` is filled in.
        """
        if not self._episode_active:
            self._begin_episode()

        state = self.state
        action = self.select_action(state, training=True)
        check_action(action, self.action_size)
        explored = self.last_action_explored

        next_state = self.do_action(state, action)
        reward, goal_achieved = self.env.step(state, next_state)
        done = self.is_terminal(state, next_state, goal_achieved)

        loss = self._learn_step(state, action, reward, next_state, done)
        if loss is not None:
            self._episode_losses.append(loss)

        self.state = next_state
        self.episode_reward += reward
        self.episode_step += 1
        self.total_steps += 1

        stats = None
        if done or self.episode_step >= self.config.MAX_STEPS_PER_EPISODE:
            stats = self._end_episode(goal_achieved)

        return StepResult(
            action=action,
            reward=reward,
            next_state=next_state,
            done=done,
            goal_achieved=goal_achieved,
            explored=explored,
            loss=loss,
            episode_stats=stats,
        )

    def _end_episode(self, goal_achieved: bool) -> EpisodeStats:
        self.decay_epsilon(self.episode)

        avg_loss = None
        if self._episode_losses:
            avg_loss = sum(self._episode_losses) / len(self._episode_losses)

        stats = EpisodeStats(
            episode=self.episode,
            steps=self.episode_step,
            total_reward=self.episode_reward,
            epsilon=self.epsilon,
            won=goal_achieved,
            duration=time.time() - self._episode_started_at,
            avg_loss=avg_loss,
        )
        self.metrics.add(stats)
        self._log_progress(stats)

        self.episode += 1
        self._episode_active = False
        return stats

    def _log_progress(self, stats: EpisodeStats) -> None:
        log_every = self.config.LOG_EVERY
        if log_every <= 0 or stats.episode % log_every != 0:
            return
        window = max(1, log_every)
        losses = self.metrics.losses
        log_training_metrics(
            episode=stats.episode,
            reward=self.metrics.get_recent_average('rewards', window),
            epsilon=self.epsilon,
            loss=self.metrics.get_recent_average('losses', window) if losses else None,
            win_rate=self.metrics.get_win_rate(window),
            steps=stats.steps,
        )

    def run_episode(self) -> EpisodeStats:
        """Step until the current episode ends (starting one if needed)."""
        while True:
            result = self.step()
            if result.episode_stats is not None:
                return result.episode_stats

    def train(self, num_episodes: Optional[int] = None) -> Iterator[EpisodeStats]:
        """
        Train until ``num_episodes`` episodes are done (default: MAX_EPISODES).

        This is a generator that yields after every episode, so a host loop
        can interleave other work. Progress lives on the agent: abandoning
        the generator and calling train() again continues where it stopped.

        Example:
            >>> for stats in agent.train(500):
            ...     host.update()
        """
        target = num_episodes if num_episodes is not None else self.config.MAX_EPISODES
        started_at = time.time()
        total_reward = 0.0

        if self.episode < target:
            logger.info(
                f"Training {self.__class__.__name__} from episode {self.episode} to {target} "
                f"(actions={self.action_size}, epsilon={self.epsilon:.3f})"
            )

        while self.episode < target:
            stats = self.run_episode()
            total_reward += stats.total_reward
            yield stats

        logger.info(
            f"Training finished! Time: {time.time() - started_at:.1f}s | "
            f"Episodes: {self.episode} | Total reward: {total_reward:.2f} | "
            f"Win rate: {self.metrics.get_win_rate(100) * 100:.1f}%"
        )
        self._on_training_finished()

    def fit(self, num_episodes: Optional[int] = None) -> TrainingMetrics:
        """Run :meth:`train` to completion and return the collected metrics."""
        for _ in self.train(num_episodes):
            pass
        return self.metrics

    def _on_training_finished(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Greedy play

    def play_step(self) -> S:
        """
        Take one greedy step without learning.

        The environment is reset when the goal is reached or the transition
        is terminal.

        Returns:
            The state the agent ended up in
        """
        if self._play_state is None:
            self._play_state = self.env.reset()

        state = self._play_state
        next_state = self.do_action(state, self.select_action(state, training=False))
        _, goal_achieved = self.env.step(state, next_state)

        if self.is_terminal(state, next_state, goal_achieved):
            self._play_state = self.env.reset()
        else:
            self._play_state = next_state
        return next_state

    def evaluate(self, num_episodes: int = 10) -> Dict[str, float]:
        """
        Run greedy episodes without exploration or learning.

        Call between training episodes: the environment is reset.

        Returns:
            Dictionary with mean/max/min reward and win rate
        """
        rewards = []
        wins = 0

        for _ in range(num_episodes):
            state = self.env.reset()
            episode_reward = 0.0
            goal_achieved = False

            for _ in range(self.config.MAX_STEPS_PER_EPISODE):
                next_state = self.do_action(state, self.select_action(state, training=False))
                reward, goal_achieved = self.env.step(state, next_state)
                episode_reward += reward
                done = self.is_terminal(state, next_state, goal_achieved)
                state = next_state
                if done:
                    break

            rewards.append(episode_reward)
            if goal_achieved:
                wins += 1

        # The next training step must start from a fresh episode
        self._episode_active = False

        return {
            'mean_reward': sum(rewards) / len(rewards) if rewards else 0.0,
            'max_reward': max(rewards) if rewards else 0.0,
            'min_reward': min(rewards) if rewards else 0.0,
            'win_rate': wins / num_episodes if num_episodes else 0.0,
        }
