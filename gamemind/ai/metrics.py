"""
Training Metrics
================

Per-episode statistics collected by the agents' training loops.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

import numpy as np


@dataclass
class EpisodeStats:
    """Statistics for a single episode."""
    episode: int
    steps: int
    total_reward: float
    epsilon: float
    won: bool
    duration: float
    avg_loss: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TrainingMetrics:
    """
    Tracks episode statistics over time.

    Metrics tracked:
        - Total rewards
        - Steps per episode
        - Epsilon values
        - Goal reached (wins)
        - Loss values (deep Q only)
        - Episode durations
    """

    def __init__(self, history_length: int = 1000):
        """
        Initialize metrics tracker.

        Args:
            history_length: Maximum history to store
        """
        self.history_length = history_length
        self.episodes_recorded = 0

        self.rewards: List[float] = []
        self.steps: List[int] = []
        self.epsilons: List[float] = []
        self.wins: List[bool] = []
        self.losses: List[float] = []
        self.durations: List[float] = []

    def add(self, stats: EpisodeStats) -> None:
        """Add episode statistics."""
        self.episodes_recorded += 1
        self.rewards.append(stats.total_reward)
        self.steps.append(stats.steps)
        self.epsilons.append(stats.epsilon)
        self.wins.append(stats.won)
        self.durations.append(stats.duration)
        if stats.avg_loss is not None:
            self.losses.append(stats.avg_loss)

        # Trim to history length
        for attr in ['rewards', 'steps', 'epsilons', 'wins', 'losses', 'durations']:
            values = getattr(self, attr)
            if len(values) > self.history_length:
                setattr(self, attr, values[-self.history_length:])

    def get_recent_average(self, metric: str, n: int = 100) -> float:
        """Get average of last n values for a metric."""
        values = getattr(self, metric, [])
        if not values:
            return 0.0
        return float(np.mean(values[-n:]))

    def get_best_reward(self) -> float:
        """Get the highest episode reward achieved."""
        return max(self.rewards) if self.rewards else 0.0

    def get_win_rate(self, n: int = 100) -> float:
        """Get fraction of the last n episodes that reached the goal."""
        if not self.wins:
            return 0.0
        recent = self.wins[-n:]
        return sum(recent) / len(recent)
