"""
AI Module
=========

Q-learning agents and the pieces they are built from.

Classes:
    Environment         - What an agent needs from a game
    DiscreteEnvironment - Environment with integer states (Q-table rows)
    QAgent              - Tabular Q-learning
    DeepQAgent          - Deep Q-learning with replay and a target network
    ReplayBuffer        - Ring buffer of transitions
    TrainingMetrics     - Per-episode statistics
"""

from .environment import Environment, DiscreteEnvironment, check_action
from .replay_buffer import ReplayBuffer
from .metrics import EpisodeStats, TrainingMetrics
from .agent import BaseAgent, StepResult
from .q_agent import QAgent
from .deep_q_agent import DeepQAgent

__all__ = [
    'Environment',
    'DiscreteEnvironment',
    'check_action',
    'ReplayBuffer',
    'EpisodeStats',
    'TrainingMetrics',
    'BaseAgent',
    'StepResult',
    'QAgent',
    'DeepQAgent',
]
