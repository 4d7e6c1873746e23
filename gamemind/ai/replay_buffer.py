"""
Experience Replay Buffer
========================

A memory buffer that stores transitions for training the deep Q agent.

Why Experience Replay?
    1. Breaks correlation between consecutive transitions
       (Neural networks learn poorly from correlated data)

    2. Improves sample efficiency
       (Each transition can be used for multiple training steps)

How it works:
    1. Agent plays, stores (state, action, reward, next_state, done) tuples
    2. During training, random batches are drawn from the buffer (with replacement)
    3. Once the buffer is full, the write position wraps around and the
       oldest transition is overwritten

References:
    Mnih et al., 2015 - "Human-level control through deep reinforcement learning"
"""

from typing import List, Tuple

import numpy as np

from ..exceptions import ConfigurationError


Batch = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]


class ReplayBuffer:
    """
    Fixed-size ring buffer of transitions with contiguous numpy storage.

    Transition tuple: (state, action, reward, next_state, done)
        - state: State vector (np.ndarray)
        - action: Action taken (int)
        - reward: Reward received (float)
        - next_state: Resulting state (np.ndarray)
        - done: Whether the transition was terminal (bool)

    Storage arrays are allocated on the first push when ``state_size`` is 0.

    Example:
        >>> buffer = ReplayBuffer(capacity=100, sample_size=64)
        >>> buffer.push(state, action, reward, next_state, done)
        >>> if buffer.can_sample:
        ...     states, actions, rewards, next_states, dones = buffer.sample()
    """

    def __init__(self, capacity: int, sample_size: int, state_size: int = 0):
        """
        Initialize the replay buffer.

        Args:
            capacity: Maximum number of transitions to store
            sample_size: Number of transitions returned by sample()
            state_size: Size of state vector (auto-detected on first push if 0)
        """
        if capacity < 2:
            raise ConfigurationError("Capacity must be at least 2.")
        if sample_size < 1:
            raise ConfigurationError("Sample size must be at least 1.")

        self.capacity = capacity
        self.sample_size = sample_size
        self._state_size = state_size
        self._size = 0  # Current number of transitions stored
        self._position = 0  # Next write position
        self._initialized = False

        if state_size > 0:
            self._init_arrays(state_size)

    def _init_arrays(self, state_size: int) -> None:
        """Initialize contiguous storage arrays."""
        self._state_size = state_size
        self.states = np.empty((self.capacity, state_size), dtype=np.float64)
        self.actions = np.empty(self.capacity, dtype=np.int64)
        self.rewards = np.empty(self.capacity, dtype=np.float64)
        self.next_states = np.empty((self.capacity, state_size), dtype=np.float64)
        self.dones = np.empty(self.capacity, dtype=np.bool_)
        self._initialized = True

    def push(
        self,
        state: np.ndarray,
        action: int,
        reward: float,
        next_state: np.ndarray,
        done: bool
    ) -> None:
        """
        Add a transition to the buffer.

        When the buffer is full, the oldest transition is overwritten.
        """
        if not self._initialized:
            self._init_arrays(len(state))

        np.copyto(self.states[self._position], state)
        self.actions[self._position] = action
        self.rewards[self._position] = reward
        np.copyto(self.next_states[self._position], next_state)
        self.dones[self._position] = bool(done)

        self._position = (self._position + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    @property
    def can_sample(self) -> bool:
        """True once the buffer holds at least ``sample_size`` transitions."""
        return self._size >= self.sample_size

    def sample(self) -> Batch:
        """
        Draw ``sample_size`` transitions uniformly at random, with replacement.

        Returns:
            Tuple of numpy arrays: (states, actions, rewards, next_states, dones).
            All arrays are copies.

        Raises:
            RuntimeError: If fewer than ``sample_size`` transitions are stored
        """
        if not self.can_sample:
            raise RuntimeError(
                f"Cannot sample {self.sample_size} transitions from a buffer holding {self._size}."
            )

        indices = np.random.randint(0, self._size, size=self.sample_size)

        return (
            self.states[indices].copy(),
            self.actions[indices].copy(),
            self.rewards[indices].copy(),
            self.next_states[indices].copy(),
            self.dones[indices].copy()
        )

    def transitions(self) -> List[Tuple[np.ndarray, int, float, np.ndarray, bool]]:
        """Stored transitions from oldest to newest."""
        if self._size < self.capacity:
            order = range(self._size)
        else:
            order = [(self._position + i) % self.capacity for i in range(self.capacity)]
        return [
            (self.states[i].copy(), int(self.actions[i]), float(self.rewards[i]),
             self.next_states[i].copy(), bool(self.dones[i]))
            for i in order
        ]

    def __len__(self) -> int:
        """Return current buffer size."""
        return self._size

    def clear(self) -> None:
        """Clear all transitions from the buffer."""
        self._size = 0
        self._position = 0
