"""
Deep Q-Learning Agent
=====================

Q-learning where a neural network replaces the table.

Key Components:
    1. Policy Network: Selects actions and is trained every step
    2. Target Network: Frozen copy used for the future term of the target
    3. Replay Buffer: Ring buffer of past transitions, sampled with replacement

Target for a sampled transition (s, a, r, s', done):
    y = policy(s) with y[a] replaced by
        r                              if done
        r + γ * max_a' target(s')[a']  otherwise

The target network is replaced by a deep copy of the policy network after
every TARGET_UPDATE terminal transitions.

References:
    Mnih et al., 2015 - "Human-level control through deep reinforcement learning"
"""

import os
from collections import deque
from typing import Callable, Optional, Sequence

import numpy as np

from config import Config

from .agent import BaseAgent
from .environment import Environment
from .replay_buffer import ReplayBuffer
from ..exceptions import ConfigurationError
from ..nn.losses import mean_squared_error
from ..nn.network import Network, build_network
from ..nn.trainers import BackPropagation
from ..utils.logger import get_logger


logger = get_logger(__name__)

State = Sequence[float]


class DeepQAgent(BaseAgent[State]):
    """
    Deep Q-learning agent with experience replay and a target network.

    Attributes:
        policy_net: Network being trained
        target_net: Periodically synced copy of policy_net
        trainer: Backpropagation trainer bound to policy_net
        memory: Replay buffer
        target_update_counter: Terminal transitions since the last sync
    """

    def __init__(
        self,
        env: Environment,
        do_action: Callable[[State, int], State],
        action_size: Optional[int] = None,
        config: Optional[Config] = None,
        network: Optional[Network] = None,
        state_size: Optional[int] = None
    ):
        """
        Initialize the agent.

        Args:
            env: Environment instance
            do_action: Turns (state vector, action index) into the next state vector
            action_size: Number of possible actions (default: config.ACTION_SIZE)
            config: Configuration object
            network: Policy network to train. Built from config.HIDDEN_LAYERS
                when omitted, which requires ``state_size``.
            state_size: Length of the state vector
        """
        super().__init__(env, do_action, action_size, config)

        if network is None:
            if state_size is None or state_size <= 0:
                raise ConfigurationError("state_size is required when no network is given.")
            network = self._build_network(state_size)
        elif network.layers[-1].weights is None:
            network.initialize(self.config.ONLY_POSITIVE_WEIGHTS, self.config.INIT_WEIGHT_RANGE)

        if network.output_size != self.action_size:
            raise ConfigurationError(
                f"Network output length ({network.output_size}) must equal the action count ({self.action_size})."
            )

        self.state_size = network.input_size
        self.gamma = self.config.GAMMA

        self.policy_net = network
        self.target_net = network.copy()
        self.trainer = BackPropagation(self.policy_net, mean_squared_error, self.config.LEARNING_RATE)
        self.memory = ReplayBuffer(self.config.MEMORY_SIZE, self.config.SAMPLE_SIZE, self.state_size)

        self.target_update_counter = 0
        self.target_updates = 0
        self.losses: deque = deque(maxlen=10000)

        logger.info(
            f"Deep Q agent: {self.policy_net!r} | parameters={self.policy_net.parameter_count()} | "
            f"memory={self.config.MEMORY_SIZE} | sample={self.config.SAMPLE_SIZE}"
        )

    def _build_network(self, state_size: int) -> Network:
        hidden = list(self.config.HIDDEN_LAYERS)
        sizes = [state_size] + hidden + [self.action_size]
        activations = (
            ['identity']
            + [self.config.HIDDEN_ACTIVATION] * len(hidden)
            + [self.config.OUTPUT_ACTIVATION]
        )
        network = build_network(sizes, activations)
        network.initialize(self.config.ONLY_POSITIVE_WEIGHTS, self.config.INIT_WEIGHT_RANGE)
        return network

    # ------------------------------------------------------------------
    # Policy

    def q_values(self, state: State) -> np.ndarray:
        """Policy network output for ``state`` (a copy)."""
        return self.policy_net.predict(state)

    def best_action(self, state: State) -> int:
        return int(np.argmax(self.policy_net.forward(state)))

    # ------------------------------------------------------------------
    # Learning

    def remember(self, state: State, action: int, reward: float, next_state: State, done: bool) -> None:
        """Store a transition in the replay buffer."""
        self.memory.push(
            np.asarray(state, dtype=np.float64),
            action,
            reward,
            np.asarray(next_state, dtype=np.float64),
            done
        )

    def learn(self, terminal: bool) -> Optional[float]:
        """
        Train the policy network on one sampled batch.

        Does nothing until the buffer holds SAMPLE_SIZE transitions.

        Args:
            terminal: Whether the transition just stored ended an episode

        Returns:
            Mean squared error of the pass, or None if skipped
        """
        if not self.memory.can_sample:
            return None

        states, actions, rewards, next_states, dones = self.memory.sample()

        targets = []
        for state, action, reward, next_state, done in zip(states, actions, rewards, next_states, dones):
            target = self.policy_net.forward(state).copy()
            if done:
                target[action] = reward
            else:
                target[action] = reward + self.gamma * float(np.max(self.target_net.forward(next_state)))
            targets.append(target)

        loss = self.trainer.train_batches_once(states, targets, self.config.TRAIN_BATCH_SIZE)
        self.losses.append(loss)

        if terminal:
            self.target_update_counter += 1
            if self.target_update_counter >= self.config.TARGET_UPDATE:
                self.update_target_network()

        return loss

    def update_target_network(self) -> None:
        """Replace the target network with a copy of the policy network."""
        self.target_net = self.policy_net.copy()
        self.target_update_counter = 0
        self.target_updates += 1
        logger.debug(f"Target network synced (#{self.target_updates}, episode {self.episode})")

    def _learn_step(self, state: State, action: int, reward: float, next_state: State, done: bool) -> Optional[float]:
        self.remember(state, action, reward, next_state, done)
        return self.learn(done)

    def get_average_loss(self, n: int = 100) -> float:
        """Average of the last n losses."""
        if not self.losses:
            return 0.0
        recent = list(self.losses)[-n:]
        return sum(recent) / len(recent)

    # ------------------------------------------------------------------
    # Persistence

    def save(self, filepath: Optional[str] = None) -> str:
        """
        Save the policy network as JSON.

        Args:
            filepath: Target file (default: <MODEL_DIR>/deep_q.json)

        Returns:
            The path written
        """
        filepath = filepath or os.path.join(self.config.MODEL_DIR, 'deep_q.json')
        self.policy_net.save(filepath)
        return filepath

    def load(self, filepath: str) -> bool:
        """
        Load policy weights and sync the target network.

        Returns:
            False if the file does not exist
        """
        loaded = Network.from_file(filepath) if os.path.exists(filepath) else None
        if loaded is None:
            logger.warning(f"Model file not found: {filepath}")
            return False

        if loaded.input_size != self.state_size or loaded.output_size != self.action_size:
            raise ConfigurationError(
                f"Model {filepath} has shape {loaded.input_size}→{loaded.output_size}, "
                f"expected {self.state_size}→{self.action_size}."
            )

        self.policy_net.layers = loaded.layers
        self.update_target_network()
        return True
