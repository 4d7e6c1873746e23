"""
Configuration file for gamemind
===============================

All hyperparameters for the neural network and the Q-learning agents are
centralized here. Modify these values to experiment with different training
configurations.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.LEARNING_RATE)
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Neural Network - Architecture and weight initialization
    2. Training - Learning hyperparameters (tabular and deep)
    3. Exploration - Epsilon-greedy settings
    4. Training Control - Episode budget and logging cadence
    5. System - Paths, logging and seeding
    """

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Hidden layer sizes for the deep Q policy network.
    # Input size comes from the environment state, output size from ACTION_SIZE.
    HIDDEN_LAYERS: List[int] = field(default_factory=lambda: [16])

    # Activation functions: 'identity', 'binary_step', 'relu', 'leaky_relu',
    # 'swish', 'sigmoid', 'tanh', 'softmax'
    HIDDEN_ACTIVATION: str = 'leaky_relu'
    OUTPUT_ACTIVATION: str = 'leaky_relu'

    # Weights are drawn uniformly from [-INIT_WEIGHT_RANGE, INIT_WEIGHT_RANGE]
    # (or [0, INIT_WEIGHT_RANGE] when ONLY_POSITIVE_WEIGHTS is set)
    INIT_WEIGHT_RANGE: float = 1.0
    ONLY_POSITIVE_WEIGHTS: bool = False

    # =========================================================================
    # TRAINING HYPERPARAMETERS
    # =========================================================================

    # Gradient descent step size for the policy network
    LEARNING_RATE: float = 0.05

    # Step size of the tabular Bellman update
    # Q[s][a] += Q_LEARNING_RATE * (r + GAMMA * max Q[s'] - Q[s][a])
    Q_LEARNING_RATE: float = 0.5

    # Discount factor (gamma) - How much to value future rewards
    GAMMA: float = 0.99

    # Number of possible actions (network output size / Q-table width)
    ACTION_SIZE: int = 2

    # Replay buffer capacity (oldest transitions are overwritten when full)
    MEMORY_SIZE: int = 100

    # Transitions drawn (with replacement) from the buffer per learning step.
    # Learning is skipped until the buffer holds at least this many.
    SAMPLE_SIZE: int = 64

    # Window size used when training the policy network on a sampled batch
    TRAIN_BATCH_SIZE: int = 4

    # Copy policy network into target network every N terminal transitions
    TARGET_UPDATE: int = 6

    # =========================================================================
    # EXPLORATION SETTINGS (Epsilon-Greedy)
    # =========================================================================

    # Exploration rate starts at EPSILON_START and decays towards EPSILON_END:
    # eps = END + (START - END) * exp(-EPSILON_DECAY_RATE * episode)
    EPSILON_START: float = 1.0
    EPSILON_END: float = 0.01
    EPSILON_DECAY_RATE: float = 0.001

    # =========================================================================
    # TRAINING CONTROL
    # =========================================================================

    # Total episodes to train
    MAX_EPISODES: int = 10000

    # Maximum steps per episode (prevents endless episodes)
    MAX_STEPS_PER_EPISODE: int = 100

    # Log progress every N episodes
    LOG_EVERY: int = 100

    # Episodes kept in the metrics history
    HISTORY_LENGTH: int = 1000

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    # Paths
    MODEL_DIR: str = 'models'
    LOG_DIR: str = 'logs'

    # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
    LOG_LEVEL: str = 'INFO'

    # Random seed for reproducibility (None for random)
    SEED: Optional[int] = None

    def __post_init__(self):
        """Validation."""
        assert self.LEARNING_RATE > 0, "Learning rate must be positive"
        assert 0 < self.Q_LEARNING_RATE <= 1, "Q learning rate must be in (0, 1]"
        assert 0 < self.GAMMA <= 1, "Gamma must be in (0, 1]"
        assert self.ACTION_SIZE >= 2, "Agent must have 2 or more actions"
        assert self.MEMORY_SIZE >= 2, "Memory size must be at least 2"
        assert 0 < self.SAMPLE_SIZE <= self.MEMORY_SIZE, "Sample size must be in (0, MEMORY_SIZE]"
        assert 2 <= self.TRAIN_BATCH_SIZE < self.SAMPLE_SIZE, \
            "Train batch size must be at least 2 and smaller than SAMPLE_SIZE"
        assert self.TARGET_UPDATE > 0, "Target update interval must be positive"
        assert 0 <= self.EPSILON_END <= self.EPSILON_START <= 1, \
            "Epsilon must satisfy 0 <= end <= start <= 1"
        assert self.EPSILON_DECAY_RATE >= 0, "Epsilon decay rate must be non-negative"
        assert self.MAX_STEPS_PER_EPISODE > 0, "Max steps per episode must be positive"
        assert self.INIT_WEIGHT_RANGE > 0, "Weight range must be positive"
        assert all(n > 0 for n in self.HIDDEN_LAYERS), "Hidden layer sizes must be positive"


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("gamemind - Configuration Summary")
    print("=" * 60)
    print("\nNeural Network:")
    print(f"   Hidden layers: {cfg.HIDDEN_LAYERS} ({cfg.HIDDEN_ACTIVATION})")
    print(f"   Output activation: {cfg.OUTPUT_ACTIVATION}")
    print("\nTraining:")
    print(f"   Learning rate: {cfg.LEARNING_RATE} (table: {cfg.Q_LEARNING_RATE})")
    print(f"   Gamma: {cfg.GAMMA}")
    print(f"   Memory: {cfg.MEMORY_SIZE}, sample {cfg.SAMPLE_SIZE}")
    print("\nExploration:")
    print(f"   Epsilon: {cfg.EPSILON_START} -> {cfg.EPSILON_END}")
    print(f"   Decay rate: {cfg.EPSILON_DECAY_RATE}")
    print("=" * 60)
