"""
Tests for configuration validation.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config


class TestConfigDefaults:
    """Test the default configuration."""

    def test_defaults_are_valid(self):
        config = Config()
        assert config.HIDDEN_LAYERS == [16]
        assert config.TRAIN_BATCH_SIZE < config.SAMPLE_SIZE <= config.MEMORY_SIZE
        assert config.EPSILON_END <= config.EPSILON_START

    def test_hidden_layers_not_shared(self):
        a = Config()
        b = Config()
        a.HIDDEN_LAYERS.append(8)
        assert b.HIDDEN_LAYERS == [16]


class TestConfigValidation:
    """Invalid values fail fast."""

    @pytest.mark.parametrize("overrides", [
        {'LEARNING_RATE': 0.0},
        {'Q_LEARNING_RATE': 1.5},
        {'GAMMA': 0.0},
        {'ACTION_SIZE': 1},
        {'MEMORY_SIZE': 1, 'SAMPLE_SIZE': 1},
        {'SAMPLE_SIZE': 200},
        {'TRAIN_BATCH_SIZE': 1},
        {'TRAIN_BATCH_SIZE': 64},
        {'TARGET_UPDATE': 0},
        {'EPSILON_START': 0.1, 'EPSILON_END': 0.5},
        {'EPSILON_DECAY_RATE': -0.1},
        {'MAX_STEPS_PER_EPISODE': 0},
        {'INIT_WEIGHT_RANGE': 0.0},
        {'HIDDEN_LAYERS': [8, 0]},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(AssertionError):
            Config(**overrides)
