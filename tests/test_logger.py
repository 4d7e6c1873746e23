"""
Tests for the logging helpers.
"""

import logging

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamemind.utils import logger as logger_module
from gamemind.utils.logger import (
    LogLevel, get_log_path, get_logger, log_model_event, log_training_metrics, setup_logging
)


@pytest.fixture
def restore_logging():
    """Reset to console-only logging after the test."""
    yield
    setup_logging(level=LogLevel.INFO, file_output=False, force=True)


class TestGetLogger:
    """Test logger naming."""

    def test_namespaced(self):
        assert get_logger('training').name == 'gamemind.training'

    def test_module_name_not_doubled(self):
        assert get_logger('gamemind.nn.network').name == 'gamemind.nn.network'

    def test_auto_initialized(self):
        get_logger('anything')
        assert logger_module._initialized


class TestSetupLogging:
    """Test handler installation."""

    def test_file_output(self, tmp_path, restore_logging):
        setup_logging(log_dir=str(tmp_path), file_output=True, log_filename='run.log', force=True)
        get_logger('test').info("hello file")
        assert get_log_path() == tmp_path / 'run.log'
        for handler in logging.getLogger('gamemind').handlers:
            handler.flush()
        assert "hello file" in (tmp_path / 'run.log').read_text()

    def test_no_file_without_file_output(self, tmp_path, restore_logging):
        log_dir = tmp_path / 'logs'
        setup_logging(log_dir=str(log_dir), file_output=False, force=True)
        assert not log_dir.exists()
        assert get_log_path() is None

    def test_level(self, restore_logging):
        setup_logging(level=LogLevel.WARNING, file_output=False, force=True)
        assert logging.getLogger('gamemind').level == logging.WARNING

    def test_second_call_without_force_is_ignored(self, tmp_path, restore_logging):
        setup_logging(level=LogLevel.INFO, file_output=False, force=True)
        setup_logging(level=LogLevel.ERROR, file_output=False)
        assert logging.getLogger('gamemind').level == logging.INFO


class TestStructuredMessages:
    """Test the formatted helper messages."""

    def test_training_metrics(self, caplog):
        with caplog.at_level(logging.INFO, logger='gamemind'):
            log_training_metrics(episode=5, reward=1.5, epsilon=0.25, win_rate=0.5, steps=12)
        assert "ep=5 | reward=1.50 | eps=0.2500 | win=0.50 | steps=12" in caplog.text

    def test_training_metrics_with_loss(self, caplog):
        with caplog.at_level(logging.INFO, logger='gamemind'):
            log_training_metrics(episode=1, reward=0.0, epsilon=1.0, loss=0.125)
        assert "loss=0.125000" in caplog.text

    def test_model_event(self, caplog):
        with caplog.at_level(logging.INFO, logger='gamemind'):
            log_model_event('save', 'models/x.json', layers=3)
        assert "SAVE | models/x.json | layers=3" in caplog.text
