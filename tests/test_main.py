"""
Tests for the command line entry point.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamemind.nn.network import Network
from gamemind.utils.logger import LogLevel, setup_logging
import main


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging(level=LogLevel.INFO, file_output=False, force=True)


class TestParseArgs:
    """Test argument parsing."""

    def test_defaults(self):
        args = main.parse_args([])
        assert args.env == 'maze'
        assert args.episodes is None
        assert not args.no_log_file

    def test_unknown_environment(self):
        with pytest.raises(SystemExit):
            main.parse_args(['--env', 'chess'])


class TestMain:
    """Run the CLI end to end on tiny budgets."""

    def test_xor_save_and_inspect(self, tmp_path, capsys):
        path = str(tmp_path / "xor.json")
        assert main.main(['--env', 'xor', '--episodes', '20', '--no-log-file', '--seed', '1', '--save', path]) == 0
        assert Network.from_file(path).output_size == 1

        assert main.main(['--inspect', path]) == 0
        assert "Model Structure:" in capsys.readouterr().out

    def test_inspect_missing(self, tmp_path):
        assert main.main(['--inspect', str(tmp_path / "nope.json")]) == 1

    def test_maze(self):
        assert main.main(['--env', 'maze', '--episodes', '5', '--max-steps', '20', '--no-log-file']) == 0

    def test_move_to_target_save(self, tmp_path):
        path = str(tmp_path / "move.json")
        args = ['--env', 'move_to_target', '--episodes', '3', '--max-steps', '30', '--no-log-file', '--save', path]
        assert main.main(args) == 0
        assert os.path.exists(path)
