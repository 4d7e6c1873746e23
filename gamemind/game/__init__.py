"""
Game Module
===========

Headless sample environments the agents can learn.

Classes:
    MazeEnvironment         - Grid maze for the tabular Q-learning agent
    MoveToTargetEnvironment - 1-D goal seeking for the deep Q-learning agent

Environment Registry:
    Use get_environment(name) to get an environment class by name
    Use list_environments() to get all available environments
    Use get_environment_info(name) to get metadata about an environment
"""

from typing import Any, Dict, List, Optional, Type

from .maze import MazeEnvironment
from .move_to_target import MoveToTargetEnvironment
from ..ai.environment import Environment


# =============================================================================
# ENVIRONMENT REGISTRY
# =============================================================================
# Maps environment names to their classes and metadata.
# To add a new environment:
#   1. Create the class inheriting from Environment or DiscreteEnvironment
#   2. Add an entry to ENVIRONMENT_REGISTRY below
#   3. The environment will automatically appear in the CLI

ENVIRONMENT_REGISTRY: Dict[str, Dict[str, Any]] = {
    'maze': {
        'class': MazeEnvironment,
        'name': 'Maze',
        'description': 'Reach the goal cell of a grid without hitting obstacles',
        'actions': MazeEnvironment.ACTIONS,
        'agent': 'tabular',
    },
    'move_to_target': {
        'class': MoveToTargetEnvironment,
        'name': 'Move To Target',
        'description': 'Walk left or right until the hidden goal is reached',
        'actions': MoveToTargetEnvironment.ACTIONS,
        'agent': 'deep',
    },
}


def get_environment(name: str) -> Optional[Type[Environment]]:
    """
    Get an environment class by name.

    Args:
        name: Environment identifier (e.g., 'maze', 'move_to_target')

    Returns:
        The environment class, or None if not found

    Example:
        >>> EnvClass = get_environment('maze')
        >>> env = EnvClass(5, 5)
    """
    entry = ENVIRONMENT_REGISTRY.get(name.lower())
    if entry:
        return entry['class']
    return None


def list_environments() -> List[str]:
    """Get a list of all available environment names."""
    return list(ENVIRONMENT_REGISTRY.keys())


def get_environment_info(name: str) -> Optional[Dict[str, Any]]:
    """
    Get metadata about an environment.

    Info includes:
        - name: Display name
        - description: Short description
        - actions: List of action names
        - agent: 'tabular' or 'deep'
    """
    entry = ENVIRONMENT_REGISTRY.get(name.lower())
    if entry:
        return {k: v for k, v in entry.items() if k != 'class'}
    return None


__all__ = [
    'MazeEnvironment',
    'MoveToTargetEnvironment',
    'ENVIRONMENT_REGISTRY',
    'get_environment',
    'list_environments',
    'get_environment_info',
]
