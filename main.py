#!/usr/bin/env python3
"""
gamemind - Q-Learning and Neural Networks for Game AI
=====================================================

Headless command line front end.

Usage:
    python main.py                              Train the tabular agent on the maze
    python main.py --env move_to_target         Train the deep Q agent
    python main.py --env xor --episodes 2000    Fit a small network to XOR
    python main.py --inspect models/deep_q.json Print a saved network's structure

Environments:
    maze            Tabular Q-learning on a 5x5 grid with obstacles
    move_to_target  Deep Q-learning, walk towards a hidden goal on a line
    xor             Supervised backpropagation on the XOR truth table
"""

import argparse
import os
import random
import sys
import time
from typing import List, Optional, Tuple

import numpy as np

from config import Config
from gamemind import __version__
from gamemind.ai import DeepQAgent, QAgent
from gamemind.ai.agent import BaseAgent
from gamemind.game import MazeEnvironment, MoveToTargetEnvironment, get_environment_info, list_environments
from gamemind.nn import BackPropagation, Network, build_network, mean_squared_error
from gamemind.utils import LogLevel, get_logger, setup_logging


logger = get_logger('main')

# Obstacles of the default 5x5 maze (state = x + y * 5), goal in the top right corner
DEFAULT_MAZE_OBSTACLES = [6, 7, 8, 16, 17]

XOR_INPUTS: List[List[float]] = [[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]]
XOR_EXPECTED: List[List[float]] = [[0.0], [1.0], [0.0], [1.0]]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    choices = list_environments() + ['xor']

    parser = argparse.ArgumentParser(
        description="gamemind - Train Q-learning agents and small neural networks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
EXAMPLES
========

    python main.py --env maze --episodes 2000
    python main.py --env move_to_target --episodes 300 --save models/move.json
    python main.py --env move_to_target --load models/move.json --episodes 50
    python main.py --inspect models/move.json

AVAILABLE ENVIRONMENTS: {', '.join(choices)}
        """
    )

    parser.add_argument(
        '--env', type=str, default='maze', choices=choices,
        help='Environment (or dataset) to train on (default: maze)'
    )
    parser.add_argument(
        '--episodes', type=int, default=None,
        help='Training episodes, or epochs for xor (default: config.MAX_EPISODES)'
    )
    parser.add_argument(
        '--max-steps', type=int, default=None,
        help='Maximum steps per episode'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducibility'
    )

    # Model options
    parser.add_argument(
        '--save', type=str, default=None, metavar='MODEL_PATH',
        help='Save the trained network to this JSON file'
    )
    parser.add_argument(
        '--load', type=str, default=None, metavar='MODEL_PATH',
        help='Load network weights before training'
    )
    parser.add_argument(
        '--inspect', type=str, default=None, metavar='MODEL_PATH',
        help='Print the structure of a saved network and exit'
    )

    # Logging
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=[level.name for level in LogLevel],
        help='Logging verbosity (default: config.LOG_LEVEL)'
    )
    parser.add_argument(
        '--no-log-file', action='store_true',
        help='Log to the console only'
    )

    return parser.parse_args(argv)


def inspect_model(filepath: str) -> bool:
    """Print a saved network's structure. Returns False if it cannot be read."""
    if not os.path.exists(filepath):
        print(f"Model file not found: {filepath}")
        return False

    network = Network.from_file(filepath)
    size_kb = os.path.getsize(filepath) / 1024

    print("\n" + "=" * 60)
    print(f"Model Inspection: {os.path.basename(filepath)}")
    print("=" * 60)
    print(f"   File Size:  {size_kb:.1f} KB")
    print(f"   Layers:     {network!r}")
    print(f"   Parameters: {network.parameter_count():,}\n")
    print(network.summary())
    print("=" * 60 + "\n")
    return True


def build_agent(env_name: str, config: Config) -> Tuple[BaseAgent, object]:
    """Create the environment and the agent that learns it."""
    if env_name == 'maze':
        env = MazeEnvironment(5, 5, obstacles=DEFAULT_MAZE_OBSTACLES)
        config.ACTION_SIZE = MazeEnvironment.ACTION_SIZE
        return QAgent(env, env.move, MazeEnvironment.ACTION_SIZE, config), env

    env = MoveToTargetEnvironment()
    config.ACTION_SIZE = MoveToTargetEnvironment.ACTION_SIZE
    agent = DeepQAgent(
        env, env.move, MoveToTargetEnvironment.ACTION_SIZE, config,
        state_size=MoveToTargetEnvironment.STATE_SIZE
    )
    return agent, env


def run_agent(args: argparse.Namespace, config: Config) -> BaseAgent:
    """Train an agent headless, then report a greedy evaluation."""
    agent, env = build_agent(args.env, config)
    info = get_environment_info(args.env)
    logger.info(f"Environment: {info['name']} - {info['description']}")

    if isinstance(agent, DeepQAgent):
        if args.load:
            agent.load(args.load)
    elif args.load or args.save:
        logger.warning("The maze agent keeps a Q-table; --load/--save only apply to networks")

    episodes = args.episodes if args.episodes is not None else config.MAX_EPISODES
    try:
        for _ in agent.train(episodes):
            pass
    except KeyboardInterrupt:
        logger.warning(f"Training interrupted at episode {agent.episode}")

    results = agent.evaluate(num_episodes=20)
    logger.info(
        f"Greedy evaluation: win rate {results['win_rate'] * 100:.1f}% | "
        f"mean reward {results['mean_reward']:.2f}"
    )

    if isinstance(agent, QAgent):
        logger.info("Learned maze policy start:\n" + env.render_text(env.reset()))
    elif args.save:
        agent.save(args.save)

    return agent


def run_xor(args: argparse.Namespace, config: Config) -> Network:
    """Fit a small network to the XOR truth table."""
    sizes = [2] + list(config.HIDDEN_LAYERS) + [1]
    activations = ['identity'] + [config.HIDDEN_ACTIVATION] * len(config.HIDDEN_LAYERS) + ['sigmoid']

    if args.load and os.path.exists(args.load):
        network = Network.from_file(args.load)
    else:
        network = build_network(sizes, activations)
        network.initialize(config.ONLY_POSITIVE_WEIGHTS, config.INIT_WEIGHT_RANGE)
    logger.info("\n" + network.summary())

    epochs = args.episodes if args.episodes is not None else 2000
    trainer = BackPropagation(network, mean_squared_error, config.LEARNING_RATE)

    start = time.time()
    errors = trainer.train(XOR_INPUTS, XOR_EXPECTED, epochs)
    logger.info(f"XOR: {epochs} epochs in {time.time() - start:.2f}s | final error {errors[-1]:.4f}")

    for inputs, expected in zip(XOR_INPUTS, XOR_EXPECTED):
        output = network.predict(inputs)
        logger.info(f"Input: {inputs[0]:.0f} {inputs[1]:.0f}, Output: {output[0]:.2f}, Expected: {expected[0]:.0f}")

    if args.save:
        network.save(args.save)
    return network


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.inspect:
        return 0 if inspect_model(args.inspect) else 1

    config = Config()
    if args.max_steps is not None:
        config.MAX_STEPS_PER_EPISODE = args.max_steps
    if args.log_level:
        config.LOG_LEVEL = args.log_level

    setup_logging(
        log_dir=config.LOG_DIR,
        level=LogLevel[config.LOG_LEVEL],
        file_output=not args.no_log_file,
        force=True,
    )
    logger.info(f"gamemind {__version__}")

    # Set seed if specified
    if args.seed is not None:
        np.random.seed(args.seed)
        random.seed(args.seed)
        config.SEED = args.seed

    if args.env == 'xor':
        run_xor(args, config)
    else:
        run_agent(args, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
