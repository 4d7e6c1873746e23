"""
gamemind
========

Neural networks and Q-learning agents for game AI, written on numpy.

Subpackages:
    nn    - Layers, networks, error functions and backpropagation
    ai    - Environments, replay buffer, tabular and deep Q-learning agents
    game  - Headless sample environments
    utils - Logging
"""

__version__ = '1.0.0'
