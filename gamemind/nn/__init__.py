"""
Neural Network Module
=====================

Feedforward neural networks trained with backpropagation, written on numpy.

Classes:
    Network          - Ordered stack of layers with forward propagation
    SimpleClassifier - Leaky ReLU hidden layers with a Softmax output
    Dense            - Fully-connected layer
    BackPropagation  - Per-sample and mini-batch gradient descent trainer
"""

from .activations import ActivationType, get_activation
from .layers import Layer, Dense
from .losses import mean_squared_error, get_loss
from .network import Network, SimpleClassifier, build_network
from .trainers import Trainer, BackPropagation

__all__ = [
    'ActivationType',
    'get_activation',
    'Layer',
    'Dense',
    'mean_squared_error',
    'get_loss',
    'Network',
    'SimpleClassifier',
    'build_network',
    'Trainer',
    'BackPropagation',
]
