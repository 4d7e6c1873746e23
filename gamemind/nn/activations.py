"""
Activation Functions
====================

Every activation takes a vector and a ``derivative`` flag and returns a new
vector of the same length.

Derivative mode expects the vector to already hold the function's *output*
(the layer's stored activations), so backpropagation never needs the
pre-activation sums:

    sigmoid'(x) = y * (1 - y)      where y = sigmoid(x)
    tanh'(x)    = 1 - y**2

Identity and BinaryStep are special: Identity's derivative is all ones (it is
meant for the input layer passthrough) and BinaryStep's derivative is all
zeros, so networks using it cannot be trained by backpropagation.
"""

from enum import Enum
from typing import Callable, Dict, Union

import numpy as np


ActivationFn = Callable[..., np.ndarray]

LEAKY_RELU_SLOPE = 0.05


class ActivationType(Enum):
    """Selector for the available activation functions (persisted by value)."""
    IDENTITY = 'identity'
    BINARY_STEP = 'binary_step'
    RELU = 'relu'
    LEAKY_RELU = 'leaky_relu'
    SWISH = 'swish'
    SIGMOID = 'sigmoid'
    TANH = 'tanh'
    SOFTMAX = 'softmax'


def _sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


def identity(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """Return the input unchanged (derivative: ones)."""
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return np.ones_like(values)
    return values.copy()


def binary_step(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """0 for negative inputs, 1 otherwise. Not usable for backpropagation."""
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return np.zeros_like(values)
    return np.where(values < 0.0, 0.0, 1.0)


def relu(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """Rectified linear unit."""
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return (values > 0.0).astype(np.float64)
    return np.maximum(values, 0.0)


def leaky_relu(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """ReLU with a small slope for negative inputs."""
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return np.where(values > 0.0, 1.0, LEAKY_RELU_SLOPE)
    return np.maximum(LEAKY_RELU_SLOPE * values, values)


def swish(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """
    Self-gated activation x * sigmoid(x).

    The exact derivative needs the pre-activation x, which is not stored, so
    the activated value stands in for it: y + sigmoid(y) * (1 - y). This is
    exact in the limit of large positive inputs where y approaches x.
    """
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return values + _sigmoid(values) * (1.0 - values)
    return values * _sigmoid(values)


def sigmoid(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """Logistic function."""
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return values * (1.0 - values)
    return _sigmoid(values)


def tanh(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """Hyperbolic tangent."""
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return 1.0 - np.square(values)
    return np.tanh(values)


def softmax(values: np.ndarray, derivative: bool = False) -> np.ndarray:
    """
    Normalized exponential over the whole vector.

    The derivative is the diagonal of the Jacobian, y * (1 - y).
    """
    values = np.asarray(values, dtype=np.float64)
    if derivative:
        return values * (1.0 - values)
    shifted = np.exp(values - np.max(values))
    return shifted / np.sum(shifted)


ACTIVATIONS: Dict[ActivationType, ActivationFn] = {
    ActivationType.IDENTITY: identity,
    ActivationType.BINARY_STEP: binary_step,
    ActivationType.RELU: relu,
    ActivationType.LEAKY_RELU: leaky_relu,
    ActivationType.SWISH: swish,
    ActivationType.SIGMOID: sigmoid,
    ActivationType.TANH: tanh,
    ActivationType.SOFTMAX: softmax,
}


def activation_type(kind: Union[ActivationType, str]) -> ActivationType:
    """
    Resolve an activation selector from an enum member or its name.

    Accepts 'leaky_relu', 'LeakyReLU', 'LEAKY_RELU', etc.

    Raises:
        KeyError: If no activation has that name
    """
    if isinstance(kind, ActivationType):
        return kind
    key = str(kind).strip().lower().replace('-', '_')
    try:
        return ActivationType(key)
    except ValueError:
        pass
    aliases = {t.value.replace('_', ''): t for t in ActivationType}
    compact = key.replace('_', '')
    if compact in aliases:
        return aliases[compact]
    available = ", ".join(t.value for t in ActivationType)
    raise KeyError(f"Unknown activation {kind!r}. Available activations: {available}")


def get_activation(kind: Union[ActivationType, str]) -> ActivationFn:
    """Return the activation function for a selector or name."""
    return ACTIVATIONS[activation_type(kind)]


__all__ = [
    'ActivationType',
    'ACTIVATIONS',
    'LEAKY_RELU_SLOPE',
    'activation_type',
    'get_activation',
    'identity',
    'binary_step',
    'relu',
    'leaky_relu',
    'swish',
    'sigmoid',
    'tanh',
    'softmax',
]
