"""
Layers
======

Fully-connected building blocks of a :class:`~gamemind.nn.network.Network`.

A layer stores its own activations, a weight matrix with one row per neuron
(row length = neuron count of the previous layer) and one bias per neuron.
The input layer has no weights or biases and always uses the identity
activation; its activations are set directly by the network.

Layers never reference each other. The owning network records the position
of each layer's predecessor in ``predecessor_index`` and passes that layer's
activations into :meth:`Layer.forward`.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type, Union

import numpy as np

from .activations import ActivationType, activation_type, get_activation
from ..exceptions import ConfigurationError


class Layer(ABC):
    """
    Interface every layer kind implements.

    Attributes:
        activations: Output vector of the last forward pass
        weights: (neurons, predecessor neurons) matrix, None for the input layer
        biases: One value per neuron, None for the input layer
        activation: Selected activation function kind
        predecessor_index: Position of the previous layer in the network
    """

    kind: str = ''

    def __init__(self, neurons: int, activation: Union[ActivationType, str] = ActivationType.LEAKY_RELU):
        if neurons <= 0:
            raise ConfigurationError(f"Layer must have more than 0 neurons, got {neurons}.")

        self.activations = np.zeros(neurons, dtype=np.float64)
        self.weights: Optional[np.ndarray] = None
        self.biases: Optional[np.ndarray] = None
        self.predecessor_index: Optional[int] = None
        self.is_input_layer = False
        self.activation = activation_type(activation)

    @property
    def activation(self) -> ActivationType:
        return self._activation

    @activation.setter
    def activation(self, kind: Union[ActivationType, str]) -> None:
        # Resolve the function once instead of on every forward pass
        self._activation = activation_type(kind)
        self._activation_fn = get_activation(self._activation)

    @property
    def neurons(self) -> int:
        return len(self.activations)

    def activate(self, values: np.ndarray, derivative: bool = False) -> np.ndarray:
        """Apply this layer's activation function (or its derivative)."""
        return self._activation_fn(values, derivative)

    @abstractmethod
    def initialize(
        self,
        predecessor_size: Optional[int],
        only_positive_weights: bool = False,
        weight_range: float = 1.0,
    ) -> None:
        """
        Allocate weights and biases.

        Args:
            predecessor_size: Neuron count of the previous layer (None for the input layer)
            only_positive_weights: Draw weights from [0, weight_range] instead of
                [-weight_range, weight_range]
            weight_range: Bound of the uniform weight distribution
        """

    @abstractmethod
    def forward(self, inputs: Optional[np.ndarray]) -> None:
        """Recompute ``activations`` from the previous layer's activations."""

    def set_activations(self, values: np.ndarray) -> None:
        """Overwrite the stored activations (used for the input layer)."""
        self.activations = np.array(values, dtype=np.float64)

    def parameter_count(self) -> int:
        if self.is_input_layer or self.weights is None:
            return 0
        return int(self.weights.size + self.biases.size)

    def copy(self) -> 'Layer':
        """Return a deep copy of this layer."""
        clone = self.__class__.__new__(self.__class__)
        clone.activations = self.activations.copy()
        clone.weights = None if self.weights is None else self.weights.copy()
        clone.biases = None if self.biases is None else self.biases.copy()
        clone.predecessor_index = self.predecessor_index
        clone.is_input_layer = self.is_input_layer
        clone.activation = self.activation
        return clone

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind,
            'activation': self.activation.value,
            'activations': self.activations.tolist(),
            'weights': None if self.weights is None else self.weights.tolist(),
            'biases': None if self.biases is None else self.biases.tolist(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Layer':
        """Rebuild a layer from :meth:`to_dict` output (predecessor is set by the network)."""
        layer_cls = LAYER_TYPES.get(data.get('type', 'dense'))
        if layer_cls is None:
            raise ConfigurationError(f"Unknown layer type {data.get('type')!r}.")

        activations = np.asarray(data['activations'], dtype=np.float64)
        layer = layer_cls(len(activations), data['activation'])
        layer.activations = activations
        if data.get('weights') is None:
            layer.is_input_layer = True
        else:
            layer.weights = np.asarray(data['weights'], dtype=np.float64).reshape(len(activations), -1)
            layer.biases = np.asarray(data['biases'], dtype=np.float64)
        return layer

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(neurons={self.neurons}, activation={self.activation.value!r})"


class Dense(Layer):
    """
    A layer where every neuron is connected to every neuron of the previous layer.

    Example:
        >>> hidden = Dense(8, 'leaky_relu')
        >>> output = Dense(2, ActivationType.SOFTMAX)
    """

    kind = 'dense'

    def initialize(
        self,
        predecessor_size: Optional[int],
        only_positive_weights: bool = False,
        weight_range: float = 1.0,
    ) -> None:
        self.is_input_layer = predecessor_size is None

        if self.is_input_layer:
            self.weights = None
            self.biases = None
            self.activation = ActivationType.IDENTITY
            return

        if predecessor_size <= 0:
            raise ConfigurationError(f"Previous layer must have more than 0 neurons, got {predecessor_size}.")

        low = 0.0 if only_positive_weights else -weight_range
        self.weights = np.random.uniform(low, weight_range, size=(self.neurons, predecessor_size))
        self.biases = np.zeros(self.neurons, dtype=np.float64)

    def forward(self, inputs: Optional[np.ndarray]) -> None:
        """activation(weights . inputs + biases)"""
        if self.is_input_layer:
            return

        sums = self.weights @ inputs + self.biases
        self.activations = self.activate(sums)


LAYER_TYPES: Dict[str, Type[Layer]] = {
    Dense.kind: Dense,
}


__all__ = ['Layer', 'Dense', 'LAYER_TYPES']
