"""
Sequential Network
==================

An ordered stack of layers evaluated front to back.

    Input layer → Hidden layers → Output layer

The network owns every layer. Each non-input layer reads the activations of
the layer at ``predecessor_index`` (always the one directly before it).

Lifecycle:
    1. Construct with at least two layers
    2. initialize()  - allocate random weights and zero biases
    3. forward(x)    - run as often as needed; activations are overwritten in place

Example:
    >>> net = Network([Dense(2), Dense(3, 'leaky_relu'), Dense(1, 'sigmoid')])
    >>> net.initialize()
    >>> net.forward([0.0, 1.0])
"""

import json
import os
import threading
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from .activations import ActivationType
from .layers import Dense, Layer
from ..exceptions import ConfigurationError, InputContractError
from ..utils.logger import get_logger, log_model_event


logger = get_logger(__name__)

FORMAT_VERSION = 1


class Network:
    """
    Feedforward neural network.

    Attributes:
        layers: Ordered layers; index 0 is the input layer
    """

    def __init__(self, layers: Sequence[Layer]):
        layers = list(layers)
        if len(layers) < 2:
            raise ConfigurationError(
                f"Neural network has {len(layers)} layer(s). There must be at least 2 layers."
            )
        self.layers: List[Layer] = layers

    # ------------------------------------------------------------------
    # Structure

    @property
    def input_size(self) -> int:
        return self.layers[0].neurons

    @property
    def output_size(self) -> int:
        return self.layers[-1].neurons

    def initialize(self, only_positive_weights: bool = False, weight_range: float = 1.0) -> None:
        """
        Initialize all layers, linking each to the one before it.

        Args:
            only_positive_weights: Draw weights from [0, weight_range]
            weight_range: Bound of the uniform weight distribution
        """
        for index, layer in enumerate(self.layers):
            if index == 0:
                layer.predecessor_index = None
                layer.initialize(None, only_positive_weights, weight_range)
            else:
                layer.predecessor_index = index - 1
                layer.initialize(self.layers[index - 1].neurons, only_positive_weights, weight_range)

    def predecessor(self, layer: Layer) -> Optional[Layer]:
        """Return the layer feeding ``layer`` (None for the input layer)."""
        if layer.predecessor_index is None:
            return None
        return self.layers[layer.predecessor_index]

    def parameter_count(self) -> int:
        return sum(layer.parameter_count() for layer in self.layers)

    # ------------------------------------------------------------------
    # Forward pass

    def check_input(self, inputs: Optional[Sequence[float]]) -> np.ndarray:
        """
        Validate an input vector.

        Returns:
            The input as a 1-D float array

        Raises:
            InputContractError: If the input is None or its length differs from
                the input layer's neuron count
        """
        if inputs is None:
            raise InputContractError("Input is null.")

        values = np.asarray(inputs, dtype=np.float64).reshape(-1)
        if len(values) != self.input_size:
            raise InputContractError(
                f"The input has not the right length. Input length: {len(values)} Expected: {self.input_size}"
            )
        return values

    def forward(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Run the network on one input vector.

        The returned array is the output layer's activation storage; it is
        replaced by the next forward pass, so copy it if it must be kept.
        """
        values = self.check_input(inputs)
        if self.layers[-1].weights is None:
            raise ConfigurationError("Network is not initialized. Call initialize() first.")

        self.layers[0].set_activations(values)
        for layer in self.layers:
            previous = self.predecessor(layer)
            layer.forward(None if previous is None else previous.activations)

        return self.layers[-1].activations

    def predict(self, inputs: Sequence[float]) -> np.ndarray:
        """Forward pass returning a copy of the output."""
        return self.forward(inputs).copy()

    # ------------------------------------------------------------------
    # Copying and persistence

    def copy(self) -> 'Network':
        """Deep copy with predecessor links rebuilt by position."""
        clone = Network([layer.copy() for layer in self.layers])
        clone._link_layers()
        return clone

    def _link_layers(self) -> None:
        for index, layer in enumerate(self.layers):
            layer.predecessor_index = index - 1 if index > 0 else None
            layer.is_input_layer = index == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'format_version': FORMAT_VERSION,
            'layers': [layer.to_dict() for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Network':
        network = cls([Layer.from_dict(layer) for layer in data['layers']])
        network._link_layers()
        for index, layer in enumerate(network.layers[1:], start=1):
            expected = network.layers[index - 1].neurons
            if layer.weights is None or layer.weights.shape[1] != expected:
                raise ConfigurationError(
                    f"Layer {index} weights do not match the previous layer ({expected} neurons)."
                )
        return network

    def save(self, filepath: str) -> None:
        """Write the layers to a JSON file."""
        _write_json(filepath, self.to_dict())
        log_model_event('save', filepath, layers=len(self.layers), parameters=self.parameter_count())

    def save_async(self, filepath: str) -> threading.Thread:
        """
        Save on a background thread.

        The layers are snapshotted before the thread starts, so training may
        continue while the file is written. Join the returned thread to wait.
        """
        snapshot = self.to_dict()
        parameters = self.parameter_count()

        def _write() -> None:
            _write_json(filepath, snapshot)
            log_model_event('save', filepath, layers=len(snapshot['layers']), parameters=parameters)

        thread = threading.Thread(target=_write, name='network-save', daemon=True)
        thread.start()
        return thread

    def load(self, filepath: str) -> bool:
        """
        Replace this network's layers with the ones stored in ``filepath``.

        Returns:
            False if the file does not exist, True otherwise
        """
        if not os.path.exists(filepath):
            logger.warning(f"Model file not found: {filepath}")
            return False

        with open(filepath, 'r', encoding='utf-8') as f:
            loaded = Network.from_dict(json.load(f))
        self.layers = loaded.layers
        log_model_event('load', filepath, layers=len(self.layers), parameters=self.parameter_count())
        return True

    @classmethod
    def from_file(cls, filepath: str) -> 'Network':
        """Load a network from a JSON file written by :meth:`save`."""
        with open(filepath, 'r', encoding='utf-8') as f:
            network = cls.from_dict(json.load(f))
        log_model_event('load', filepath, layers=len(network.layers), parameters=network.parameter_count())
        return network

    # ------------------------------------------------------------------
    # Reporting

    def summary(self) -> str:
        """Model structure report: totals followed by one block per layer."""
        total_weights = 0
        total_biases = 0
        blocks = []
        for index, layer in enumerate(self.layers):
            weights = 0 if layer.weights is None else int(layer.weights.size)
            biases = 0 if layer.biases is None else int(layer.biases.size)
            total_weights += weights
            total_biases += biases
            blocks.append(
                f"Layer {index}:\n"
                f"    Neurons: {layer.neurons}\n"
                f"    Activation: {layer.activation.value}\n"
                f"    Total Variables: {weights + biases}\n"
                f"    Weights: {weights}\n"
                f"    Biases: {biases}"
            )
        header = (
            "Model Structure:\n"
            f"    Total Weights: {total_weights}\n"
            f"    Total Biases: {total_biases}"
        )
        return "\n\n".join([header] + blocks)

    def __repr__(self) -> str:
        sizes = " → ".join(str(layer.neurons) for layer in self.layers)
        return f"Network({sizes})"


class SimpleClassifier(Network):
    """
    Network with Leaky ReLU hidden layers and a Softmax output layer.

    Example:
        >>> clf = SimpleClassifier(4, 8, 3)
        >>> clf.initialize()
    """

    def __init__(self, *sizes: int):
        if len(sizes) < 2:
            raise ConfigurationError(
                f"Neural network has {len(sizes)} layer(s). There must be at least 2 layers."
            )
        layers: List[Layer] = [Dense(sizes[0], ActivationType.IDENTITY)]
        layers += [Dense(n, ActivationType.LEAKY_RELU) for n in sizes[1:-1]]
        layers.append(Dense(sizes[-1], ActivationType.SOFTMAX))
        super().__init__(layers)


def build_network(
    sizes: Sequence[int],
    activations: Union[Sequence[Union[ActivationType, str]], ActivationType, str] = ActivationType.LEAKY_RELU,
) -> Network:
    """
    Build an uninitialized network from neuron counts.

    Args:
        sizes: Neuron count per layer, input layer first
        activations: One activation per layer, or a single activation used for
            every non-input layer. The input layer is always identity.

    Example:
        >>> net = build_network([2, 16, 2], ['identity', 'leaky_relu', 'leaky_relu'])
    """
    if isinstance(activations, (str, ActivationType)):
        activations = [activations] * len(sizes)
    if len(activations) != len(sizes):
        raise ConfigurationError(
            f"Got {len(activations)} activations for {len(sizes)} layers."
        )

    layers = [Dense(n, act) for n, act in zip(sizes, activations)]
    if layers:
        layers[0].activation = ActivationType.IDENTITY
    return Network(layers)


def _write_json(filepath: str, payload: Dict[str, Any]) -> None:
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = filepath + '.tmp'
    with open(tmp_path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2)
    os.replace(tmp_path, filepath)


__all__ = ['Network', 'SimpleClassifier', 'build_network']
