"""
Trainers
========

Gradient-descent training for :class:`~gamemind.nn.network.Network`.

Backpropagation:
    1. Forward pass, error derivative dE/dy from the error function
    2. Output delta  = dE/dy * f'(y_out)
    3. Hidden delta  = (W_next^T . delta_next) * f'(y_hidden), from the
       second-to-last layer down to the first non-input layer
    4. Adjust every layer with the deltas from step 2-3:
           W[n][w] -= learning_rate * delta[n] * previous_activation[w]
           b[n]    -= learning_rate * delta[n]

All deltas are computed before any weight changes, so earlier layers see the
pre-update weights of the layers after them.

Mini-batch training averages the update over a window of samples. Each
sample's activations are captured during the error pass so the averaged
update uses the activations that produced each error.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .losses import ErrorFn
from .network import Network
from ..exceptions import ConfigurationError, InputContractError
from ..utils.logger import get_logger


logger = get_logger(__name__)

# (output error derivative, activations of every layer, error value)
_Sample = Tuple[np.ndarray, List[np.ndarray], float]


class Trainer(ABC):
    """
    Base class for network trainers.

    Attributes:
        network: Network being trained (modified in place)
        error_fn: Error function, see :mod:`gamemind.nn.losses`
        learning_rate: Gradient descent step size
        log_error: Log the error of every evaluated sample at DEBUG level
    """

    def __init__(
        self,
        network: Network,
        error_fn: Optional[ErrorFn],
        learning_rate: float,
        log_error: bool = False,
    ):
        if network is None:
            raise ConfigurationError("Network is null.")
        if error_fn is None:
            raise ConfigurationError("Error function is null.")

        self.network = network
        self.error_fn = error_fn
        self.learning_rate = learning_rate
        self.log_error = log_error

    # ------------------------------------------------------------------
    # Public API

    def compute_error(self, inputs: Sequence[float], expected: Sequence[float]) -> np.ndarray:
        """Run the network once and return the error derivative per output neuron."""
        d_error, _ = self._evaluate(inputs, expected)
        return d_error

    @abstractmethod
    def train_once(self, inputs: Sequence[float], expected: Sequence[float]) -> float:
        """Train on a single sample. Returns the sample's mean error."""

    @abstractmethod
    def train_batches_once(
        self,
        inputs: Sequence[Sequence[float]],
        expected: Sequence[Sequence[float]],
        batch_size: int = 4,
    ) -> float:
        """One pass over the dataset in mini-batches. Returns the mean error over batches."""

    def train(
        self,
        inputs: Sequence[Sequence[float]],
        expected: Sequence[Sequence[float]],
        epochs: int,
    ) -> List[float]:
        """
        Train sample by sample for ``epochs`` passes over the dataset.

        Returns:
            Mean error of every epoch
        """
        self._check_dataset(inputs, expected)

        history = []
        for _ in range(epochs):
            errors = [self.train_once(x, y) for x, y in zip(inputs, expected)]
            history.append(float(np.mean(errors)))
        return history

    def train_batches(
        self,
        inputs: Sequence[Sequence[float]],
        expected: Sequence[Sequence[float]],
        batch_size: int,
        epochs: int,
    ) -> List[float]:
        """
        Mini-batch training for ``epochs`` passes over the dataset.

        Returns:
            Mean error of every epoch
        """
        return [self.train_batches_once(inputs, expected, batch_size) for _ in range(epochs)]

    # ------------------------------------------------------------------
    # Helpers

    def _evaluate(self, inputs: Sequence[float], expected: Sequence[float]) -> Tuple[np.ndarray, float]:
        output = self.network.forward(inputs)
        errors = self.error_fn(output, expected, False)
        error = float(np.mean(errors))

        if self.log_error:
            comparison = ", ".join(
                f"Out N{i}: {o:.2f} Expected: {e}" for i, (o, e) in enumerate(zip(output, expected))
            )
            logger.debug(f"Average error: {error:.4f} | {comparison}")

        return np.asarray(self.error_fn(output, expected, True), dtype=np.float64), error

    @staticmethod
    def _check_dataset(inputs: Sequence, expected: Sequence) -> None:
        if inputs is None or expected is None:
            raise InputContractError("Inputs and expected outputs must not be null.")
        if len(inputs) != len(expected):
            raise InputContractError(
                f"Inputs and expected outputs must be the same size ({len(inputs)} != {len(expected)})."
            )

    def _adjust_layers(self, deltas: Sequence[List[np.ndarray]], activations: Sequence[List[np.ndarray]]) -> None:
        """
        Apply the averaged update of one or more samples to every non-input layer.

        Args:
            deltas: Per sample, the delta of every layer (index 0 unused)
            activations: Per sample, the activations of every layer
        """
        count = len(deltas)
        for index, layer in enumerate(self.network.layers):
            if layer.is_input_layer:
                continue
            prev = layer.predecessor_index
            d = np.stack([sample[index] for sample in deltas])
            a = np.stack([sample[prev] for sample in activations])

            layer.weights -= self.learning_rate * (d.T @ a) / count
            layer.biases -= self.learning_rate * d.mean(axis=0)


class BackPropagation(Trainer):
    """
    Plain stochastic gradient descent with backpropagated errors.

    Example:
        >>> trainer = BackPropagation(net, mean_squared_error, learning_rate=0.05)
        >>> trainer.train(inputs, expected, epochs=400)
    """

    def train_once(self, inputs: Sequence[float], expected: Sequence[float]) -> float:
        d_error, error = self._evaluate(inputs, expected)
        activations = [layer.activations for layer in self.network.layers]

        deltas = self._deltas(d_error, activations)
        self._adjust_layers([deltas], [activations])
        return error

    def train_batches_once(
        self,
        inputs: Sequence[Sequence[float]],
        expected: Sequence[Sequence[float]],
        batch_size: int = 4,
    ) -> float:
        self._check_dataset(inputs, expected)
        if batch_size < 2:
            raise ConfigurationError("Batch size must be at least 2.")
        if batch_size >= len(inputs):
            raise ConfigurationError(
                f"Batch size ({batch_size}) must be smaller than the dataset length ({len(inputs)})."
            )

        # Evaluate the whole dataset before touching any weights
        samples: List[_Sample] = []
        for x, y in zip(inputs, expected):
            d_error, error = self._evaluate(x, y)
            activations = [layer.activations.copy() for layer in self.network.layers]
            samples.append((d_error, activations, error))

        batch_errors = []
        for start in range(0, len(samples), batch_size):
            window = samples[start:start + batch_size]
            deltas = [self._deltas(d_error, activations) for d_error, activations, _ in window]
            self._adjust_layers(deltas, [activations for _, activations, _ in window])
            batch_errors.append(float(np.mean([error for _, _, error in window])))

        return float(np.mean(batch_errors))

    def _deltas(self, d_error: np.ndarray, activations: Sequence[np.ndarray]) -> List[np.ndarray]:
        """Propagate the output error derivative back through the network."""
        layers = self.network.layers
        last = len(layers) - 1
        deltas: List[np.ndarray] = [np.empty(0)] * len(layers)

        deltas[last] = d_error * layers[last].activate(activations[last], derivative=True)

        for index in range(last - 1, 0, -1):
            next_layer = layers[index + 1]
            deltas[index] = (next_layer.weights.T @ deltas[index + 1]) * \
                layers[index].activate(activations[index], derivative=True)

        return deltas


__all__ = ['Trainer', 'BackPropagation']
