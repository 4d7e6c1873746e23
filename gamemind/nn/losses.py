"""
Error Functions
===============

Error functions compare a produced output with the expected output and
return one value per output neuron:

    error_fn(output, expected, derivative=True) -> np.ndarray

With ``derivative=True`` (the default, used by the trainers) the result is
dError/dOutput; otherwise it is the error itself.
"""

from typing import Callable, Dict, Optional, Sequence

import numpy as np

from ..exceptions import InputContractError


ErrorFn = Callable[..., np.ndarray]


def check_outputs(output: Optional[Sequence[float]], expected: Optional[Sequence[float]]) -> None:
    """
    Check that output and expected output can be compared.

    Raises:
        InputContractError: If either is None or their lengths differ
    """
    if output is None:
        raise InputContractError("Output is null.")
    if expected is None:
        raise InputContractError("Expected output is null.")
    if len(output) != len(expected):
        raise InputContractError(
            f"Output and expected output are not the same size ({len(output)} != {len(expected)})."
        )


def mean_squared_error(
    output: Sequence[float],
    expected: Sequence[float],
    derivative: bool = True,
) -> np.ndarray:
    """Squared difference per neuron, or 2 * (output - expected) as derivative."""
    check_outputs(output, expected)
    diff = np.asarray(output, dtype=np.float64) - np.asarray(expected, dtype=np.float64)
    if derivative:
        return 2.0 * diff
    return np.square(diff)


LOSSES: Dict[str, ErrorFn] = {
    'mse': mean_squared_error,
    'mean_squared_error': mean_squared_error,
}


def get_loss(name: str) -> ErrorFn:
    """Look up an error function by name."""
    try:
        return LOSSES[name.lower()]
    except KeyError as exc:
        available = ", ".join(sorted(LOSSES))
        raise KeyError(f"Unknown loss {name!r}. Available losses: {available}") from exc


__all__ = ['ErrorFn', 'LOSSES', 'check_outputs', 'get_loss', 'mean_squared_error']
