"""
Tests for the error functions.
"""

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamemind.exceptions import InputContractError
from gamemind.nn.losses import get_loss, mean_squared_error


class TestMeanSquaredError:
    """Test mean squared error."""

    def test_derivative_is_default(self):
        assert np.allclose(mean_squared_error([1.0, 0.0], [0.0, 0.0]), [2.0, 0.0])

    def test_error_value(self):
        assert np.allclose(mean_squared_error([1.0, -2.0], [0.0, 1.0], derivative=False), [1.0, 9.0])

    def test_zero_for_perfect_output(self):
        assert np.allclose(mean_squared_error([0.3, 0.7], [0.3, 0.7], derivative=False), 0.0)

    @pytest.mark.parametrize("output,expected", [
        (None, [1.0]),
        ([1.0], None),
        ([1.0, 2.0], [1.0]),
    ])
    def test_contract_violations(self, output, expected):
        with pytest.raises(InputContractError):
            mean_squared_error(output, expected)


class TestLossLookup:
    """Test lookup by name."""

    def test_mse(self):
        assert get_loss('mse') is mean_squared_error
        assert get_loss('MSE') is mean_squared_error

    def test_unknown(self):
        with pytest.raises(KeyError):
            get_loss('hinge')
