"""
Tests for the Network class.

These tests verify:
    - Construction and initialization
    - Forward pass determinism and input validation
    - Copying (independent weights, rebuilt predecessor links)
    - JSON persistence round trip
    - Model structure summary
"""

import json

import pytest
import numpy as np
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gamemind.exceptions import ConfigurationError, InputContractError
from gamemind.nn.activations import ActivationType
from gamemind.nn.layers import Dense
from gamemind.nn.network import Network, SimpleClassifier, build_network


@pytest.fixture
def network():
    """Initialized 2-4-3 network."""
    net = Network([Dense(2), Dense(4, 'leaky_relu'), Dense(3, 'sigmoid')])
    net.initialize()
    return net


class TestNetworkConstruction:
    """Test network creation."""

    @pytest.mark.parametrize("layers", [[], [Dense(2)]])
    def test_fewer_than_two_layers_rejected(self, layers):
        with pytest.raises(ConfigurationError):
            Network(layers)

    def test_sizes(self, network):
        assert network.input_size == 2
        assert network.output_size == 3

    def test_predecessors_linked(self, network):
        assert network.layers[0].predecessor_index is None
        assert network.layers[1].predecessor_index == 0
        assert network.layers[2].predecessor_index == 1
        assert network.predecessor(network.layers[2]) is network.layers[1]

    def test_input_layer_is_identity(self, network):
        assert network.layers[0].is_input_layer
        assert network.layers[0].activation is ActivationType.IDENTITY

    def test_parameter_count(self, network):
        assert network.parameter_count() == (2 * 4 + 4) + (4 * 3 + 3)

    def test_build_network(self):
        net = build_network([3, 5, 2], ['sigmoid', 'tanh', 'softmax'])
        assert [layer.neurons for layer in net.layers] == [3, 5, 2]
        assert net.layers[0].activation is ActivationType.IDENTITY
        assert net.layers[2].activation is ActivationType.SOFTMAX

    def test_build_network_activation_count_mismatch(self):
        with pytest.raises(ConfigurationError):
            build_network([3, 5, 2], ['tanh', 'tanh'])

    def test_simple_classifier(self):
        clf = SimpleClassifier(4, 8, 3)
        clf.initialize()
        out = clf.forward([0.1, 0.2, 0.3, 0.4])
        assert clf.layers[1].activation is ActivationType.LEAKY_RELU
        assert clf.layers[-1].activation is ActivationType.SOFTMAX
        assert out.sum() == pytest.approx(1.0)


class TestNetworkForward:
    """Test forward propagation."""

    def test_output_length(self, network):
        assert network.forward([0.5, -0.5]).shape == (3,)

    def test_deterministic(self, network):
        first = network.predict([0.3, 0.7])
        second = network.predict([0.3, 0.7])
        assert np.array_equal(first, second)

    def test_matches_manual_computation(self, network):
        x = np.array([0.3, 0.7])
        hidden = network.layers[1]
        out = network.layers[2]
        h = np.maximum(0.05 * (hidden.weights @ x + hidden.biases), hidden.weights @ x + hidden.biases)
        y = 1.0 / (1.0 + np.exp(-(out.weights @ h + out.biases)))
        assert np.allclose(network.forward(x), y)

    def test_input_stored_in_input_layer(self, network):
        network.forward([0.25, 0.75])
        assert network.layers[0].activations.tolist() == [0.25, 0.75]

    def test_none_input_rejected(self, network):
        with pytest.raises(InputContractError):
            network.forward(None)

    def test_wrong_length_rejected_without_side_effects(self, network):
        network.forward([0.1, 0.2])
        before = [layer.activations.copy() for layer in network.layers]
        with pytest.raises(InputContractError):
            network.forward([0.1, 0.2, 0.3])
        for layer, previous in zip(network.layers, before):
            assert np.array_equal(layer.activations, previous)

    def test_uninitialized_network_rejected(self):
        net = Network([Dense(2), Dense(1)])
        with pytest.raises(ConfigurationError):
            net.forward([0.0, 0.0])


class TestNetworkCopy:
    """Test deep copies."""

    def test_copy_produces_same_output(self, network):
        clone = network.copy()
        assert np.allclose(clone.predict([0.4, 0.1]), network.predict([0.4, 0.1]))

    def test_copy_is_independent(self, network):
        clone = network.copy()
        clone.layers[1].weights += 1.0
        assert not np.allclose(clone.layers[1].weights, network.layers[1].weights)

    def test_copy_links_its_own_layers(self, network):
        clone = network.copy()
        assert clone.predecessor(clone.layers[2]) is clone.layers[1]
        assert clone.predecessor(clone.layers[2]) is not network.layers[1]


class TestNetworkPersistence:
    """Test JSON save/load."""

    def test_round_trip(self, network, tmp_path):
        path = str(tmp_path / "model.json")
        network.save(path)
        restored = Network.from_file(path)
        assert np.allclose(restored.predict([0.9, -0.2]), network.predict([0.9, -0.2]))
        assert [layer.activation for layer in restored.layers] == [layer.activation for layer in network.layers]

    def test_file_is_json_list_of_layers(self, network, tmp_path):
        path = tmp_path / "model.json"
        network.save(str(path))
        data = json.loads(path.read_text())
        assert len(data['layers']) == 3
        assert data['layers'][0]['weights'] is None
        assert data['layers'][2]['activation'] == 'sigmoid'

    def test_load_replaces_layers(self, network, tmp_path):
        path = str(tmp_path / "model.json")
        network.save(path)
        other = Network([Dense(2), Dense(4), Dense(3)])
        other.initialize()
        assert other.load(path)
        assert np.allclose(other.predict([0.5, 0.5]), network.predict([0.5, 0.5]))

    def test_load_missing_file_returns_false(self, network, tmp_path):
        assert network.load(str(tmp_path / "missing.json")) is False

    def test_save_creates_directories(self, network, tmp_path):
        path = tmp_path / "nested" / "dir" / "model.json"
        network.save(str(path))
        assert path.exists()

    def test_save_async_snapshots_weights(self, network, tmp_path):
        path = str(tmp_path / "async.json")
        expected = network.predict([0.2, 0.8])
        thread = network.save_async(path)
        network.layers[1].weights += 10.0
        thread.join(timeout=5)
        restored = Network.from_file(path)
        assert np.allclose(restored.predict([0.2, 0.8]), expected)

    def test_mismatched_weights_rejected(self, network):
        data = network.to_dict()
        data['layers'][1]['weights'] = [[0.0] * 5] * 4
        with pytest.raises(ConfigurationError):
            Network.from_dict(data)


class TestNetworkSummary:
    """Test the structure report."""

    def test_summary_totals(self, network):
        text = network.summary()
        assert text.startswith("Model Structure:")
        assert "Total Weights: 20" in text
        assert "Total Biases: 7" in text
        assert "Layer 2:" in text
        assert "Activation: sigmoid" in text

    def test_repr(self, network):
        assert "2 → 4 → 3" in repr(network)
