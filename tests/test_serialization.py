"""
test_serialization.py
~~~~~~~~~~~~~~~~~~~~~

Unit tests for exporting and loading networks.
"""

import io
import json

import numpy as np
import pytest

from fonet import ActivationKind, Network, SerializationError, load, load_from
from fonet.samples import XOR_SAMPLES
from fonet.serialization import FIELDS, NetworkEncoder, decode_state

INPUTS = [
    [0.0, 0.0],
    [0.0, 1.0],
    [1.0, 0.0],
    [1.0, 1.0],
    [0.123456789, -3.5],
    [1e-9, 42.0],
]


@pytest.fixture
def trained_network():
    """Create a 2-3-1 network with some training applied."""
    net = Network([2, 3, 1], ActivationKind.SIGMOID, rng=2024)
    net.train(XOR_SAMPLES, 25, 1.01)
    return net


@pytest.fixture
def exported(trained_network):
    """The exported state of the trained network, as a dict."""
    return json.loads(trained_network.export())


def _dump(state):
    return json.dumps(state).encode("utf-8")


@pytest.mark.unit
class TestExport:
    """Test the encoded format."""

    def test_fields(self, exported):
        """Test that exactly the documented fields are written, in order."""
        assert tuple(exported) == FIELDS

    def test_field_values(self, trained_network, exported):
        """Test that the fields carry the network state."""
        net = trained_network

        assert exported["L"] == 2
        assert exported["LS"] == [3, 1]
        assert exported["ActivationID"] == 0
        assert exported["W"] == [w.tolist() for w in net.weights]
        assert exported["B"] == [b.tolist() for b in net.biases]
        assert exported["D"] == [d.tolist() for d in net.deltas]
        assert exported["Z"] == [z.tolist() for z in net.zs]

    def test_activation_id(self):
        """Test that the activation is written as its integer id."""
        state = json.loads(Network([2, 3, 1], ActivationKind.LEAKY_RELU, rng=0).export())
        assert state["ActivationID"] == 3

    def test_ends_with_newline(self, trained_network):
        """Test that the document is newline-terminated UTF-8."""
        data = trained_network.export()
        assert isinstance(data, bytes)
        assert data.endswith(b"\n")

    def test_export_to_streams(self, trained_network):
        """Test writing to text and binary streams."""
        text = io.StringIO()
        binary = io.BytesIO()

        trained_network.export_to(text)
        trained_network.export_to(binary)

        assert text.getvalue().encode("utf-8") == trained_network.export()
        assert binary.getvalue() == trained_network.export()

    def test_encoder_handles_numpy(self):
        """Test the numpy-aware JSON encoder."""
        encoded = json.dumps(
            {"a": np.arange(3), "b": np.int64(4), "c": np.float64(0.5)},
            cls=NetworkEncoder
        )
        assert json.loads(encoded) == {"a": [0, 1, 2], "b": 4, "c": 0.5}


@pytest.mark.unit
class TestLoad:
    """Test loading exported networks."""

    def test_round_trip_predictions_are_identical(self, trained_network):
        """Test that a loaded network predicts bit-for-bit the same."""
        loaded = load(trained_network.export())

        for x in INPUTS:
            assert np.array_equal(loaded.predict(x), trained_network.predict(x))

    @pytest.mark.parametrize("kind", list(ActivationKind))
    def test_round_trip_every_activation(self, kind):
        """Test that the activation is recovered from its id."""
        net = Network([3, 4, 2], kind, rng=8)
        loaded = load(net.export())

        assert loaded.activation is kind
        for x in ([0.1, 0.2, 0.3], [-1.0, 2.0, -3.0]):
            assert np.array_equal(loaded.predict(x), net.predict(x))

    def test_round_trip_keeps_scratch_values(self, trained_network):
        """Test that deltas and z values survive the round trip."""
        loaded = load(trained_network.export())

        assert loaded.layer_sizes == trained_network.layer_sizes
        assert loaded.sizes == trained_network.sizes
        for a, b in zip(loaded.deltas, trained_network.deltas):
            assert np.array_equal(a, b)
        for a, b in zip(loaded.zs, trained_network.zs):
            assert np.array_equal(a, b)
        assert loaded.export() == trained_network.export()

    def test_loaded_network_trains_identically(self, trained_network):
        """Test that training continues on the same trajectory after loading."""
        loaded = load(trained_network.export())

        trained_network.train(XOR_SAMPLES, 10, 1.01)
        loaded.train(XOR_SAMPLES, 10, 1.01)

        assert loaded.export() == trained_network.export()

    def test_load_from_text(self, trained_network):
        """Test that str input is accepted."""
        loaded = load(trained_network.export().decode("utf-8"))
        assert loaded.sizes == [2, 3, 1]

    def test_load_from_files(self, trained_network, tmp_path):
        """Test loading from binary and text files."""
        path = tmp_path / "net.json"
        with open(path, "wb") as f:
            trained_network.export_to(f)

        with open(path, "rb") as f:
            from_binary = load_from(f)
        with open(path, "r", encoding="utf-8") as f:
            from_text = load_from(f)

        for x in INPUTS:
            assert np.array_equal(from_binary.predict(x), trained_network.predict(x))
            assert np.array_equal(from_text.predict(x), trained_network.predict(x))


@pytest.mark.unit
class TestLoadErrors:
    """Test that malformed input raises SerializationError."""

    def test_truncated(self, trained_network):
        """Test a document cut in half."""
        data = trained_network.export()
        with pytest.raises(SerializationError):
            load(data[:len(data) // 2])

    @pytest.mark.parametrize("data", [b"", b"not json", b"\xff\xfe", b"[]", b"null", b"42"])
    def test_not_a_network(self, data):
        """Test input that is not a JSON object."""
        with pytest.raises(SerializationError):
            load(data)

    @pytest.mark.parametrize("field", FIELDS)
    def test_missing_field(self, exported, field):
        """Test that every field is required."""
        del exported[field]
        with pytest.raises(SerializationError, match=field):
            load(_dump(exported))

    @pytest.mark.parametrize("activation_id", [-1, 5, 99])
    def test_unknown_activation(self, exported, activation_id):
        """Test an activation id outside the registry."""
        exported["ActivationID"] = activation_id
        with pytest.raises(SerializationError, match="activation"):
            load(_dump(exported))

    @pytest.mark.parametrize("field, value", [
        ("ActivationID", "0"),
        ("ActivationID", 1.5),
        ("L", True),
        ("L", 3),
        ("LS", [3]),
        ("LS", "3,1"),
        ("LS", [3, 0]),
    ])
    def test_bad_metadata(self, exported, field, value):
        """Test wrongly typed or inconsistent layer metadata."""
        exported[field] = value
        with pytest.raises(SerializationError):
            load(_dump(exported))

    def test_too_few_layers(self):
        """Test a single-layer state."""
        state = {"W": [[[1.0]]], "B": [[0.0]], "D": [[0.0]], "Z": [[0.0]],
                 "L": 1, "LS": [1], "ActivationID": 0}
        with pytest.raises(SerializationError):
            load(_dump(state))

    def test_ragged_weights(self, exported):
        """Test a weight matrix with rows of different length."""
        exported["W"][0][1] = exported["W"][0][1][:-1]
        with pytest.raises(SerializationError):
            load(_dump(exported))

    def test_weight_rows_disagree_with_previous_layer(self, exported):
        """Test a weight matrix whose rows don't match the layer below."""
        exported["W"][1].append([0.5])
        with pytest.raises(SerializationError, match="rows"):
            load(_dump(exported))

    def test_weight_columns_disagree_with_layer(self, exported):
        """Test a weight matrix whose columns don't match the layer."""
        exported["W"][1] = [row + [0.5] for row in exported["W"][1]]
        with pytest.raises(SerializationError, match="columns"):
            load(_dump(exported))

    @pytest.mark.parametrize("field", ["B", "D", "Z"])
    def test_vector_length(self, exported, field):
        """Test per-neuron vectors of the wrong length."""
        exported[field][0].append(0.0)
        with pytest.raises(SerializationError):
            load(_dump(exported))

    @pytest.mark.parametrize("field", ["W", "B", "D", "Z"])
    def test_wrong_layer_count(self, exported, field):
        """Test arrays with a missing layer."""
        exported[field] = exported[field][:1]
        with pytest.raises(SerializationError):
            load(_dump(exported))

    def test_non_numeric_values(self, exported):
        """Test strings in a numeric array."""
        exported["B"][0][0] = "zero"
        with pytest.raises(SerializationError):
            load(_dump(exported))

    @pytest.mark.parametrize("values", [["0.5", "0.5", "0.5"], [True, False, True], [0.5, None, 0.5]])
    def test_non_number_leaves(self, exported, values):
        """Test that numeric-looking strings, booleans and nulls are rejected."""
        exported["B"][0] = values
        with pytest.raises(SerializationError, match="numbers"):
            load(_dump(exported))

    def test_number_too_large_for_float(self, exported):
        """Test an integer that does not fit in a float64."""
        exported["W"][0][0][0] = 10 ** 400
        with pytest.raises(SerializationError) as info:
            load(_dump(exported))
        assert isinstance(info.value.__cause__, OverflowError)

    def test_deeply_nested(self):
        """Test input nested beyond the decoder's recursion limit."""
        with pytest.raises(SerializationError, match="nested") as info:
            load(b"[" * 100000)
        assert isinstance(info.value.__cause__, RecursionError)

    def test_decode_state_chains_cause(self):
        """Test that the original decoding error is kept."""
        with pytest.raises(SerializationError) as info:
            decode_state(b"{")
        assert isinstance(info.value.__cause__, json.JSONDecodeError)
