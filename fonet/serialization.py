"""
serialization.py
~~~~~~~~~~~~~~~~

JSON encoding of the complete mutable state of a network.

The encoded object has exactly the fields ``W`` (weights), ``B`` (biases),
``D`` (deltas), ``Z`` (pre-activations), ``L`` (layer count), ``LS`` (layer
sizes, input layer excluded) and ``ActivationID``. These names and the
integer activation ids are a compatibility contract with other tooling.

``D`` and ``Z`` are scratch values of the last forward/backward pass. They are
kept on purpose so a decoded network is an exact copy of the encoded one.
"""

import json
from typing import Any, Dict, List, Union

import numpy as np

from fonet.activations import ActivationKind
from fonet.errors import SerializationError

FIELDS = ("W", "B", "D", "Z", "L", "LS", "ActivationID")


class NetworkEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles numpy arrays and scalars."""

    def default(self, obj: Any) -> Any:
        """
        Convert numpy values to plain Python values for JSON serialization.

        Args:
            obj: Object to serialize

        Returns:
            JSON-serializable representation
        """
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        return super().default(obj)


def encode_state(
    weights: List[np.ndarray],
    biases: List[np.ndarray],
    deltas: List[np.ndarray],
    zs: List[np.ndarray],
    layer_sizes: List[int],
    activation: ActivationKind,
) -> bytes:
    """
    Encode a network state as UTF-8 JSON.

    Returns:
        bytes: The JSON document followed by a newline
    """
    state = {
        "W": weights,
        "B": biases,
        "D": deltas,
        "Z": zs,
        "L": len(layer_sizes),
        "LS": list(layer_sizes),
        "ActivationID": int(activation),
    }
    return (json.dumps(state, cls=NetworkEncoder) + "\n").encode("utf-8")


def decode_state(data: Union[bytes, bytearray, str]) -> Dict[str, Any]:
    """
    Decode and validate a state produced by ``encode_state``.

    Args:
        data: The encoded document

    Returns:
        dict: ``weights``, ``biases``, ``deltas``, ``zs`` (lists of float64
        arrays), ``layer_sizes`` (list of int) and ``activation``
        (``ActivationKind``)

    Raises:
        SerializationError: If the document is malformed, incomplete, has
            inconsistent shapes or an unknown activation id
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"network state is not valid UTF-8: {e}") from e

    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        raise SerializationError(f"network state is not valid JSON: {e}") from e
    except RecursionError as e:
        raise SerializationError("network state is nested too deeply") from e
    except TypeError as e:
        raise SerializationError(f"cannot decode {type(data).__name__}") from e

    if not isinstance(raw, dict):
        raise SerializationError("network state must be a JSON object")

    missing = [name for name in FIELDS if name not in raw]
    if missing:
        raise SerializationError(f"network state is missing fields: {', '.join(missing)}")

    num_layers = _integer(raw["L"], "L")
    layer_sizes = raw["LS"]
    if not isinstance(layer_sizes, list):
        raise SerializationError("LS must be a list of integers")
    layer_sizes = [_integer(size, "LS") for size in layer_sizes]
    if num_layers != len(layer_sizes):
        raise SerializationError(f"L is {num_layers} but LS has {len(layer_sizes)} entries")
    if num_layers < 2:
        raise SerializationError(f"a network needs at least 2 layers after the input, got {num_layers}")
    if any(size < 1 for size in layer_sizes):
        raise SerializationError(f"layer sizes must be positive, got {layer_sizes}")

    activation_id = _integer(raw["ActivationID"], "ActivationID")
    try:
        activation = ActivationKind(activation_id)
    except ValueError as e:
        raise SerializationError(f"unknown activation id {activation_id}") from e

    weights = _layers(raw["W"], "W", num_layers, ndim=2)
    for l, w in enumerate(weights):
        if w.shape[1] != layer_sizes[l]:
            raise SerializationError(
                f"W[{l}] has {w.shape[1]} columns, expected {layer_sizes[l]}"
            )
        if l > 0 and w.shape[0] != layer_sizes[l - 1]:
            raise SerializationError(
                f"W[{l}] has {w.shape[0]} rows, expected {layer_sizes[l - 1]}"
            )

    vectors = {}
    for name in ("B", "D", "Z"):
        arrays = _layers(raw[name], name, num_layers, ndim=1)
        for l, v in enumerate(arrays):
            if v.shape[0] != layer_sizes[l]:
                raise SerializationError(
                    f"{name}[{l}] has {v.shape[0]} entries, expected {layer_sizes[l]}"
                )
        vectors[name] = arrays

    return {
        "weights": weights,
        "biases": vectors["B"],
        "deltas": vectors["D"],
        "zs": vectors["Z"],
        "layer_sizes": layer_sizes,
        "activation": activation,
    }


def _integer(value: Any, name: str) -> int:
    # bool is an int subclass but never a valid count or id
    if isinstance(value, bool) or not isinstance(value, int):
        raise SerializationError(f"{name} must hold integers, got {value!r}")
    return value


def _layers(value: Any, name: str, num_layers: int, ndim: int) -> List[np.ndarray]:
    if not isinstance(value, list) or len(value) != num_layers:
        raise SerializationError(f"{name} must be a list with one entry per layer ({num_layers})")

    arrays = []
    for l, entry in enumerate(value):
        if not _numeric(entry, ndim):
            raise SerializationError(f"{name}[{l}] must be a {ndim}-D array of numbers")
        try:
            array = np.array(entry, dtype=np.float64)
        except (TypeError, ValueError, OverflowError) as e:
            raise SerializationError(f"{name}[{l}] is not a numeric array: {e}") from e
        if array.ndim != ndim or array.size == 0:
            raise SerializationError(f"{name}[{l}] must be a non-empty {ndim}-D array")
        arrays.append(array)
    return arrays


def _numeric(entry: Any, depth: int) -> bool:
    # JSON strings and booleans must not be coerced into floats
    if depth == 0:
        return isinstance(entry, (int, float)) and not isinstance(entry, bool)
    return isinstance(entry, list) and all(_numeric(item, depth - 1) for item in entry)
