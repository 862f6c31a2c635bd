"""
network.py
~~~~~~~~~~

A fully-connected feedforward neural network trained with online
(per-sample) gradient descent and backpropagation.

Layer ``l`` owns a weight matrix of shape ``(inputs, neurons)`` where
``inputs`` is the input width for layer 0 and the previous layer's neuron
count otherwise, plus a bias, a pre-activation (``z``) and a delta vector
with one entry per neuron. The input layer has no parameters and is not
counted in ``layer_sizes``.

A network is not thread-safe. Training, prediction and export all touch the
same buffers, so callers sharing an instance must serialize access.
"""

import io
import logging
from typing import IO, List, Sequence, Tuple, Union

import numpy as np

from fonet import serialization
from fonet.activations import ActivationKind, activation_name, function_pair
from fonet.errors import SerializationError, TooFewLayersError

logger = logging.getLogger(__name__)

Sample = Tuple[Sequence[float], Sequence[float]]
RandomSource = Union[None, int, np.random.Generator]


class Network:

    def __init__(
        self,
        sizes: Sequence[int],
        activation: Union[ActivationKind, int] = ActivationKind.SIGMOID,
        rng: RandomSource = None
    ):
        """
        Create a network with randomly initialized weights and biases.

        ``sizes`` lists the neuron count of every layer, input layer first.
        ``Network([2, 3, 1])`` has 2 inputs, a hidden layer of 3 neurons and
        one output neuron. Every weight and bias is drawn uniformly from
        ``[0, 1)``.

        Args:
            sizes: Neurons per layer, at least 3 entries
            activation: Activation used by every layer
            rng: Random source: a ``numpy.random.Generator``, an integer
                seed, or None for a freshly seeded generator

        Raises:
            TooFewLayersError: If ``sizes`` has fewer than 3 entries
            ValueError: If a size is not positive or the activation is unknown
        """
        sizes = list(sizes)
        if len(sizes) < 3:
            raise TooFewLayersError()
        if any(isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1
               for size in sizes):
            raise ValueError(f"Layer sizes must be positive integers, got {sizes}")
        sizes = [int(size) for size in sizes]

        self.activation = ActivationKind(activation)
        self.layer_sizes: List[int] = sizes[1:]
        self._resolve_activation()

        rng = np.random.default_rng(rng)
        self.weights: List[np.ndarray] = [
            rng.random((rows, cols))
            for rows, cols in zip(sizes[:-1], sizes[1:])
        ]
        self.biases: List[np.ndarray] = [rng.random(n) for n in self.layer_sizes]
        self.deltas: List[np.ndarray] = [np.zeros(n) for n in self.layer_sizes]
        self.zs: List[np.ndarray] = [np.zeros(n) for n in self.layer_sizes]

        logger.debug(
            f"Created network with sizes {sizes} and "
            f"activation {activation_name(self.activation)}"
        )

    def _resolve_activation(self) -> None:
        self._f, self._f_prime = function_pair(self.activation)

    @property
    def num_layers(self) -> int:
        """Number of layers, excluding the input layer."""
        return len(self.layer_sizes)

    @property
    def sizes(self) -> List[int]:
        """Neurons per layer, input layer included."""
        return [self.weights[0].shape[0]] + list(self.layer_sizes)

    def __repr__(self) -> str:
        return f"Network(sizes={self.sizes}, activation={self.activation.name})"

    def feedforward(self, a: Sequence[float]) -> np.ndarray:
        """
        Run the forward pass and return the output layer's activations.

        The pre-activations of every layer are stored in ``zs`` for the
        backward pass that may follow.
        """
        a = np.asarray(a, dtype=np.float64)
        for w, b, z in zip(self.weights, self.biases, self.zs):
            z[:] = np.dot(a, w) + b
            a = self._f(z)
        return a

    def predict(self, x: Sequence[float]) -> np.ndarray:
        """
        Calculate the output for the given input.

        Args:
            x: Input vector, as wide as the input layer

        Returns:
            numpy.ndarray: Output layer activations
        """
        return self.feedforward(x)

    def train(
        self,
        training_data: Sequence[Sample],
        epochs: int,
        eta: float,
        verbose: bool = False
    ) -> None:
        """
        Train the network with online gradient descent.

        Every epoch visits ``training_data`` in order and updates the weights
        and biases after each sample. There is no shuffling and no early
        stopping, so exactly ``epochs * len(training_data)`` updates are made.

        Args:
            training_data: ``(input, target)`` pairs
            epochs: Number of passes over the data
            eta: Learning rate
            verbose: Log "Epoch: e / epochs" at INFO after every epoch. The
                messages only show up once logging is configured, e.g. with
                ``fonet.config.configure_logging()``.
        """
        logger.debug(
            f"Training for {epochs} epoch(s) on {len(training_data)} sample(s), eta={eta}"
        )
        for epoch in range(epochs):
            for x, y in training_data:
                self.backpropagate(x, y, eta)
            if verbose:
                logger.info(f"Epoch: {epoch + 1} / {epochs}")
        logger.debug("Training finished")

    def backpropagate(self, x: Sequence[float], y: Sequence[float], eta: float) -> None:
        """
        Apply one gradient descent step for a single ``(x, y)`` sample.

        All deltas are computed from the current weights before any weight
        or bias is changed. The cost is the squared error ``(a - y)^2 / 2``.
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        self.feedforward(x)

        # output layer
        last = self.num_layers - 1
        z = self.zs[last]
        self.deltas[last][:] = (self._f(z) - y) * self._f_prime(z)

        # inner layers, strictly after the layer above is finished
        for l in range(last - 1, -1, -1):
            self.deltas[l][:] = np.dot(self.weights[l + 1], self.deltas[l + 1]) * self._f_prime(self.zs[l])

        # layer 0 sees the raw input, later layers re-activate the cached z
        self.weights[0] += -eta * np.outer(x, self.deltas[0])
        for l in range(1, self.num_layers):
            self.weights[l] += -eta * np.outer(self._f(self.zs[l - 1]), self.deltas[l])

        for b, delta in zip(self.biases, self.deltas):
            b += -eta * delta

    def export(self) -> bytes:
        """
        Serialize the full network state as JSON.

        Returns:
            bytes: UTF-8 JSON with the fields W, B, D, Z, L, LS, ActivationID
        """
        return serialization.encode_state(
            self.weights,
            self.biases,
            self.deltas,
            self.zs,
            self.layer_sizes,
            self.activation
        )

    def export_to(self, fp: IO) -> None:
        """Write ``export()`` to a text or binary stream."""
        data = self.export()
        if isinstance(fp, io.TextIOBase):
            fp.write(data.decode("utf-8"))
        else:
            fp.write(data)

    @classmethod
    def from_state(cls, state: dict) -> "Network":
        """Build a network from the fields returned by ``serialization.decode_state``."""
        net = cls.__new__(cls)
        net.activation = ActivationKind(state["activation"])
        net.layer_sizes = list(state["layer_sizes"])
        net.weights = state["weights"]
        net.biases = state["biases"]
        net.deltas = state["deltas"]
        net.zs = state["zs"]
        net._resolve_activation()
        return net


def load(data: Union[bytes, bytearray, str]) -> Network:
    """
    Load a network from the output of ``Network.export``.

    Args:
        data: Encoded network state

    Returns:
        Network: An exact copy of the exported network

    Raises:
        SerializationError: If ``data`` is malformed
    """
    try:
        state = serialization.decode_state(data)
    except SerializationError as e:
        logger.warning(f"Could not load network: {e}")
        raise
    return Network.from_state(state)


def load_from(fp: IO) -> Network:
    """Load a network from a text or binary stream."""
    return load(fp.read())
