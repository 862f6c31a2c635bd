"""
activations.py
~~~~~~~~~~~~~~

Registry of the activation functions a network can use.

Every ``ActivationKind`` maps to exactly one (function, derivative) pair.
The functions work on Python floats as well as numpy arrays (elementwise),
so the network can evaluate a whole layer at once. The integer value of each
kind is the ``ActivationID`` written to exported networks and must not change.

Formulas are taken from https://en.wikipedia.org/wiki/Activation_function
"""

from enum import IntEnum
from typing import Callable, Dict, Tuple

import numpy as np

ActivationFn = Callable[[np.ndarray], np.ndarray]
FunctionPair = Tuple[ActivationFn, ActivationFn]


class ActivationKind(IntEnum):
    """Activation functions available to a network."""

    SIGMOID = 0
    BENT_IDENTITY = 1
    RELU = 2
    LEAKY_RELU = 3
    ARSINH = 4

    def __str__(self) -> str:
        return activation_name(self)


def sigmoid(z):
    """The sigmoid function."""
    return 1.0 / (1.0 + np.exp(-z))


def sigmoid_prime(z):
    """Derivative of the sigmoid function."""
    return sigmoid(z) * (1 - sigmoid(z))


def bent_identity(z):
    return (np.sqrt(z * z + 1) - 1) / 2.0 + z


def bent_identity_prime(z):
    return z / (2 * np.sqrt(z * z + 1)) + 1


def relu(z):
    return np.where(z > 0, z, 0.0)


def relu_prime(z):
    # The derivative at exactly 0 is taken to be 0.
    return np.where(z > 0, 1.0, 0.0)


def leaky_relu(z):
    return np.where(z < 0, 0.01 * z, z)


def leaky_relu_prime(z):
    return np.where(z < 0, 0.01, 1.0)


def arsinh(z):
    return np.log(z + np.sqrt(z * z + 1))


def arsinh_prime(z):
    return 1 / np.sqrt(z * z + 1)


_FUNCTION_PAIRS: Dict[ActivationKind, FunctionPair] = {
    ActivationKind.SIGMOID: (sigmoid, sigmoid_prime),
    ActivationKind.BENT_IDENTITY: (bent_identity, bent_identity_prime),
    ActivationKind.RELU: (relu, relu_prime),
    ActivationKind.LEAKY_RELU: (leaky_relu, leaky_relu_prime),
    ActivationKind.ARSINH: (arsinh, arsinh_prime),
}

_NAMES: Dict[ActivationKind, str] = {
    ActivationKind.SIGMOID: "Sigmoid",
    ActivationKind.BENT_IDENTITY: "Bent Identity",
    ActivationKind.RELU: "Rectified linear unit",
    ActivationKind.LEAKY_RELU: "Leaky rectified linear unit",
    ActivationKind.ARSINH: "ArSinH",
}


def function_pair(kind) -> FunctionPair:
    """
    Look up the activation function and its derivative.

    Args:
        kind: An ``ActivationKind`` (or its integer value)

    Returns:
        tuple: ``(function, derivative)``

    Raises:
        KeyError: If ``kind`` is not a known activation
    """
    try:
        return _FUNCTION_PAIRS[ActivationKind(kind)]
    except ValueError:
        raise KeyError(f"unknown activation kind: {kind!r}") from None


def activation_name(kind) -> str:
    """Human-readable name of ``kind``; ``"Unknown"`` if it is not registered."""
    try:
        return _NAMES[ActivationKind(kind)]
    except ValueError:
        return "Unknown"


__all__ = [
    "ActivationKind",
    "activation_name",
    "function_pair",
    "sigmoid",
    "sigmoid_prime",
    "bent_identity",
    "bent_identity_prime",
    "relu",
    "relu_prime",
    "leaky_relu",
    "leaky_relu_prime",
    "arsinh",
    "arsinh_prime",
]
