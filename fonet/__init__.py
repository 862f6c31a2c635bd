"""
fonet package
~~~~~~~~~~~~~

Fully-connected feedforward neural networks trained with online
backpropagation. Contains the activation registry, the network engine,
JSON (de)serialization of the network state and a SQLite model store.
"""

from fonet.activations import ActivationKind, activation_name, function_pair
from fonet.errors import FonetError, SerializationError, TooFewLayersError
from fonet.network import Network, load, load_from

__version__ = "1.0.0"

__all__ = [
    "ActivationKind",
    "FonetError",
    "Network",
    "SerializationError",
    "TooFewLayersError",
    "activation_name",
    "function_pair",
    "load",
    "load_from",
]
