"""
errors.py
~~~~~~~~~

Exceptions raised by the fonet package.
"""


class FonetError(Exception):
    """Base class for every error raised by fonet."""


class TooFewLayersError(FonetError, ValueError):
    """Raised when a network is given fewer than 3 layer sizes."""

    def __init__(self, message: str = "too few layers, minimum of 3 required"):
        super().__init__(message)


class SerializationError(FonetError, ValueError):
    """Raised when an encoded network state cannot be decoded."""
