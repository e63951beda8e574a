"""
Exceptions raised by pyblake2b.

A failed tag verification is not an error: verify() returns False.
"""


class Blake2bError(Exception):
    """Base class for all pyblake2b errors."""


class ParameterOutOfRangeError(Blake2bError, ValueError):
    """A numeric parameter (the digest size) lies outside its valid bounds."""

    def __init__(self, name, value, minimum, maximum):
        self.name = name
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"{name} must be between {minimum} and {maximum} bytes (got {value})"
        )


class InitializationError(Blake2bError, RuntimeError):
    """
    The self-test found a constant that does not match its expected value.

    This signals a broken build or environment. It is not retryable and no
    hashing should take place in the process after it has been raised.
    """


class StateFinalizedError(Blake2bError, RuntimeError):
    """update() or final() was called on a state already consumed by final()."""
