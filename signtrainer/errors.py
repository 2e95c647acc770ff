"""
Exceptions raised by the sign training core.
"""


class SignTrainerError(Exception):
    """Base class for all sign trainer errors."""


class InvalidPose(SignTrainerError, ValueError):
    """A frame's landmark data is empty or has the wrong number of points."""


class IndexOutOfRange(SignTrainerError, IndexError):
    """A vocabulary index does not refer to a stored sign."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Sign index {index} out of range for vocabulary of size {size}")
        self.index = index
        self.size = size


class PersistenceCorrupt(SignTrainerError):
    """Stored vocabulary data could not be decoded."""


class EmptyInput(SignTrainerError):
    """A save was attempted with a blank name or without a live pose."""
