"""Errors raised by the fitness core.

Every error here is local and recoverable: the operation that raised it did
not mutate any state. Callers surface ``message`` to the user.
"""


class FitnessError(Exception):
    """Base class for user-facing failures of a core operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FitnessError):
    """Bad user input: missing name, invalid weight/reps, empty template."""


class PreconditionError(FitnessError):
    """The operation is not allowed in the current state."""
