"""
Little Stars - Exceptions
Error taxonomy for the progress & gamification engine.
"""
import uuid


class LittleStarsError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(LittleStarsError):
    """A referenced entity does not exist."""
    pass


class ChildNotFoundError(NotFoundError):
    """Raised when the child profile is unknown."""

    def __init__(self, child_id: uuid.UUID):
        self.child_id = child_id
        super().__init__(f"Child not found: {child_id}")


class ValidationError(LittleStarsError):
    """Input rejected before any write happens."""
    pass


class ProgressValidationError(ValidationError):
    """Raised for out-of-range scores, negative times and bad report ranges."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


class ProgressConsistencyError(LittleStarsError):
    """
    Storage failed in the middle of recording an attempt.

    The transaction has been rolled back. Callers must not replay the attempt
    blindly, the failure needs an operator to look at it.
    """

    def __init__(self, child_id: uuid.UUID, cause: Exception):
        self.child_id = child_id
        self.cause = cause
        super().__init__(f"Failed to record attempt for child {child_id}: {cause}")
