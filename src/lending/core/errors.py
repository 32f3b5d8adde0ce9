"""Error kinds raised by the lending service and the book repository."""


class LendingError(Exception):
    """Base class for every failure surfaced by the lending core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LendingError):
    """Caller-supplied data violates a domain rule."""


class NotFound(LendingError):
    """The referenced book does not exist."""


class Conflict(LendingError):
    """A required state precondition was not met.

    Also raised when the book is absent for delete/take/return; the two
    cases are deliberately indistinguishable.
    """


class StorageFailure(LendingError):
    """The backing store could not complete the operation."""
