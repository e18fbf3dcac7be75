"""Shared exceptions for service layer operations."""


class InvalidStateError(Exception):
    """
    Raised when an operation is invalid for a resource's current state.

    Used by the lifecycle state machine when an action cannot be applied to a
    bookmark's current status (e.g., archiving a trashed bookmark).
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class StorageError(Exception):
    """
    Raised when the relational store fails to execute an operation.

    Carries only a generic operation name; the underlying database error is
    chained as ``__cause__`` and logged where it is caught.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} failed")
