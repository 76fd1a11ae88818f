"""Error taxonomy shared by services and adapters."""


class StoreError(Exception):
    """Base class for store tracker errors."""


class NotFoundError(StoreError):
    """A business identifier did not resolve to a document."""

    def __init__(self, identifier: int) -> None:
        super().__init__(f"Element with id {identifier} was not found")
        self.identifier = identifier


class ConflictError(StoreError):
    """A uniqueness constraint was violated on creation."""

    def __init__(self, identifier: int) -> None:
        super().__init__(f"Element with id {identifier} already exists")
        self.identifier = identifier


class TransactionFailure(StoreError):
    """The underlying transaction could not commit and was rolled back."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable