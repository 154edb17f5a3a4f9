class InvalidGroupError(ValueError):
    """Raised when a duplicate group has fewer than two members."""

    def __init__(self, size: int):
        super().__init__(f"A duplicate group needs at least 2 transactions, got {size}")
        self.size = size


class StorageError(Exception):
    """Raised when the transaction store fails to read, check or commit."""

    def __init__(self, operation: str, cause: Exception = None):
        message = f"Transaction store failed during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.operation = operation
        self.cause = cause
