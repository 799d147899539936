"""
Errors raised by the data-store layer.

Routes never catch these; exception handlers registered in main.py turn
them into 5xx responses.
"""


class StoreError(Exception):
    """The event store failed to answer a query."""


class StoreTimeoutError(StoreError):
    """The event store did not answer within the configured timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"{operation} timed out after {timeout:g}s")
        self.operation = operation
        self.timeout = timeout
