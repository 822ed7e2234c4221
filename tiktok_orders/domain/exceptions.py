"""Domain exceptions.

Errors raised while fetching and decoding the order collection.
"""

from typing import Any


class OrdersError(Exception):
    """Base class for all order exceptions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize orders error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class OrderFetchError(OrdersError):
    """Raised when the order list cannot be retrieved from the backend."""

    def __init__(
        self,
        message: str,
        error_code: str = "FETCH_FAILED",
        status_code: int | None = None,
    ) -> None:
        """Initialize order fetch error.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code from the client.
            status_code: HTTP status, if the backend answered.
        """
        super().__init__(
            message,
            details={"error_code": error_code, "status_code": status_code},
        )
        self.error_code = error_code
        self.status_code = status_code


class MalformedOrderError(OrdersError):
    """Raised when an order record in the backend payload fails validation."""

    def __init__(
        self,
        index: int,
        reason: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize malformed order error.

        Args:
            index: Position of the offending record in ``order_list``.
            reason: Short description of the problem.
            errors: Field-level validation errors.
        """
        super().__init__(
            f"Invalid order at position {index}: {reason}",
            details={"index": index, "errors": errors or []},
        )
        self.index = index
        self.errors = errors or []
