"""
Subscription exceptions.

Each error carries a machine-readable code, the HTTP status it maps to
and context fields identifying the offending input or record.
"""

from typing import Any
from uuid import UUID


class SubscriptionError(Exception):
    """
    Base subscription error with context.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for API responses
        status_code: HTTP status code for this error type
        context: Additional context data about the error
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        status_code: int = 400,
        context: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or "SUBSCRIPTION_ERROR"
        self.status_code = status_code
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "context": self.context,
        }


class InvalidDateError(SubscriptionError):
    """Month-year text could not be parsed."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            f"invalid {field}: expected MM-YYYY, got {value!r}",
            "INVALID_DATE",
            status_code=400,
            context={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InvalidDateRangeError(SubscriptionError):
    """End month precedes start month."""

    def __init__(self, start_date: str, end_date: str) -> None:
        super().__init__(
            "end_date must not be before start_date",
            "INVALID_DATE_RANGE",
            status_code=400,
            context={"start_date": start_date, "end_date": end_date},
        )


class InvalidSubscriptionIdError(SubscriptionError):
    """Path identifier is not a UUID."""

    def __init__(self, value: str) -> None:
        super().__init__(
            "invalid subscription ID",
            "INVALID_SUBSCRIPTION_ID",
            status_code=400,
            context={"value": value},
        )


class SubscriptionNotFoundError(SubscriptionError):
    """No subscription with the given identifier."""

    def __init__(self, subscription_id: UUID) -> None:
        super().__init__(
            "subscription not found",
            "SUBSCRIPTION_NOT_FOUND",
            status_code=404,
            context={"subscription_id": str(subscription_id)},
        )
        self.subscription_id = subscription_id


class PersistenceError(SubscriptionError):
    """The underlying store failed.

    The message stays generic; the driver error is chained as ``__cause__``
    and logged where it is raised.
    """

    def __init__(self, operation: str, subscription_id: UUID | None = None) -> None:
        context: dict[str, Any] = {"operation": operation}
        if subscription_id is not None:
            context["subscription_id"] = str(subscription_id)
        super().__init__(
            f"failed to {operation} subscription",
            "PERSISTENCE_ERROR",
            status_code=500,
            context=context,
        )
        self.operation = operation
