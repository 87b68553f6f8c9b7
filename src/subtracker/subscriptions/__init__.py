"""
Subscription records: storage, business rules and HTTP endpoints.

Usage Examples:

    from subtracker.subscriptions import SubscriptionService
    from subtracker.subscriptions.repository import SQLAlchemySubscriptionRepository

    service = SubscriptionService(SQLAlchemySubscriptionRepository(session))
    subscription = await service.create(
        service_name="Netflix",
        price=1000,
        user_id=user_id,
        start_date="07-2025",
        end_date="10-2025",
    )
    total = await service.aggregate("07-2025", "10-2025", user_id=user_id)
"""

from .exceptions import (
    InvalidDateError,
    InvalidDateRangeError,
    InvalidSubscriptionIdError,
    PersistenceError,
    SubscriptionError,
    SubscriptionNotFoundError,
)
from .models import (
    AggregateRequest,
    AggregateResponse,
    Subscription,
    SubscriptionCreateRequest,
    SubscriptionResponse,
    SubscriptionUpdateRequest,
)
from .repository import SQLAlchemySubscriptionRepository, SubscriptionRepository
from .router import router as subscriptions_router
from .service import SubscriptionService

__all__ = [
    # Errors
    "SubscriptionError",
    "InvalidDateError",
    "InvalidDateRangeError",
    "InvalidSubscriptionIdError",
    "SubscriptionNotFoundError",
    "PersistenceError",
    # Models and schemas
    "Subscription",
    "SubscriptionCreateRequest",
    "SubscriptionUpdateRequest",
    "SubscriptionResponse",
    "AggregateRequest",
    "AggregateResponse",
    # Persistence and service
    "SubscriptionRepository",
    "SQLAlchemySubscriptionRepository",
    "SubscriptionService",
    # Router
    "subscriptions_router",
]
