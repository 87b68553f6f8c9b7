"""
Subscription service.

Validates request data, applies the partial-update policy and computes the
aggregation window before delegating to the repository.
"""

from uuid import UUID, uuid4

import structlog

from .exceptions import InvalidDateRangeError
from .models import Subscription
from .periods import format_month_year, month_start, month_window, parse_month_year
from .repository import SubscriptionRepository

logger = structlog.get_logger(__name__)


class SubscriptionService:
    """CRUD and cost aggregation for subscriptions."""

    def __init__(self, repository: SubscriptionRepository):
        self.repository = repository

    async def create(
        self,
        service_name: str,
        price: int,
        user_id: UUID,
        start_date: str,
        end_date: str | None = None,
    ) -> Subscription:
        """Create a subscription; ``end_date`` may be empty for open-ended ones."""
        logger.info(
            "Creating subscription",
            service_name=service_name,
            price=price,
            user_id=str(user_id),
            start_date=start_date,
            end_date=end_date,
        )

        start = parse_month_year(start_date, "start_date")
        end = None
        if end_date:
            end = parse_month_year(end_date, "end_date")
            if end < start:
                logger.warning(
                    "End date is before start date", start_date=start_date, end_date=end_date
                )
                raise InvalidDateRangeError(start_date, end_date)

        subscription = Subscription(
            id=uuid4(),
            service_name=service_name,
            price=price,
            user_id=user_id,
            start_date=start,
            end_date=end,
        )
        await self.repository.create(subscription)

        logger.info("Created subscription", subscription_id=str(subscription.id))
        return subscription

    async def get_by_id(self, subscription_id: UUID) -> Subscription:
        """Get a subscription or raise ``SubscriptionNotFoundError``."""
        return await self.repository.get_by_id(subscription_id)

    async def update(
        self,
        subscription_id: UUID,
        service_name: str | None = None,
        price: int | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> Subscription:
        """Apply a partial update.

        Empty ``service_name``/``start_date`` and a non-positive ``price`` keep
        the stored values. ``end_date`` is always applied: empty text clears it,
        turning the subscription open-ended even if the caller only meant to
        leave it alone.
        """
        logger.info(
            "Updating subscription",
            subscription_id=str(subscription_id),
            service_name=service_name,
            price=price,
            start_date=start_date,
            end_date=end_date,
        )

        subscription = await self.repository.get_by_id(subscription_id)
        updated_fields: list[str] = []

        if service_name:
            subscription.service_name = service_name
            updated_fields.append("service_name")

        if price is not None and price > 0:
            subscription.price = price
            updated_fields.append("price")

        if start_date:
            subscription.start_date = parse_month_year(start_date, "start_date")
            updated_fields.append("start_date")

        if end_date:
            end = parse_month_year(end_date, "end_date")
            start = month_start(subscription.start_date)
            if end < start:
                logger.warning(
                    "End date is before start date",
                    subscription_id=str(subscription_id),
                    start_date=format_month_year(start),
                    end_date=end_date,
                )
                raise InvalidDateRangeError(format_month_year(start), end_date)
            subscription.end_date = end
            updated_fields.append("end_date")
        else:
            subscription.end_date = None
            updated_fields.append("end_date_cleared")

        logger.info(
            "Fields to be updated",
            subscription_id=str(subscription_id),
            updated_fields=updated_fields,
        )
        await self.repository.update(subscription)
        return subscription

    async def delete(self, subscription_id: UUID) -> None:
        """Delete permanently; raises ``SubscriptionNotFoundError`` if absent."""
        logger.info("Deleting subscription", subscription_id=str(subscription_id))
        await self.repository.delete(subscription_id)

    async def list(
        self, user_id: UUID | None = None, service_name: str | None = None
    ) -> list[Subscription]:
        """List subscriptions, optionally filtered by user and/or service name."""
        subscriptions = await self.repository.list(user_id=user_id, service_name=service_name)
        logger.info(
            "Listed subscriptions",
            user_id=str(user_id) if user_id else None,
            service_name=service_name,
            count=len(subscriptions),
        )
        return subscriptions

    async def aggregate(
        self,
        start_date: str,
        end_date: str,
        user_id: UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        """Sum prices of subscriptions active at any point in the month range.

        A subscription counts when it starts on or before the last second of
        ``end_date``'s month and ends on or after the first instant of
        ``start_date``'s month, or never ends.
        """
        start = parse_month_year(start_date, "start_date")
        end = parse_month_year(end_date, "end_date")
        if end < start:
            raise InvalidDateRangeError(start_date, end_date)

        window_start, window_end = month_window(start, end)
        logger.debug(
            "Calculated aggregation period",
            window_start=window_start.isoformat(),
            window_end=window_end.isoformat(),
        )

        total = await self.repository.sum_by_overlap(
            window_start, window_end, user_id=user_id, service_name=service_name
        )

        logger.info(
            "Aggregated subscription costs",
            start_date=start_date,
            end_date=end_date,
            user_id=str(user_id) if user_id else None,
            service_name=service_name,
            total=total,
        )
        return total
