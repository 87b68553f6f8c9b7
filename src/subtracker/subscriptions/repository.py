"""
Persistence gateway for subscriptions.

``SubscriptionRepository`` is the contract the service depends on;
``SQLAlchemySubscriptionRepository`` implements it with one statement and
one commit per call.
"""

import time
from datetime import datetime
from typing import Protocol
from uuid import UUID

import structlog
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import PersistenceError, SubscriptionNotFoundError
from .models import Subscription

logger = structlog.get_logger(__name__)


class SubscriptionRepository(Protocol):
    """Storage operations used by ``SubscriptionService``."""

    async def create(self, subscription: Subscription) -> None: ...

    async def get_by_id(self, subscription_id: UUID) -> Subscription: ...

    async def update(self, subscription: Subscription) -> None: ...

    async def delete(self, subscription_id: UUID) -> None: ...

    async def list(
        self, user_id: UUID | None = None, service_name: str | None = None
    ) -> list[Subscription]: ...

    async def sum_by_overlap(
        self,
        window_start: datetime,
        window_end: datetime,
        user_id: UUID | None = None,
        service_name: str | None = None,
    ) -> int: ...


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


class SQLAlchemySubscriptionRepository:
    """Subscription storage backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(
        self,
        exc: SQLAlchemyError,
        operation: str,
        started: float,
        subscription_id: UUID | None = None,
    ) -> PersistenceError:
        await self.session.rollback()
        logger.error(
            "Database operation failed",
            operation=operation,
            subscription_id=str(subscription_id) if subscription_id else None,
            error=str(exc),
            duration_ms=_elapsed_ms(started),
        )
        return PersistenceError(operation, subscription_id)

    async def create(self, subscription: Subscription) -> None:
        logger.info(
            "Creating subscription in database",
            subscription_id=str(subscription.id),
            service_name=subscription.service_name,
            user_id=str(subscription.user_id),
        )
        started = time.perf_counter()
        try:
            self.session.add(subscription)
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "create", started, subscription.id) from exc

        logger.info(
            "Created subscription in database",
            subscription_id=str(subscription.id),
            duration_ms=_elapsed_ms(started),
        )

    async def get_by_id(self, subscription_id: UUID) -> Subscription:
        started = time.perf_counter()
        try:
            subscription = await self.session.get(Subscription, subscription_id)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "get", started, subscription_id) from exc

        if subscription is None:
            logger.warning(
                "Subscription not found in database",
                subscription_id=str(subscription_id),
                duration_ms=_elapsed_ms(started),
            )
            raise SubscriptionNotFoundError(subscription_id)

        logger.debug(
            "Retrieved subscription from database",
            subscription_id=str(subscription_id),
            service_name=subscription.service_name,
            duration_ms=_elapsed_ms(started),
        )
        return subscription

    async def update(self, subscription: Subscription) -> None:
        started = time.perf_counter()
        try:
            self.session.add(subscription)
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "update", started, subscription.id) from exc

        logger.info(
            "Updated subscription in database",
            subscription_id=str(subscription.id),
            duration_ms=_elapsed_ms(started),
        )

    async def delete(self, subscription_id: UUID) -> None:
        started = time.perf_counter()
        try:
            result = await self.session.execute(
                delete(Subscription).where(Subscription.id == subscription_id)
            )
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "delete", started, subscription_id) from exc

        if result.rowcount == 0:
            logger.warning(
                "No subscription deleted",
                subscription_id=str(subscription_id),
                duration_ms=_elapsed_ms(started),
            )
            raise SubscriptionNotFoundError(subscription_id)

        logger.info(
            "Deleted subscription from database",
            subscription_id=str(subscription_id),
            duration_ms=_elapsed_ms(started),
        )

    async def list(
        self, user_id: UUID | None = None, service_name: str | None = None
    ) -> list[Subscription]:
        stmt = select(Subscription)
        if user_id is not None:
            stmt = stmt.where(Subscription.user_id == user_id)
        if service_name:
            stmt = stmt.where(Subscription.service_name == service_name)

        started = time.perf_counter()
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "list", started) from exc

        subscriptions = list(result.scalars().all())
        logger.debug(
            "Listed subscriptions from database",
            user_id=str(user_id) if user_id else None,
            service_name=service_name,
            count=len(subscriptions),
            duration_ms=_elapsed_ms(started),
        )
        return subscriptions

    async def sum_by_overlap(
        self,
        window_start: datetime,
        window_end: datetime,
        user_id: UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        stmt = (
            select(func.coalesce(func.sum(Subscription.price), 0))
            .where(Subscription.start_date <= window_end)
            .where(or_(Subscription.end_date >= window_start, Subscription.end_date.is_(None)))
        )
        if user_id is not None:
            stmt = stmt.where(Subscription.user_id == user_id)
        if service_name is not None:
            stmt = stmt.where(Subscription.service_name == service_name)

        started = time.perf_counter()
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise await self._fail(exc, "aggregate", started) from exc

        total = int(result.scalar_one())
        logger.debug(
            "Aggregated subscription prices",
            window_start=window_start.isoformat(),
            window_end=window_end.isoformat(),
            user_id=str(user_id) if user_id else None,
            service_name=service_name,
            total=total,
            duration_ms=_elapsed_ms(started),
        )
        return total
