"""
Fixtures for subscription tests: an in-memory repository and sample users.
"""

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from subtracker.subscriptions.exceptions import PersistenceError, SubscriptionNotFoundError
from subtracker.subscriptions.models import Subscription
from subtracker.subscriptions.service import SubscriptionService

SEEDED_ID = UUID("0b1f6a4e-5a0c-4d3e-9a57-2f0c1d7e8b11")


def _copy(subscription: Subscription) -> Subscription:
    return Subscription(
        id=subscription.id,
        service_name=subscription.service_name,
        price=subscription.price,
        user_id=subscription.user_id,
        start_date=subscription.start_date,
        end_date=subscription.end_date,
    )


class InMemorySubscriptionRepository:
    """Dict-backed repository honouring the same contract as the SQL one."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Subscription] = {}

    async def create(self, subscription: Subscription) -> None:
        self.rows[subscription.id] = _copy(subscription)

    async def get_by_id(self, subscription_id: UUID) -> Subscription:
        row = self.rows.get(subscription_id)
        if row is None:
            raise SubscriptionNotFoundError(subscription_id)
        return _copy(row)

    async def update(self, subscription: Subscription) -> None:
        self.rows[subscription.id] = _copy(subscription)

    async def delete(self, subscription_id: UUID) -> None:
        if self.rows.pop(subscription_id, None) is None:
            raise SubscriptionNotFoundError(subscription_id)

    async def list(
        self, user_id: UUID | None = None, service_name: str | None = None
    ) -> list[Subscription]:
        return [
            _copy(row)
            for row in self.rows.values()
            if (user_id is None or row.user_id == user_id)
            and (not service_name or row.service_name == service_name)
        ]

    async def sum_by_overlap(
        self,
        window_start: datetime,
        window_end: datetime,
        user_id: UUID | None = None,
        service_name: str | None = None,
    ) -> int:
        return sum(
            row.price
            for row in self.rows.values()
            if row.start_date <= window_end
            and (row.end_date is None or row.end_date >= window_start)
            and (user_id is None or row.user_id == user_id)
            and (service_name is None or row.service_name == service_name)
        )


class FailingSubscriptionRepository(InMemorySubscriptionRepository):
    """Fails the chosen operations as if the database were down."""

    OPERATIONS = frozenset({"create", "get", "update", "delete", "list", "aggregate"})

    def __init__(self, fail_on: frozenset[str] = OPERATIONS) -> None:
        super().__init__()
        self.fail_on = fail_on

    def _check(self, operation: str, subscription_id: UUID | None = None) -> None:
        if operation in self.fail_on:
            raise PersistenceError(operation, subscription_id)

    async def create(self, subscription: Subscription) -> None:
        self._check("create", subscription.id)
        await super().create(subscription)

    async def get_by_id(self, subscription_id: UUID) -> Subscription:
        self._check("get", subscription_id)
        return await super().get_by_id(subscription_id)

    async def update(self, subscription: Subscription) -> None:
        self._check("update", subscription.id)
        await super().update(subscription)

    async def delete(self, subscription_id: UUID) -> None:
        self._check("delete", subscription_id)
        await super().delete(subscription_id)

    async def list(
        self, user_id: UUID | None = None, service_name: str | None = None
    ) -> list[Subscription]:
        self._check("list")
        return await super().list(user_id, service_name)

    async def sum_by_overlap(self, *args, **kwargs) -> int:
        self._check("aggregate")
        return await super().sum_by_overlap(*args, **kwargs)


@pytest.fixture
def repository() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


@pytest.fixture
def subscription_service(repository) -> SubscriptionService:
    return SubscriptionService(repository)


@pytest.fixture
def failing_service() -> SubscriptionService:
    return SubscriptionService(FailingSubscriptionRepository())


@pytest.fixture
def user_id() -> UUID:
    return UUID("60601fee-2bf1-4721-ae6f-7636e79a0cba")


@pytest.fixture
def other_user_id() -> UUID:
    return uuid4()


@pytest.fixture
def update_failing_service(user_id) -> SubscriptionService:
    """Service whose store holds one record but fails to write updates."""
    repository = FailingSubscriptionRepository(fail_on=frozenset({"update"}))
    repository.rows[SEEDED_ID] = Subscription(
        id=SEEDED_ID,
        service_name="Netflix",
        price=1000,
        user_id=user_id,
        start_date=datetime(2025, 7, 1, tzinfo=UTC),
        end_date=None,
    )
    return SubscriptionService(repository)


@pytest.fixture
def seeded_id() -> UUID:
    return SEEDED_ID
