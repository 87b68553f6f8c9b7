"""
FastAPI router for subscription endpoints.
"""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_async_session
from .exceptions import InvalidSubscriptionIdError
from .models import (
    AggregateRequest,
    AggregateResponse,
    SubscriptionCreateRequest,
    SubscriptionResponse,
    SubscriptionUpdateRequest,
)
from .repository import SQLAlchemySubscriptionRepository
from .service import SubscriptionService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Subscriptions"])


def get_subscription_service(
    session: AsyncSession = Depends(get_async_session),
) -> SubscriptionService:
    """Build the service for the current request's session."""
    return SubscriptionService(SQLAlchemySubscriptionRepository(session))


def parse_subscription_id(subscription_id: str) -> UUID:
    """Path parameter parser; rejects non-UUID identifiers with 400."""
    try:
        return UUID(subscription_id)
    except ValueError:
        logger.warning("Invalid subscription ID", id_param=subscription_id)
        raise InvalidSubscriptionIdError(subscription_id) from None


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    payload: SubscriptionCreateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """Create a subscription."""
    subscription = await service.create(
        service_name=payload.service_name,
        price=payload.price,
        user_id=payload.user_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return SubscriptionResponse.model_validate(subscription)


@router.get("", response_model=list[SubscriptionResponse])
async def list_subscriptions(
    user_id: str | None = Query(None, description="Filter by owning user"),
    service_name: str | None = Query(None, description="Filter by exact service name"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[SubscriptionResponse]:
    """
    List subscriptions.

    A malformed ``user_id`` is ignored rather than rejected, so the listing
    falls back to all users.
    """
    user_filter: UUID | None = None
    if user_id:
        try:
            user_filter = UUID(user_id)
        except ValueError:
            logger.warning("Invalid user_id parameter provided", user_id_param=user_id)

    subscriptions = await service.list(user_id=user_filter, service_name=service_name or None)
    return [SubscriptionResponse.model_validate(s) for s in subscriptions]


@router.post("/aggregate", response_model=AggregateResponse)
async def aggregate_subscriptions(
    payload: AggregateRequest,
    service: SubscriptionService = Depends(get_subscription_service),
) -> AggregateResponse:
    """Total price of subscriptions active within the month range."""
    total = await service.aggregate(
        start_date=payload.start_date,
        end_date=payload.end_date,
        user_id=payload.user_id,
        service_name=payload.service_name,
    )
    return AggregateResponse(total=total)


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: UUID = Depends(parse_subscription_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """Get a subscription by ID."""
    subscription = await service.get_by_id(subscription_id)
    return SubscriptionResponse.model_validate(subscription)


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
async def update_subscription(
    payload: SubscriptionUpdateRequest,
    subscription_id: UUID = Depends(parse_subscription_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionResponse:
    """
    Update a subscription.

    Omitting ``end_date`` clears it.
    """
    subscription = await service.update(
        subscription_id,
        service_name=payload.service_name,
        price=payload.price,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return SubscriptionResponse.model_validate(subscription)


@router.delete("/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: UUID = Depends(parse_subscription_id),
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    """Delete a subscription permanently."""
    await service.delete(subscription_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
