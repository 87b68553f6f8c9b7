"""
Subscription Models and Schemas
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from sqlalchemy import CheckConstraint, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from subtracker.db import Base

from .periods import format_month_year

# ============================================================================
# Database Models
# ============================================================================


class Subscription(Base):
    """Subscription database model.

    ``start_date`` and ``end_date`` hold the first instant of a month (UTC);
    a NULL ``end_date`` marks an open-ended subscription.
    """

    __tablename__ = "subscriptions"
    __table_args__ = (CheckConstraint("price > 0", name="ck_subscriptions_price_positive"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    service_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, service_name={self.service_name!r}, "
            f"price={self.price}, user_id={self.user_id})>"
        )


# ============================================================================
# Pydantic Schemas
# ============================================================================


class SubscriptionCreateRequest(BaseModel):
    """Request to create a subscription."""

    service_name: str = Field(..., min_length=1, max_length=255, description="Service label")
    price: int = Field(..., gt=0, description="Monthly price")
    user_id: UUID = Field(..., description="Owning user")
    start_date: str = Field(..., min_length=1, description="First month, MM-YYYY")
    end_date: str | None = Field(default=None, description="Last month, MM-YYYY")


class SubscriptionUpdateRequest(BaseModel):
    """Partial update.

    Empty ``service_name``/``start_date`` and non-positive ``price`` leave the
    stored value as is. An absent or empty ``end_date`` clears it.
    """

    service_name: str | None = Field(default=None, max_length=255)
    price: int | None = None
    start_date: str | None = None
    end_date: str | None = None


class AggregateRequest(BaseModel):
    """Total cost over a month range."""

    start_date: str = Field(..., min_length=1, description="First month, MM-YYYY")
    end_date: str = Field(..., min_length=1, description="Last month, MM-YYYY")
    user_id: UUID | None = None
    service_name: str | None = None


class SubscriptionResponse(BaseModel):
    """Subscription response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    service_name: str
    price: int
    user_id: UUID
    start_date: datetime
    end_date: datetime | None = None

    @field_serializer("start_date")
    def serialize_start_date(self, value: datetime) -> str:
        return format_month_year(value)

    @field_serializer("end_date")
    def serialize_end_date(self, value: datetime | None) -> str | None:
        return format_month_year(value) if value is not None else None


class AggregateResponse(BaseModel):
    """Aggregation result."""

    total: int
