"""
Subscription Models
Database models for the subscription of record and its event history
"""
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import String, Float, DateTime, Boolean, Text, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from esttetica.db.base import Base, TimestampMixin


class SubscriptionStatus(str, Enum):
    """Subscription status enum"""
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    INCOMPLETE = "incomplete"
    INACTIVE = "inactive"
    CANCELLATION_REQUESTED = "cancellation_requested"
    CANCELED = "canceled"


class BillingCycle(str, Enum):
    """Billing cycle of a plan"""
    DAILY = "daily"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class HistoryEventType(str, Enum):
    """Kinds of provider events recorded in the history"""
    CREATED = "created"
    UPDATED = "updated"
    CANCELLATION_REQUESTED = "cancellation_requested"
    CANCELLED = "cancelled"


class Subscription(TimestampMixin, Base):
    """Current subscription of a user; at most one row per user"""
    __tablename__ = "subscriptions"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Identity provider user id
    user_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)

    # Stripe references
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)

    # Plan
    status: Mapped[str] = mapped_column(String(32), default=SubscriptionStatus.INACTIVE.value, nullable=False)
    plan_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    plan_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    price_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Billing period
    current_period_start: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    current_period_end: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    next_billing_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Cancellation
    cancel_at_period_end: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    cancellation_requested_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    canceled_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<Subscription user={self.user_id} status={self.status}>"


class SubscriptionHistory(Base):
    """Append-only audit log of provider events applied to subscriptions"""
    __tablename__ = "subscription_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    stripe_checkout_session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    plan_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    price_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    amount_paid: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), default="BRL", nullable=False)
    billing_cycle: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    stripe_event_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    event_metadata: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
