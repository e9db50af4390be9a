"""
Cancellation Service
Handles cancellation requests, their withdrawal, and the delayed
processing that ends subscriptions at Stripe after the grace period
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from esttetica.core.config import settings
from esttetica.core.exceptions import BadRequestError, ConflictError, NotFoundError
from esttetica.models.subscription import Subscription, SubscriptionStatus
from esttetica.services.entitlement import is_within_refund_window
from esttetica.services.stripe_service import StripeService

logger = logging.getLogger(__name__)

OTHER_REASON = "Outro motivo"

CANCELLATION_REASONS = [
    "Não estou usando o suficiente",
    "Muito caro para o meu orçamento",
    "Encontrei uma alternativa melhor",
    "Problemas técnicos",
    "Mudança no meu negócio",
    OTHER_REASON,
]


class CancellationService:
    """Cancellation lifecycle of a user's subscription"""

    def __init__(self, db: Session):
        self.db = db

    def _get_subscription(self, user_id: str) -> Subscription:
        subscription = self.db.query(Subscription).filter(Subscription.user_id == user_id).first()
        if subscription is None:
            raise NotFoundError("No subscription found")
        return subscription

    def request_cancellation(
        self,
        user_id: str,
        reason: str,
        custom_reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Subscription:
        """
        Record a cancellation request

        Inside the refund window the subscription is ended by the pending
        cancellation job; after it, Stripe ends it at the period end.
        """
        if reason not in CANCELLATION_REASONS:
            raise BadRequestError("Invalid cancellation reason")
        if reason == OTHER_REASON:
            if not custom_reason or not custom_reason.strip():
                raise BadRequestError("custom_reason is required")
            reason = custom_reason.strip()

        now = now or datetime.utcnow()
        subscription = self._get_subscription(user_id)

        subscription.status = SubscriptionStatus.CANCELLATION_REQUESTED.value
        subscription.cancellation_requested_at = now
        subscription.cancellation_reason = reason
        subscription.cancel_at_period_end = not is_within_refund_window(subscription, now)

        self.db.commit()
        self.db.refresh(subscription)
        logger.info(f"Cancellation requested for user {user_id}")
        return subscription

    def withdraw_cancellation(self, user_id: str) -> Subscription:
        """Return a subscription with a pending request to active"""
        subscription = self._get_subscription(user_id)
        if subscription.status != SubscriptionStatus.CANCELLATION_REQUESTED.value:
            raise ConflictError("No pending cancellation request")

        subscription.status = SubscriptionStatus.ACTIVE.value
        subscription.cancellation_requested_at = None
        subscription.cancellation_reason = None

        self.db.commit()
        self.db.refresh(subscription)
        logger.info(f"Cancellation withdrawn for user {user_id}")
        return subscription


def process_pending_cancellations(
    db: Session,
    stripe: StripeService,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    End subscriptions whose cancellation request is older than the grace period.

    Each row is handled on its own; failures are collected and reported
    without stopping the batch.
    """
    now = now or datetime.utcnow()
    cutoff = now - timedelta(days=settings.CANCELLATION_GRACE_DAYS)

    pending: List[Subscription] = (
        db.query(Subscription)
        .filter(
            Subscription.status == SubscriptionStatus.CANCELLATION_REQUESTED.value,
            Subscription.cancellation_requested_at < cutoff,
        )
        .all()
    )

    if not pending:
        return {
            "success": True,
            "message": "No pending cancellations to process",
            "processed": 0,
            "total": 0,
        }

    processed = 0
    errors: List[str] = []

    for subscription in pending:
        if subscription.stripe_subscription_id:
            try:
                stripe.cancel_subscription(subscription.stripe_subscription_id)
            except Exception as e:
                logger.error(f"Error canceling Stripe subscription {subscription.stripe_subscription_id}: {e}")
                errors.append(
                    f"Failed to cancel Stripe subscription {subscription.stripe_subscription_id}: {e}"
                )
                continue

        try:
            subscription.status = SubscriptionStatus.CANCELED.value
            subscription.canceled_at = now
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating subscription {subscription.id}: {e}")
            errors.append(f"Failed to update subscription {subscription.id}: {e}")
            continue

        processed += 1
        logger.info(f"Successfully canceled subscription {subscription.id}")

    result = {
        "success": True,
        "message": f"Processed {processed} cancellations",
        "processed": processed,
        "total": len(pending),
    }
    if errors:
        result["errors"] = errors
    return result
