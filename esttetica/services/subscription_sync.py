"""
Stripe webhook sync

Applies checkout and subscription lifecycle events to the subscriptions
table and records each one in subscription_history:
- checkout.session.completed: new or renewed subscription
- customer.subscription.updated: cancellation scheduled or withdrawn
- customer.subscription.deleted: subscription ended
"""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from esttetica.core.exceptions import BadRequestError, NotFoundError
from esttetica.models.subscription import (
    HistoryEventType,
    Subscription,
    SubscriptionHistory,
    SubscriptionStatus,
)
from esttetica.services.plans import get_plan_details, price_id_of
from esttetica.services.stripe_service import StripeService
from esttetica.services.supabase_service import SupabaseService

logger = logging.getLogger(__name__)

DEFAULT_PRICE_ID = "price_premium"
DEFAULT_CURRENCY = "BRL"


def from_unix(timestamp: Optional[int]) -> Optional[datetime]:
    """Stripe epoch seconds to naive UTC datetime"""
    if not timestamp:
        return None
    return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).replace(tzinfo=None)


def _event_suffix() -> int:
    return int(time.time() * 1000)


def _find_by_stripe_subscription(db: Session, stripe_subscription_id: str) -> Optional[Subscription]:
    return (
        db.query(Subscription)
        .filter(Subscription.stripe_subscription_id == stripe_subscription_id)
        .first()
    )


def handle_checkout_completed(
    db: Session,
    stripe: StripeService,
    identity: SupabaseService,
    session: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Handle successful checkout session.
    Creates or updates the subscription record for the user.
    """
    logger.info(f"Processing checkout session completed: {session.get('id')}")
    metadata = session.get("metadata") or {}

    # User id from metadata, falling back to the customer e-mail
    user_id = metadata.get("user_id")
    if not user_id:
        customer_email = (session.get("customer_details") or {}).get("email")
        if not customer_email:
            logger.error("No user_id in metadata and no customer email")
            raise BadRequestError("Missing user identification")

        user_id = identity.find_user_id_by_email(customer_email)
        if not user_id:
            logger.error(f"User not found with email: {customer_email}")
            raise NotFoundError("User not found")

    # Billing dates come from the Stripe subscription
    stripe_subscription: Dict[str, Any] = {}
    if session.get("subscription"):
        try:
            stripe_subscription = stripe.retrieve_subscription(session["subscription"])
        except Exception as e:
            logger.error(f"Error retrieving subscription from Stripe: {e}")

    period_start = from_unix(stripe_subscription.get("current_period_start"))
    period_end = from_unix(stripe_subscription.get("current_period_end"))

    price_id = metadata.get("price_id") or price_id_of(stripe_subscription)
    plan = get_plan_details(price_id)
    stored_price_id = price_id or DEFAULT_PRICE_ID

    amount_total = session.get("amount_total")
    db.add(SubscriptionHistory(
        user_id=user_id,
        stripe_customer_id=session.get("customer"),
        stripe_subscription_id=session.get("subscription"),
        stripe_checkout_session_id=session.get("id"),
        event_type=HistoryEventType.CREATED.value,
        status=SubscriptionStatus.ACTIVE.value,
        plan_name=plan["plan_name"],
        price_id=stored_price_id,
        amount_paid=amount_total / 100 if amount_total else None,
        currency=(session.get("currency") or DEFAULT_CURRENCY).upper(),
        billing_cycle=plan["billing_cycle"],
        stripe_event_id=f"checkout_{session.get('id')}",
        event_metadata={
            "checkout_session": session.get("id"),
            "customer_email": (session.get("customer_details") or {}).get("email"),
            "payment_status": session.get("payment_status"),
        },
    ))

    # One row per user: match on customer first, then on user
    subscription = None
    if session.get("customer"):
        subscription = (
            db.query(Subscription)
            .filter(Subscription.stripe_customer_id == session["customer"])
            .first()
        )
    if subscription is None:
        subscription = db.query(Subscription).filter(Subscription.user_id == user_id).first()

    if subscription is None:
        subscription = Subscription(user_id=user_id)
        db.add(subscription)

    subscription.stripe_customer_id = session.get("customer")
    subscription.stripe_subscription_id = session.get("subscription")
    subscription.status = SubscriptionStatus.ACTIVE.value
    subscription.plan_name = plan["plan_name"]
    subscription.plan_type = plan["billing_cycle"]
    subscription.price_id = stored_price_id
    subscription.next_billing_date = period_end
    subscription.current_period_start = period_start
    subscription.current_period_end = period_end

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error processing subscription: {e}")
        raise

    logger.info(f"Created/updated subscription for user {user_id}: {plan['plan_name']}")
    return {
        "success": True,
        "message": "Subscription updated successfully",
        "subscription_id": session.get("subscription"),
        "user_id": user_id,
    }


def handle_subscription_updated(db: Session, stripe_subscription: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle subscription updates.
    Tracks cancel-at-period-end requests and their withdrawal.
    """
    subscription_id = stripe_subscription["id"]
    logger.info(f"Processing subscription update: {subscription_id}")

    cancel_at_period_end = bool(stripe_subscription.get("cancel_at_period_end"))
    existing = _find_by_stripe_subscription(db, subscription_id)

    if existing:
        price_id = price_id_of(stripe_subscription)
        plan = get_plan_details(price_id)
        db.add(SubscriptionHistory(
            user_id=existing.user_id,
            stripe_customer_id=stripe_subscription.get("customer"),
            stripe_subscription_id=subscription_id,
            event_type=(
                HistoryEventType.CANCELLATION_REQUESTED.value
                if cancel_at_period_end else HistoryEventType.UPDATED.value
            ),
            status=stripe_subscription.get("status"),
            plan_name=plan["plan_name"],
            price_id=price_id,
            billing_cycle=plan["billing_cycle"],
            stripe_event_id=f"subscription_update_{subscription_id}_{_event_suffix()}",
            event_metadata={
                "cancel_at_period_end": cancel_at_period_end,
                "current_period_start": stripe_subscription.get("current_period_start"),
                "current_period_end": stripe_subscription.get("current_period_end"),
            },
        ))

        if cancel_at_period_end:
            existing.status = SubscriptionStatus.CANCELLATION_REQUESTED.value
            existing.cancel_at_period_end = True
            existing.current_period_start = from_unix(stripe_subscription.get("current_period_start"))
            existing.current_period_end = from_unix(stripe_subscription.get("current_period_end"))
            logger.info(f"Subscription marked for cancellation at period end: {subscription_id}")
        elif existing.cancel_at_period_end and existing.status == SubscriptionStatus.CANCELLATION_REQUESTED.value:
            existing.status = SubscriptionStatus.ACTIVE.value
            existing.cancellation_requested_at = None
            existing.cancel_at_period_end = False
            existing.canceled_at = None
            existing.current_period_end = from_unix(stripe_subscription.get("current_period_end"))
            logger.info(f"Subscription reactivated: {subscription_id}")
    else:
        logger.warning(f"Subscription {subscription_id} not found in database")

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating subscription {subscription_id}: {e}")
        raise

    return {
        "success": True,
        "message": "Subscription update processed successfully",
        "subscription_id": subscription_id,
    }


def handle_subscription_deleted(db: Session, stripe_subscription: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle subscription cancellation.
    Marks the subscription canceled and clears any pending request flag.
    """
    subscription_id = stripe_subscription["id"]
    logger.info(f"Processing subscription cancellation (deleted): {subscription_id}")

    canceled_at = from_unix(stripe_subscription.get("canceled_at")) or datetime.utcnow()
    existing = _find_by_stripe_subscription(db, subscription_id)

    if existing is None:
        logger.warning(f"No existing subscription found for stripe_subscription_id: {subscription_id}")
        raise NotFoundError("Subscription not found in database")

    price_id = price_id_of(stripe_subscription)
    plan = get_plan_details(price_id)
    db.add(SubscriptionHistory(
        user_id=existing.user_id,
        stripe_customer_id=stripe_subscription.get("customer"),
        stripe_subscription_id=subscription_id,
        event_type=HistoryEventType.CANCELLED.value,
        status=SubscriptionStatus.CANCELED.value,
        plan_name=plan["plan_name"],
        price_id=price_id,
        billing_cycle=plan["billing_cycle"],
        stripe_event_id=f"subscription_cancel_{subscription_id}_{_event_suffix()}",
        event_metadata={
            "canceled_at": canceled_at.isoformat(),
            "cancellation_reason": (stripe_subscription.get("cancellation_details") or {}).get("reason"),
        },
    ))

    existing.status = SubscriptionStatus.CANCELED.value
    existing.canceled_at = canceled_at
    existing.cancel_at_period_end = False

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error canceling subscription {subscription_id}: {e}")
        raise

    logger.info(f"Subscription canceled successfully: {subscription_id}")
    return {
        "success": True,
        "message": "Subscription canceled successfully",
        "subscription_id": subscription_id,
    }


def process_event(
    db: Session,
    stripe: StripeService,
    identity: SupabaseService,
    event: Dict[str, Any],
) -> Dict[str, Any]:
    """Dispatch a decoded Stripe event to its handler"""
    event_type = event.get("type")
    event_data = (event.get("data") or {}).get("object") or {}
    logger.info(f"Processing event: {event_type}")

    if event_type == "checkout.session.completed":
        return handle_checkout_completed(db, stripe, identity, event_data)
    if event_type == "customer.subscription.updated":
        return handle_subscription_updated(db, event_data)
    if event_type == "customer.subscription.deleted":
        return handle_subscription_deleted(db, event_data)

    logger.info(f"Unhandled event type: {event_type}")
    return {"received": True, "message": "Event processed successfully"}
