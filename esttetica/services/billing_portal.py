"""
Billing portal hand-off
Looks up the caller's Stripe customer and opens a hosted portal session
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from esttetica.core.exceptions import BadRequestError, NotFoundError
from esttetica.models.subscription import Subscription
from esttetica.services.stripe_service import StripeService

logger = logging.getLogger(__name__)


def parse_return_url(body: Any) -> str:
    """Extract a non-empty return_url from a decoded JSON body"""
    return_url = body.get("return_url") if isinstance(body, dict) else None
    if not return_url or not isinstance(return_url, str):
        raise BadRequestError("return_url is required")
    return return_url


def get_customer_id(db: Session, user_id: str) -> Optional[str]:
    """Stored Stripe customer id of a user, if any"""
    row = (
        db.query(Subscription.stripe_customer_id)
        .filter(Subscription.user_id == user_id)
        .first()
    )
    return row[0] if row else None


def open_billing_portal(db: Session, stripe: StripeService, user_id: str, return_url: str) -> str:
    """
    Create a billing portal session for a user

    Args:
        db: Database session
        stripe: Payment provider
        user_id: Authenticated user id
        return_url: Page the portal returns to

    Returns:
        Portal session URL

    Raises:
        NotFoundError: the user has no stored customer id
    """
    customer_id = get_customer_id(db, user_id)
    if not customer_id:
        raise NotFoundError("No active subscription found")

    url = stripe.create_billing_portal_session(customer_id, return_url)
    logger.info(f"Billing portal session created for user {user_id}")
    return url
