"""
Stripe Integration Service
Handles billing portal sessions, subscription lookups and webhook verification
"""
import logging
from typing import Any, Dict, Optional

import stripe

from esttetica.core.config import settings
from esttetica.core.exceptions import BadRequestError, IntegrationError

logger = logging.getLogger(__name__)


def _as_dict(obj: Any) -> Dict[str, Any]:
    # StripeObject to plain nested dicts
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    return dict(obj)


class StripeService:
    """Stripe payment provider integration"""

    def __init__(self, secret_key: str, api_version: Optional[str] = None):
        """
        Initialize Stripe service

        Args:
            secret_key: Stripe secret key from dashboard
            api_version: Pinned Stripe API version
        """
        self.secret_key = secret_key
        self.api_version = api_version or settings.STRIPE_API_VERSION

    @property
    def _request_options(self) -> Dict[str, Any]:
        return {"api_key": self.secret_key, "stripe_version": self.api_version}

    def create_billing_portal_session(self, customer_id: str, return_url: str) -> str:
        """
        Create a hosted billing portal session

        Args:
            customer_id: Stripe customer ID (cus_xxx)
            return_url: Where Stripe sends the user back to

        Returns:
            Portal session URL
        """
        try:
            session = stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=return_url,
                **self._request_options,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe billing portal error for {customer_id}: {e}")
            raise IntegrationError(f"Billing portal session failed: {e}")
        return session.url

    def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """
        Fetch full subscription details from Stripe

        Args:
            subscription_id: Stripe subscription ID (sub_xxx)

        Returns:
            Subscription as a plain dict
        """
        try:
            subscription = stripe.Subscription.retrieve(subscription_id, **self._request_options)
        except stripe.StripeError as e:
            logger.error(f"Stripe retrieve error for {subscription_id}: {e}")
            raise IntegrationError(f"Subscription lookup failed: {e}")
        return _as_dict(subscription)

    def cancel_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Cancel a subscription immediately, without prorating the final invoice"""
        try:
            subscription = stripe.Subscription.cancel(
                subscription_id,
                prorate=False,
                **self._request_options,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe cancel error for {subscription_id}: {e}")
            raise IntegrationError(f"Subscription cancellation failed: {e}")
        return _as_dict(subscription)

    def construct_event(self, payload: bytes, signature: str, secret: str):
        """
        Verify a webhook payload against its Stripe-Signature header

        Raises:
            BadRequestError: malformed payload or signature mismatch
        """
        try:
            return stripe.Webhook.construct_event(payload, signature, secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise BadRequestError("Invalid signature")


# Initialize gateway service
stripe_service = StripeService(settings.STRIPE_SECRET_KEY)


def get_stripe_service() -> StripeService:
    """Dependency returning the payment provider"""
    return stripe_service
