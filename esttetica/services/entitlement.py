"""
Subscription entitlement

Decides whether a user is premium from the subscription of record and
builds the payloads the frontend renders for gated features.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from esttetica.core.config import settings
from esttetica.models.subscription import Subscription, SubscriptionStatus
from esttetica.services.plans import PREMIUM_BENEFITS
from esttetica.services.supabase_service import AuthUser

logger = logging.getLogger(__name__)

# A pending cancellation keeps access until it is processed
ENTITLED_STATUSES = frozenset({
    SubscriptionStatus.ACTIVE.value,
    SubscriptionStatus.CANCELLATION_REQUESTED.value,
})

DEFAULT_PROMPT_TITLE = "Funcionalidade Premium"
DEFAULT_PROMPT_DESCRIPTION = "Esta funcionalidade está disponível apenas para usuários com assinatura ativa."


def is_entitled(status: Optional[str]) -> bool:
    return status in ENTITLED_STATUSES


@dataclass(frozen=True)
class SubscriptionState:
    """Read-only subscription context handed to gated consumers"""
    subscription: Optional[Subscription]
    loading: bool = False

    @property
    def is_active(self) -> bool:
        return self.subscription is not None and is_entitled(self.subscription.status)

    @property
    def is_premium(self) -> bool:
        return self.is_active


def pick_current_subscription(rows: Iterable[Subscription]) -> Optional[Subscription]:
    """
    Choose the subscription that represents the user.

    Args:
        rows: Subscriptions ordered newest first

    Returns:
        The first entitled row when there are several, otherwise the newest
        row, or None
    """
    rows = list(rows)
    if not rows:
        return None
    if len(rows) > 1:
        for row in rows:
            if is_entitled(row.status):
                return row
    return rows[0]


def load_subscription_state(db: Session, user_id: str) -> SubscriptionState:
    """Load the subscription context for a user"""
    rows = (
        db.query(Subscription)
        .filter(Subscription.user_id == user_id)
        .order_by(Subscription.created_at.desc())
        .all()
    )
    return SubscriptionState(subscription=pick_current_subscription(rows))


def upgrade_prompt(
    feature: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> dict:
    """Content of the upgrade prompt shown in place of a premium feature"""
    return {
        "title": title or DEFAULT_PROMPT_TITLE,
        "description": description or DEFAULT_PROMPT_DESCRIPTION,
        "feature": feature,
        "benefits": list(PREMIUM_BENEFITS),
        "upgrade_url": "/subscribe",
        "plans_url": "/profile/billing",
        "footnote": "Cancele a qualquer momento • Sem compromisso",
    }


def debug_snapshot(user: Optional[AuthUser], state: SubscriptionState) -> dict:
    """Flattened view of the subscription context for troubleshooting"""
    subscription = state.subscription
    return {
        "user_id": user.id if user else "No user",
        "loading": state.loading,
        "subscription_found": subscription is not None,
        "status": subscription.status if subscription else None,
        "stripe_subscription_id": subscription.stripe_subscription_id if subscription else None,
        "plan": subscription.plan_type if subscription else None,
        "is_active": state.is_active,
        "is_premium": state.is_premium,
    }


def is_within_refund_window(subscription: Subscription, now: Optional[datetime] = None) -> bool:
    """True while the subscription is young enough to cancel without charge"""
    now = now or datetime.utcnow()
    age = now - subscription.created_at
    return age.days <= settings.REFUND_WINDOW_DAYS


def billing_summary(subscription: Subscription, now: Optional[datetime] = None) -> dict:
    """Deadlines shown on the billing page"""
    now = now or datetime.utcnow()

    refund_deadline = subscription.created_at + timedelta(days=settings.REFUND_WINDOW_DAYS)
    if refund_deadline <= now:
        refund_deadline = None

    cancellation_deadline = None
    if subscription.current_period_end:
        cancellation_deadline = subscription.current_period_end - timedelta(days=settings.CANCELLATION_GRACE_DAYS)
        if cancellation_deadline <= now:
            cancellation_deadline = None

    return {
        "status": subscription.status,
        "plan_name": subscription.plan_name,
        "current_period_end": subscription.current_period_end,
        "within_refund_window": is_within_refund_window(subscription, now),
        "refund_deadline": refund_deadline,
        "cancellation_deadline": cancellation_deadline,
    }
