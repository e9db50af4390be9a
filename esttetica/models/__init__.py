from esttetica.models.subscription import (
    Subscription,
    SubscriptionHistory,
    SubscriptionStatus,
    BillingCycle,
    HistoryEventType,
)

__all__ = [
    "Subscription",
    "SubscriptionHistory",
    "SubscriptionStatus",
    "BillingCycle",
    "HistoryEventType",
]
