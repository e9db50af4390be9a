"""
Esttetica Plan Definitions

Stripe price ids are configured per environment; every paid plan unlocks
the same premium features and differs only in billing cycle.
"""
from typing import Dict, Optional

from esttetica.core.config import settings
from esttetica.models.subscription import BillingCycle

DEFAULT_PLAN_NAME = "Plano Premium"

PREMIUM_BENEFITS = [
    "Calculadora de Precificação Avançada",
    "Relatórios Detalhados",
    "Backup Automático",
    "Suporte Prioritário",
]


def get_price_map() -> Dict[str, Dict[str, str]]:
    """Map configured Stripe price IDs to plan name and billing cycle"""
    return {
        settings.STRIPE_PRICE_DAILY: {"plan_name": "Diário", "billing_cycle": BillingCycle.DAILY.value},
        settings.STRIPE_PRICE_MONTHLY: {"plan_name": "Mensal", "billing_cycle": BillingCycle.MONTHLY.value},
        settings.STRIPE_PRICE_YEARLY: {"plan_name": "Anual", "billing_cycle": BillingCycle.YEARLY.value},
    }


def get_plan_details(price_id: Optional[str]) -> Dict[str, str]:
    """
    Look up plan details by Stripe price ID.

    Args:
        price_id: The Stripe price ID

    Returns:
        Dict with plan_name and billing_cycle; unknown prices map to the
        generic monthly premium plan
    """
    plan = get_price_map().get(price_id or "")
    if plan is None:
        return {"plan_name": DEFAULT_PLAN_NAME, "billing_cycle": BillingCycle.MONTHLY.value}
    return dict(plan)


def price_id_of(stripe_subscription: dict) -> Optional[str]:
    """First price id of a Stripe subscription payload, if any"""
    items = (stripe_subscription or {}).get("items") or {}
    data = items.get("data") or []
    if not data:
        return None
    return (data[0].get("price") or {}).get("id")
