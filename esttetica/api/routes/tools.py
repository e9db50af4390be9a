"""
Premium Tools Routes
Only reachable with an active subscription
"""
from fastapi import APIRouter, Depends
import logging

from esttetica.core.security import require_premium
from esttetica.schemas.subscription import PriceSimulationRequest, PriceSimulationResult
from esttetica.services.price_simulator import cost_per_hour_from_expenses, simulate_price

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"], dependencies=[Depends(require_premium)])


@router.post("/price-simulator", response_model=PriceSimulationResult)
def price_simulator(payload: PriceSimulationRequest):
    """
    Suggest a price for a procedure

    Uses cost_per_hour when given, otherwise derives it from monthly
    expenses and working hours.
    """
    if payload.cost_per_hour is not None:
        cost_per_hour = payload.cost_per_hour
    else:
        cost_per_hour = cost_per_hour_from_expenses(
            payload.monthly_expenses,
            payload.work_days_per_week,
            payload.work_hours_per_day,
        )

    return simulate_price(
        cost_per_hour,
        payload.service_minutes,
        [material.cost for material in payload.materials],
        payload.profit_margin,
    )
