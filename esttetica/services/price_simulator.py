"""
Price Simulator
Suggests a service price from operating cost, materials and margin
"""
from typing import Iterable, Optional

# Average number of weeks in a month
WEEKS_PER_MONTH = 4.33


def cost_per_hour_from_expenses(
    monthly_expenses: float,
    work_days_per_week: Optional[float],
    work_hours_per_day: Optional[float],
) -> float:
    """Monthly fixed expenses spread over the worked hours; 0 with no hours"""
    weekly_hours = (work_days_per_week or 0) * (work_hours_per_day or 0)
    monthly_hours = weekly_hours * WEEKS_PER_MONTH
    if monthly_hours <= 0:
        return 0.0
    return monthly_expenses / monthly_hours


def simulate_price(
    cost_per_hour: float,
    service_minutes: int,
    material_costs: Iterable[float],
    profit_margin: float,
) -> dict:
    labor_cost = (cost_per_hour / 60) * service_minutes
    total_materials_cost = sum(material_costs)
    minimum_price = labor_cost + total_materials_cost
    profit_value = minimum_price * (profit_margin / 100)
    suggested_price = minimum_price + profit_value

    return {
        "cost_per_hour": round(cost_per_hour, 2),
        "labor_cost": round(labor_cost, 2),
        "total_materials_cost": round(total_materials_cost, 2),
        "minimum_price": round(minimum_price, 2),
        "profit_value": round(profit_value, 2),
        "suggested_price": round(suggested_price, 2),
    }
