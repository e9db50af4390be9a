"""
Subscription Request/Response Schemas
Pydantic models for subscription, billing and tool API validation
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime
import uuid


# ==================== Subscription ====================

class SubscriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    status: str
    plan_name: Optional[str] = None
    plan_type: Optional[str] = None
    price_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    next_billing_date: Optional[datetime] = None
    cancel_at_period_end: bool = False
    cancellation_requested_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    canceled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class SubscriptionStateOut(BaseModel):
    """Read-only subscription context consumed by the frontend"""
    subscription: Optional[SubscriptionOut] = None
    loading: bool = False
    is_active: bool
    is_premium: bool


class DebugSubscriptionOut(BaseModel):
    user_id: str
    loading: bool
    subscription_found: bool
    status: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    plan: Optional[str] = None
    is_active: bool
    is_premium: bool


class UpgradePromptOut(BaseModel):
    title: str
    description: str
    feature: Optional[str] = None
    benefits: List[str]
    upgrade_url: str
    plans_url: str
    footnote: str


class BillingSummaryOut(BaseModel):
    status: str
    plan_name: Optional[str] = None
    current_period_end: Optional[datetime] = None
    within_refund_window: bool
    refund_deadline: Optional[datetime] = None
    cancellation_deadline: Optional[datetime] = None


# ==================== Cancellation ====================

class CancellationRequest(BaseModel):
    reason: str = Field(..., min_length=1, description="One of the listed cancellation reasons")
    custom_reason: Optional[str] = Field(None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {
                "reason": "Muito caro para o meu orçamento"
            }
        }


class PendingCancellationsResult(BaseModel):
    success: bool
    message: str
    processed: int
    total: int = 0
    errors: Optional[List[str]] = None


# ==================== Price Simulator ====================

class Material(BaseModel):
    name: str = ""
    cost: float = Field(0, ge=0)


class PriceSimulationRequest(BaseModel):
    service_minutes: int = Field(0, ge=0)
    profit_margin: float = Field(30, ge=0, description="Desired profit margin in percent")
    materials: List[Material] = []
    cost_per_hour: Optional[float] = Field(None, ge=0)
    monthly_expenses: Optional[float] = Field(None, ge=0)
    work_days_per_week: Optional[float] = Field(None, ge=0, le=7)
    work_hours_per_day: Optional[float] = Field(None, ge=0, le=24)

    @model_validator(mode="after")
    def require_cost_basis(self):
        if self.cost_per_hour is None and self.monthly_expenses is None:
            raise ValueError("Provide cost_per_hour or monthly_expenses")
        return self


class PriceSimulationResult(BaseModel):
    cost_per_hour: float
    labor_cost: float
    total_materials_cost: float
    minimum_price: float
    profit_value: float
    suggested_price: float


# ==================== Help ====================

class ContactInfoOut(BaseModel):
    email: str
    email_url: str
    whatsapp_number: str
    whatsapp_url: str
    message: str
