"""
Subscription Routes - State, Upgrade Prompt, Billing Summary, Cancellation
All endpoints act on the authenticated user's own subscription
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from esttetica.core.exceptions import NotFoundError
from esttetica.core.security import get_current_user, get_subscription_state
from esttetica.database import get_db
from esttetica.schemas.subscription import (
    BillingSummaryOut,
    CancellationRequest,
    DebugSubscriptionOut,
    SubscriptionOut,
    SubscriptionStateOut,
    UpgradePromptOut,
)
from esttetica.services.cancellation_service import CANCELLATION_REASONS, CancellationService
from esttetica.services.entitlement import (
    SubscriptionState,
    billing_summary,
    debug_snapshot,
    upgrade_prompt,
)
from esttetica.services.supabase_service import AuthUser

router = APIRouter(tags=["subscription"])


@router.get("/", response_model=SubscriptionStateOut)
def get_subscription(state: SubscriptionState = Depends(get_subscription_state)):
    """Subscription context of the current user"""
    return {
        "subscription": SubscriptionOut.model_validate(state.subscription) if state.subscription else None,
        "loading": state.loading,
        "is_active": state.is_active,
        "is_premium": state.is_premium,
    }


@router.get("/debug", response_model=DebugSubscriptionOut)
def debug_subscription(
    current_user: AuthUser = Depends(get_current_user),
    state: SubscriptionState = Depends(get_subscription_state),
):
    return debug_snapshot(current_user, state)


@router.get("/upgrade-prompt", response_model=UpgradePromptOut)
def get_upgrade_prompt(
    feature: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
):
    """Content shown in place of a premium feature"""
    return upgrade_prompt(feature, title, description)


@router.get("/billing", response_model=BillingSummaryOut)
def get_billing_summary(state: SubscriptionState = Depends(get_subscription_state)):
    """Plan, refund window and cancellation deadlines"""
    if state.subscription is None:
        raise NotFoundError("No subscription found")
    return billing_summary(state.subscription)


@router.get("/cancellation-reasons")
def get_cancellation_reasons():
    return {"success": True, "reasons": CANCELLATION_REASONS}


@router.post("/cancel", response_model=SubscriptionOut)
def request_cancellation(
    payload: CancellationRequest,
    current_user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Request cancellation of the current subscription"""
    service = CancellationService(db)
    return service.request_cancellation(current_user.id, payload.reason, payload.custom_reason)


@router.post("/withdraw-cancellation", response_model=SubscriptionOut)
def withdraw_cancellation(
    current_user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Keep the subscription after a cancellation request"""
    service = CancellationService(db)
    return service.withdraw_cancellation(current_user.id)
