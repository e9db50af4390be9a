"""
Security and Entitlement
Integrates Supabase JWT verification and the premium gate with FastAPI
"""
from fastapi import Depends
from starlette.requests import Request
from sqlalchemy.orm import Session
import logging
from typing import Optional

from esttetica.core.config import settings
from esttetica.core.exceptions import PremiumRequiredError, UnauthorizedError
from esttetica.database import get_db
from esttetica.services.entitlement import SubscriptionState, load_subscription_state
from esttetica.services.supabase_service import AuthUser, SupabaseService, get_identity_service

logger = logging.getLogger(__name__)


def get_bearer_token(request: Request) -> Optional[str]:
    """Token from an `Authorization: Bearer <token>` header, if any"""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    token = auth_header[len("Bearer "):].strip()
    return token or None


def resolve_user(request: Request, identity: SupabaseService) -> AuthUser:
    """
    Resolve the caller of a request

    Raises:
        UnauthorizedError: no bearer token, or the provider rejects it
    """
    token = get_bearer_token(request)
    if not token:
        raise UnauthorizedError()

    user = identity.get_user(token)
    if user is None:
        logger.warning("Bearer token could not be resolved to a user")
        raise UnauthorizedError()
    return user


async def get_current_user(
    request: Request,
    identity: SupabaseService = Depends(get_identity_service),
) -> AuthUser:
    """Dependency returning the authenticated user"""
    return resolve_user(request, identity)


async def get_subscription_state(
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubscriptionState:
    """Dependency returning the caller's subscription context"""
    return load_subscription_state(db, user.id)


async def require_premium(
    state: SubscriptionState = Depends(get_subscription_state),
) -> SubscriptionState:
    """
    Gate a route on an entitled subscription

    Lets the route run when the subscription is active, otherwise sends
    the caller to the fallback page.
    """
    if not state.is_active:
        raise PremiumRequiredError(settings.PREMIUM_FALLBACK_PATH)
    return state
