"""
Billing Routes - Portal Session, Stripe Webhook, Pending Cancellations
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session
import json
import logging

from esttetica.core.config import settings
from esttetica.core.exceptions import AppError, BadRequestError, IntegrationError
from esttetica.core.security import resolve_user
from esttetica.database import get_db
from esttetica.schemas.subscription import PendingCancellationsResult
from esttetica.services.billing_portal import open_billing_portal, parse_return_url
from esttetica.services.cancellation_service import process_pending_cancellations
from esttetica.services.stripe_service import StripeService, get_stripe_service
from esttetica.services.subscription_sync import process_event
from esttetica.services.supabase_service import SupabaseService, get_identity_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _json_response(content: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


# ==================== BILLING PORTAL ====================

def preflight_response() -> PlainTextResponse:
    """CORS preflight answer, independent of credentials and requested headers"""
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/portal-session")
async def create_portal_session(
    request: Request,
    db: Session = Depends(get_db),
    identity: SupabaseService = Depends(get_identity_service),
    stripe: StripeService = Depends(get_stripe_service),
):
    """
    Create a Stripe billing portal session for the caller

    Body: {"return_url": "<url>"}
    Returns {"url": "<portal session url>"}; errors are {"error": "<message>"}
    """
    try:
        user = resolve_user(request, identity)

        try:
            body = await request.json()
        except ValueError:
            body = None
        return_url = parse_return_url(body)

        url = open_billing_portal(db, stripe, user.id, return_url)
        return _json_response({"url": url})

    except IntegrationError as e:
        logger.error(f"Error creating billing portal session: {e}")
        return _json_response({"error": "Internal server error"}, status.HTTP_500_INTERNAL_SERVER_ERROR)
    except AppError as e:
        return _json_response({"error": e.message}, e.status_code)
    except Exception as e:
        logger.exception(f"Error creating billing portal session: {e}")
        return _json_response({"error": "Internal server error"}, status.HTTP_500_INTERNAL_SERVER_ERROR)


# ==================== STRIPE WEBHOOK ====================

@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    identity: SupabaseService = Depends(get_identity_service),
    stripe: StripeService = Depends(get_stripe_service),
):
    """
    Stripe webhook handler

    Signatures are enforced in production when the header is present.
    Events: checkout.session.completed, customer.subscription.updated,
    customer.subscription.deleted
    """
    body = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        if settings.is_production and signature:
            if not settings.STRIPE_WEBHOOK_SECRET:
                logger.error("STRIPE_WEBHOOK_SECRET not configured")
                return _json_response(
                    {"error": "Webhook secret not configured"},
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                )
            stripe.construct_event(body, signature, settings.STRIPE_WEBHOOK_SECRET)
            logger.info("Webhook signature verified successfully")

        try:
            event = json.loads(body)
        except ValueError:
            raise BadRequestError("Invalid JSON payload")
        if not isinstance(event, dict):
            raise BadRequestError("Invalid event payload")

        logger.info(f"Stripe webhook event: {event.get('type')} ({event.get('id')})")
        result = process_event(db, stripe, identity, event)
        return _json_response(result)

    except AppError as e:
        logger.warning(f"Webhook rejected: {e.message}")
        return _json_response({"success": False, "message": e.message}, e.status_code)
    except Exception as e:
        logger.exception(f"Webhook error: {e}")
        return _json_response(
            {"success": False, "error": "Internal server error"},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


# ==================== PENDING CANCELLATIONS ====================

@router.post("/process-pending-cancellations", response_model=PendingCancellationsResult)
def run_pending_cancellations(
    db: Session = Depends(get_db),
    stripe: StripeService = Depends(get_stripe_service),
):
    """End subscriptions whose cancellation request passed the grace period"""
    result = process_pending_cancellations(db, stripe)
    logger.info(result["message"])
    return result
