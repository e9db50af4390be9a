from esttetica.services.supabase_service import supabase_service, get_identity_service
from esttetica.services.stripe_service import stripe_service, get_stripe_service

__all__ = [
    "supabase_service",
    "get_identity_service",
    "stripe_service",
    "get_stripe_service",
]
