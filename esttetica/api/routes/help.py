"""
Help Routes - Contact channels
"""
from fastapi import APIRouter

from esttetica.schemas.subscription import ContactInfoOut
from esttetica.services.help_service import get_contact_info

router = APIRouter(tags=["help"])


@router.get("/contact", response_model=ContactInfoOut)
def get_contact():
    """E-mail and WhatsApp contact for support"""
    return get_contact_info()
