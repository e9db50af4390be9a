"""
Help & Contact
Contact channels shown on the help page
"""
from urllib.parse import quote

from esttetica.core.config import settings

DEFAULT_WHATSAPP_MESSAGE = "Olá! Preciso de ajuda com o app Esttetica."

# Characters encodeURIComponent leaves as-is
URI_COMPONENT_SAFE = "!'()*"


def whatsapp_url(number: str, message: str = DEFAULT_WHATSAPP_MESSAGE) -> str:
    return f"https://wa.me/{number}?text={quote(message, safe=URI_COMPONENT_SAFE)}"


def get_contact_info() -> dict:
    return {
        "email": settings.CONTACT_EMAIL,
        "email_url": f"mailto:{settings.CONTACT_EMAIL}",
        "whatsapp_number": settings.WHATSAPP_NUMBER,
        "whatsapp_url": whatsapp_url(settings.WHATSAPP_NUMBER),
        "message": DEFAULT_WHATSAPP_MESSAGE,
    }
