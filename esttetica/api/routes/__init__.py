from esttetica.api.routes.billing import router as billing_router
from esttetica.api.routes.subscription import router as subscription_router
from esttetica.api.routes.tools import router as tools_router
from esttetica.api.routes.help import router as help_router

__all__ = [
    "billing_router",
    "subscription_router",
    "tools_router",
    "help_router",
]
