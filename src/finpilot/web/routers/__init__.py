from finpilot.web.routers.advice import router as advice_router
from finpilot.web.routers.auth import router as auth_router
from finpilot.web.routers.expenses import router as expenses_router
from finpilot.web.routers.plans import router as plans_router

__all__ = [
    "advice_router",
    "auth_router",
    "expenses_router",
    "plans_router",
]
