from doorman.web.routers.auth import router as auth_router
from doorman.web.routers.recovery import router as recovery_router

__all__ = [
    "auth_router",
    "recovery_router",
]
