from app.api.routes.auth import router as auth_router
from app.api.routes.password import router as password_router

__all__ = ["auth_router", "password_router"]
