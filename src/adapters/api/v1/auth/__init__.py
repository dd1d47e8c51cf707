from __future__ import annotations

"""Authentication router package – bundles the password recovery endpoints."""

from fastapi import APIRouter

from .routes import confirm_code as confirm_code_route
from .routes import forgot_password as forgot_password_route
from .routes import reset_password as reset_password_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(forgot_password_route.router, prefix="/forgot-password")
router.include_router(confirm_code_route.router, prefix="/reset-password/confirm")
router.include_router(reset_password_route.router, prefix="/reset-password")

__all__ = ["router"]
