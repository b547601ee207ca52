"""
API v1 package.

Contains versioned API routes for the OTP authentication API.
"""

from src.api.v1.debug import router as debug_router
from src.api.v1.routes import router

__all__ = ["debug_router", "router"]
