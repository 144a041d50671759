"""
API route handlers for the Rental Listing API.
Each resource is one endpoint dispatching on the ``action`` parameter.
"""

from .auth import router as auth_router
from .listings import router as listings_router
from .favorites import router as favorites_router
from .inquiries import router as inquiries_router
from .admin import router as admin_router
from .upload import router as upload_router

__all__ = [
    "auth_router",
    "listings_router",
    "favorites_router",
    "inquiries_router",
    "admin_router",
    "upload_router"
]
