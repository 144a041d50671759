"""
Admin endpoint for moderating users and listings.
Every action requires the admin role.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.admin import AdminService
from app.schemas.envelope import Envelope, success_response
from app.utils.dependencies import Identity, get_identity
from app.utils.exceptions import InvalidActionError
from app.utils.params import RequestParams, get_request_params


router = APIRouter(prefix="/admin", tags=["Admin"])


async def users(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Users retrieved", await service.list_users(identity))


async def listings(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Listings retrieved", await service.list_listings(identity))


async def toggle_user(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    is_active = await service.toggle_user(identity, params.get("user_id"))
    message = "User activated" if is_active else "User deactivated"
    return success_response(message, {"is_active": is_active})


async def toggle_listing(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    is_active = await service.toggle_listing(identity, params.get("listing_id"))
    message = "Listing activated" if is_active else "Listing deactivated"
    return success_response(message, {"is_active": is_active})


async def stats(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Statistics retrieved", await service.stats(identity))


async def delete_user(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    await service.delete_user(identity, params.get("user_id"))
    return success_response("User deleted successfully")


async def delete_listing(service: AdminService, params: RequestParams, identity: Identity) -> dict:
    await service.delete_listing(identity, params.get("listing_id"))
    return success_response("Listing deleted successfully")


ACTIONS = {
    "users": users,
    "listings": listings,
    "toggle-user": toggle_user,
    "toggle-listing": toggle_listing,
    "stats": stats,
    "delete-user": delete_user,
    "delete-listing": delete_listing,
}


@router.api_route(
    "",
    methods=["GET", "POST"],
    responses={200: {"model": Envelope}},
    summary="Admin actions",
    description="users, listings, toggle-user, toggle-listing, stats, delete-user or delete-listing"
)
async def admin_endpoint(
    params: RequestParams = Depends(get_request_params),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db)
) -> dict:
    handler = ACTIONS.get(params.action)
    if handler is None:
        raise InvalidActionError()
    return await handler(AdminService(db), params, identity)
