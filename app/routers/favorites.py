"""
Favorites endpoint for the signed-in user's saved listings.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.favorite import FavoriteService
from app.schemas.envelope import Envelope, success_response
from app.utils.dependencies import Identity, get_identity
from app.utils.exceptions import InvalidActionError
from app.utils.params import RequestParams, get_request_params


router = APIRouter(prefix="/favorites", tags=["Favorites"])


async def toggle(service: FavoriteService, params: RequestParams, identity: Identity) -> dict:
    is_favorite = await service.toggle(identity, params.get("listing_id"))
    message = "Added to favorites" if is_favorite else "Removed from favorites"
    return success_response(message, {"is_favorite": is_favorite})


async def list_favorites(service: FavoriteService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Favorites retrieved", await service.list_favorites(identity))


async def check(service: FavoriteService, params: RequestParams, identity: Identity) -> dict:
    is_favorite = await service.check(identity, params.get("listing_id"))
    return success_response("", {"is_favorite": is_favorite})


ACTIONS = {
    "toggle": toggle,
    "list": list_favorites,
    "check": check,
}


@router.api_route(
    "",
    methods=["GET", "POST"],
    responses={200: {"model": Envelope}},
    summary="Favorite actions",
    description="toggle, list or check, selected by the action parameter; requires authentication"
)
async def favorites_endpoint(
    params: RequestParams = Depends(get_request_params),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db)
) -> dict:
    handler = ACTIONS.get(params.action)
    if handler is None:
        raise InvalidActionError()
    return await handler(FavoriteService(db), params, identity)
