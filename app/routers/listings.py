"""
Listing endpoint: landlord management, public search, detail and latest listings.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.listing import ListingService
from app.schemas.envelope import Envelope, success_response
from app.utils.dependencies import Identity, get_identity
from app.utils.exceptions import InvalidActionError
from app.utils.params import RequestParams, get_request_params
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["Listings"])


async def create(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    listing = await service.create_listing(identity, params)
    return success_response("Listing created successfully", {"listing_id": listing.id})


async def search(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    """
    Public search over active listings.

    Accepts city, min, max, gender, furnished, search and page.
    Invalid filters are ignored rather than rejected.
    """
    page = await service.search(params)
    return success_response("Listings retrieved", page)


async def detail(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    listing = await service.get_detail(identity, params.get("id"))
    return success_response("Listing details retrieved", listing)


async def update(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    await service.update_listing(identity, params)
    return success_response("Listing updated successfully")


async def delete(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    await service.delete_listing(identity, params.get("id"))
    return success_response("Listing deleted successfully")


async def my_listings(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Listings retrieved", await service.my_listings(identity))


async def latest(service: ListingService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Latest listings retrieved", await service.latest(params.get("limit")))


ACTIONS = {
    "create": create,
    "search": search,
    "detail": detail,
    "update": update,
    "delete": delete,
    "my-listings": my_listings,
    "latest": latest,
}


@router.api_route(
    "",
    methods=["GET", "POST"],
    responses={200: {"model": Envelope}},
    summary="Listing actions",
    description="create, search, detail, update, delete, my-listings or latest, selected by the action parameter"
)
async def listings_endpoint(
    params: RequestParams = Depends(get_request_params),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db)
) -> dict:
    handler = ACTIONS.get(params.action)
    if handler is None:
        logger.debug(f"Unknown listings action: {params.action!r}")
        raise InvalidActionError()
    return await handler(ListingService(db), params, identity)
