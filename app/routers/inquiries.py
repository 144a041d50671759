"""
Inquiry endpoint: sending inquiries and landlord triage.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.inquiry import InquiryService
from app.schemas.envelope import Envelope, success_response
from app.utils.dependencies import Identity, get_identity
from app.utils.exceptions import InvalidActionError
from app.utils.params import RequestParams, get_request_params


router = APIRouter(prefix="/inquiries", tags=["Inquiries"])


async def send(service: InquiryService, params: RequestParams, identity: Identity) -> dict:
    await service.send(identity, params)
    return success_response("Inquiry sent successfully. The landlord will contact you soon.")


async def list_received(service: InquiryService, params: RequestParams, identity: Identity) -> dict:
    inquiries = await service.list_received(identity, params.get("listing_id"))
    return success_response("Inquiries retrieved", inquiries)


async def my_inquiries(service: InquiryService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Inquiries retrieved", await service.list_sent(identity))


async def update_status(service: InquiryService, params: RequestParams, identity: Identity) -> dict:
    await service.update_status(identity, params)
    return success_response("Status updated successfully")


ACTIONS = {
    "send": send,
    "list": list_received,
    "my-inquiries": my_inquiries,
    "update-status": update_status,
}


@router.api_route(
    "",
    methods=["GET", "POST"],
    responses={200: {"model": Envelope}},
    summary="Inquiry actions",
    description="send, list, my-inquiries or update-status, selected by the action parameter"
)
async def inquiries_endpoint(
    params: RequestParams = Depends(get_request_params),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db)
) -> dict:
    handler = ACTIONS.get(params.action)
    if handler is None:
        raise InvalidActionError()
    return await handler(InquiryService(db), params, identity)
