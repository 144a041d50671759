"""
Authentication endpoint for registration, login and session checks.
All operations share one URL and are selected with the ``action`` parameter.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.auth import AuthService
from app.schemas.envelope import Envelope, success_response
from app.utils.dependencies import Identity, get_identity
from app.utils.exceptions import InvalidActionError
from app.utils.params import RequestParams, get_request_params


router = APIRouter(prefix="/auth", tags=["Authentication"])


async def register(service: AuthService, params: RequestParams, identity: Identity) -> dict:
    result = await service.register(params)
    return success_response("Registration successful", result)


async def login(service: AuthService, params: RequestParams, identity: Identity) -> dict:
    result = await service.login(params)
    return success_response("Login successful", result)


async def logout(service: AuthService, params: RequestParams, identity: Identity) -> dict:
    # Tokens are stateless; the client discards its copy
    return success_response("Logged out successfully")


async def check(service: AuthService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Authenticated", service.check(identity))


async def profile(service: AuthService, params: RequestParams, identity: Identity) -> dict:
    return success_response("Profile retrieved", await service.profile(identity))


ACTIONS = {
    "register": register,
    "login": login,
    "logout": logout,
    "check": check,
    "profile": profile,
}


@router.api_route(
    "",
    methods=["GET", "POST"],
    responses={200: {"model": Envelope}},
    summary="Authentication actions",
    description="register, login, logout, check or profile, selected by the action parameter"
)
async def auth_endpoint(
    params: RequestParams = Depends(get_request_params),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    Dispatch an authentication action.

    Raises:
        InvalidActionError: If the action is missing or unknown
    """
    handler = ACTIONS.get(params.action)
    if handler is None:
        raise InvalidActionError()
    return await handler(AuthService(db), params, identity)
