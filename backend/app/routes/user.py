"""
DevConnect Backend — User Listing Route Handlers
==================================================

What:  Read-only views over other accounts, from the caller's point of view.

Route Inventory:
    GET /user/feed?page=&limit=      candidates with no request either way
    GET /user/requests/received      pending "interested" requests to the caller
    GET /user/requests/connections   accounts with an accepted request
    GET /user?email=                 look up one account by email

Every account in these bodies uses the public projection (AccountPublic):
no email, no password hash.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_account
from app.exceptions import NotFoundError
from app.models.account import Account
from app.schemas.account import AccountPublic, PublicAccountEnvelope
from app.schemas.common import ErrorResponse
from app.schemas.connection import (
    ConnectionsResponse,
    FeedResponse,
    ReceivedRequestOut,
    ReceivedRequestsResponse,
)
from app.services.account_service import account_service
from app.services.connection_service import connection_service

router = APIRouter(prefix="/user", tags=["Users"])

_AUTH_ERRORS = {401: {"description": "Not logged in", "model": ErrorResponse}}


@router.get(
    "/feed",
    response_model=FeedResponse,
    responses=_AUTH_ERRORS,
    summary="Paginated feed of candidate accounts",
    description=(
        "Accounts other than the caller that have no connection request with the caller "
        "in either direction and any status. Ordered by signup time; `limit` is capped at 50."
    ),
)
async def feed(
    page: int = Query(default=1, description="1-based page number; values below 1 read as 1"),
    limit: Optional[int] = Query(default=None, description="Page size, clamped to [1, 50]"),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> FeedResponse:
    result = await connection_service.feed(db, account, page=page, limit=limit)
    return FeedResponse(
        data=[AccountPublic.model_validate(a) for a in result.accounts],
        page=result.page,
        limit=result.limit,
    )


@router.get(
    "/requests/received",
    response_model=ReceivedRequestsResponse,
    responses=_AUTH_ERRORS,
    summary="Pending requests addressed to the caller",
)
async def received_requests(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> ReceivedRequestsResponse:
    requests = await connection_service.list_received(db, account)
    return ReceivedRequestsResponse(
        data=[ReceivedRequestOut.model_validate(r) for r in requests],
    )


@router.get(
    "/requests/connections",
    response_model=ConnectionsResponse,
    responses=_AUTH_ERRORS,
    summary="Accounts the caller is connected with",
)
async def connections(
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> ConnectionsResponse:
    accounts = await connection_service.list_connections(db, account)
    return ConnectionsResponse(data=[AccountPublic.model_validate(a) for a in accounts])


@router.get(
    "",
    response_model=PublicAccountEnvelope,
    responses={**_AUTH_ERRORS, 404: {"description": "No such account", "model": ErrorResponse}},
    summary="Look up an account by email",
)
async def find_user(
    email: str = Query(..., min_length=3),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> PublicAccountEnvelope:
    found = await account_service.find_by_email(db, email)
    if found is None:
        raise NotFoundError(resource="user", message="User not found")
    return PublicAccountEnvelope(
        message="User fetched successfully",
        data=AccountPublic.model_validate(found),
    )
