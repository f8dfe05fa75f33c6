"""
DevConnect Backend — Connection Request Route Handlers
========================================================

What:  POST /request/send/{status}/{receiver_id}
       POST /request/review/{status}/{request_id}
How:   Thin wrappers over ConnectionService; the caller is always the
       authenticated account, never a body field.

Status codes:
    200  request created / reviewed
    400  unsupported status, or sending to yourself
    401  not logged in
    404  receiver missing, or no reviewable request with that id for the caller
    409  a request already exists between the two accounts
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.dependencies import get_current_account
from app.models.account import Account
from app.schemas.common import ErrorResponse
from app.schemas.connection import ConnectionRequestEnvelope, ConnectionRequestOut
from app.services.connection_service import connection_service

router = APIRouter(prefix="/request", tags=["Connection Requests"])


@router.post(
    "/send/{status}/{receiver_id}",
    response_model=ConnectionRequestEnvelope,
    responses={
        400: {"description": "Invalid status or self-request", "model": ErrorResponse},
        401: {"description": "Not logged in", "model": ErrorResponse},
        404: {"description": "Receiver not found", "model": ErrorResponse},
        409: {"description": "Request already exists for this pair", "model": ErrorResponse},
    },
    summary="Send a connection request (interested | ignored)",
)
async def send_request(
    status: str,
    receiver_id: uuid.UUID,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> ConnectionRequestEnvelope:
    sent = await connection_service.send(db, account, receiver_id, status)
    return ConnectionRequestEnvelope(
        message=f"{account.first_name} is {sent.request.status.value} in {sent.receiver.first_name}",
        data=ConnectionRequestOut.model_validate(sent.request),
    )


@router.post(
    "/review/{status}/{request_id}",
    response_model=ConnectionRequestEnvelope,
    responses={
        400: {"description": "Invalid status", "model": ErrorResponse},
        401: {"description": "Not logged in", "model": ErrorResponse},
        404: {"description": "No pending request addressed to the caller", "model": ErrorResponse},
    },
    summary="Accept or reject a received request",
)
async def review_request(
    status: str,
    request_id: uuid.UUID,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> ConnectionRequestEnvelope:
    request = await connection_service.review(db, account, request_id, status)
    return ConnectionRequestEnvelope(
        message=f"Connection request {request.status.value}",
        data=ConnectionRequestOut.model_validate(request),
    )
