"""
DevConnect Backend — Profile Route Handlers
=============================================

What:  The caller's own account: view, edit, change password, delete.
How:   Resolves the caller with get_current_account, delegates to AccountService.

Route Inventory:
    GET    /profile/view       owner view of the caller's account
    PATCH  /profile/edit       allow-listed edit (photo_url, about, gender, age, skills)
    PATCH  /profile/password   replace password (must differ from current)
    DELETE /profile            remove the caller's account
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.dependencies import get_current_account
from app.models.account import Account
from app.schemas.account import AccountEnvelope, AccountPrivate, PasswordChange
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.account_service import account_service

router = APIRouter(prefix="/profile", tags=["Profile"])

_AUTH_ERRORS = {401: {"description": "Not logged in", "model": ErrorResponse}}


@router.get(
    "/view",
    response_model=AccountEnvelope,
    responses=_AUTH_ERRORS,
    summary="View the caller's profile",
)
async def view_profile(account: Account = Depends(get_current_account)) -> AccountEnvelope:
    return AccountEnvelope(
        message="Profile fetched successfully",
        data=AccountPrivate.model_validate(account),
    )


@router.patch(
    "/edit",
    response_model=AccountEnvelope,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Disallowed field or invalid value", "model": ErrorResponse},
    },
    summary="Edit profile fields",
)
async def edit_profile(
    fields: Dict[str, Any] = Body(...),
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> AccountEnvelope:
    updated = await account_service.update(db, account.id, fields)
    return AccountEnvelope(
        message=f"{updated.first_name}, your profile was updated successfully",
        data=AccountPrivate.model_validate(updated),
    )


@router.patch(
    "/password",
    response_model=AccountEnvelope,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Same as current password, or weak", "model": ErrorResponse},
    },
    summary="Change password",
)
async def change_password(
    body: PasswordChange,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> AccountEnvelope:
    updated = await account_service.change_password(db, account.id, body.password)
    return AccountEnvelope(
        message="Password updated successfully",
        data=AccountPrivate.model_validate(updated),
    )


@router.delete(
    "",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Delete the caller's account",
)
async def delete_profile(
    response: Response,
    account: Account = Depends(get_current_account),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await account_service.delete(db, account.id)
    response.delete_cookie(key=settings.auth_cookie_name, httponly=True, samesite="lax")
    return MessageResponse(message="User deleted successfully")
