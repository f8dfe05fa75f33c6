"""
DevConnect Backend — Auth Route Handlers
==========================================

What:  POST /signup, POST /login, POST /logout.
How:   Delegates to AccountService; login issues a signed access token in an
       httpOnly cookie, logout expires that cookie.

Request Flow (login):
    1. Client posts {"email", "password"}
    2. AccountService.authenticate() verifies the bcrypt hash
    3. AuthService issues a JWT naming the account id
    4. Token is set as the auth cookie (lifetime = access_token_expire_hours)
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.account import AccountEnvelope, AccountPrivate, LoginRequest
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.account_service import account_service
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/signup",
    status_code=201,
    response_model=AccountEnvelope,
    responses={
        400: {"description": "Invalid signup data or email taken", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def signup(
    payload: Dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> AccountEnvelope:
    """
    Body: {"first_name", "last_name", "email", "password"}.

    Rules are checked by AccountService so every failure is a 400 with a
    readable message (name length, email shape, password strength, duplicate).
    """
    account = await account_service.create(db, payload)
    return AccountEnvelope(
        message="User added successfully",
        data=AccountPrivate.model_validate(account),
    )


@router.post(
    "/login",
    response_model=AccountEnvelope,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and receive the auth cookie",
)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> AccountEnvelope:
    account = await account_service.authenticate(db, credentials.email, credentials.password)
    token = auth_service.create_access_token(account.id)

    max_age = settings.access_token_expire_hours * 3600
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=max_age,
        expires=max_age,
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
    )
    logger.info("Account %s logged in", account.id)
    return AccountEnvelope(
        message="Login successful",
        data=AccountPrivate.model_validate(account),
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Clear the auth cookie",
)
async def logout(response: Response) -> MessageResponse:
    response.delete_cookie(
        key=settings.auth_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
    )
    return MessageResponse(message="Logged out")
