"""
DevConnect Backend — Request Dependencies
===========================================

What:  The authenticator: resolves the acting Account for a request.
How:   Reads the signed token from the auth cookie (set by POST /login) or,
       failing that, from an `Authorization: Bearer <token>` header;
       verifies it with AuthService and loads the account.
Who:   Injected into every authenticated route via Depends(get_current_account).

Fails closed: missing token, bad signature, expiry, or a token for an account
that no longer exists all raise AuthenticationError (401).
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.exceptions import AuthenticationError
from app.middleware.request_id import request_id_var
from app.models.account import Account
from app.services.account_service import account_service
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

# auto_error=False: the cookie is the primary carrier; the header is optional
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Account:
    token = request.cookies.get(settings.auth_cookie_name)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise AuthenticationError()

    account_id = auth_service.decode_access_token(token)
    account = await account_service.find_by_id(db, account_id)
    if account is None:
        logger.warning("[%s] Token for missing account %s", request_id_var.get(""), account_id)
        raise AuthenticationError("Account no longer exists. Please sign up again.")

    request.state.account_id = account.id
    return account
