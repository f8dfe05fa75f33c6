"""
DevConnect Backend — Credential & Token Service
=================================================

What:  Password hashing (bcrypt) and access-token signing (python-jose JWT).
How:   Thin wrappers around the two libraries; neither primitive is
       reimplemented here.
Who:   AccountService (hash/verify) and the authenticator dependency (tokens).

Token contract:
    {"sub": "<account uuid>", "type": "access", "exp": <unix ts>}
    Signed with settings.jwt_secret_key / settings.jwt_algorithm.
    Any decode failure (bad signature, malformed, expired, wrong type,
    non-UUID subject) raises AuthenticationError.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from app.config import settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of input
_BCRYPT_MAX_BYTES = 72


class AuthService:

    def hash_password(self, password: str) -> str:
        """Salted one-way hash; cost factor from settings.bcrypt_rounds."""
        password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.bcrypt_rounds))
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            logger.warning("Stored password hash has an invalid format")
            return False

    def create_access_token(
        self,
        account_id: uuid.UUID,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        if expires_delta is None:
            expires_delta = timedelta(hours=settings.access_token_expire_hours)
        expire = datetime.now(timezone.utc) + expires_delta
        payload = {"sub": str(account_id), "type": "access", "exp": expire}
        return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    def decode_access_token(self, token: str) -> uuid.UUID:
        """
        Verify a token and return the account id it names.

        Raises:
            AuthenticationError: token invalid, expired, or not an access token
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
            )
        except JWTError as e:
            logger.debug("Token rejected: %s", type(e).__name__)
            raise AuthenticationError("Invalid or expired token. Please log in again.")

        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type")

        subject = payload.get("sub")
        try:
            return uuid.UUID(str(subject))
        except ValueError:
            raise AuthenticationError("Invalid token payload")


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
