"""
DevConnect Backend — Account Directory Service
================================================

What:  Owns account records: signup, login, lookup, profile edit,
       password change and deletion.
How:   Validates raw payloads against the schemas in app.schemas.account,
       persists through the request's AsyncSession, and delegates hashing
       to AuthService. Plain passwords are only ever passed to bcrypt.
Who:   Called by routes/auth.py, routes/profile.py, routes/user.py and the
       authenticator dependency.

Error Handling Strategy:
    Business-rule failures raise ValidationError / AuthenticationError /
    NotFoundError. SQLAlchemyError is wrapped in DatabaseError so no
    statement text reaches the client.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from app.models.account import Account
from app.schemas.account import (
    EDITABLE_PROFILE_FIELDS,
    MAX_SKILLS,
    ProfileUpdate,
    SignupRequest,
    is_strong_password,
    normalize_email,
)
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Columns that may be edited but not cleared
NON_NULLABLE_PROFILE_FIELDS = ("about", "photo_url", "skills")


def parse_payload(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Validate a raw payload against a schema, reporting the first failure
    as a ValidationError (400) instead of pydantic's 422.
    """
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", "Invalid input")
        # pydantic prefixes custom ValueError messages with "Value error, "
        message = message.removeprefix("Value error, ")
        raise ValidationError(message=message, field=field)


class AccountService:
    """
    Business logic for account records.

    Responsibilities:
        - create(): signup with email uniqueness
        - authenticate(): email + password → Account
        - find_by_email() / find_by_id() / get_by_id(): lookups
        - update(): allow-listed profile edit
        - change_password(): replace the hash, refusing the current password
        - delete(): remove the account row only
    """

    async def create(self, db: AsyncSession, payload: Dict[str, Any]) -> Account:
        """
        Register a new account.

        Raises:
            ValidationError: missing/short name, malformed email, weak password,
                             or an account already using this email
        """
        signup = parse_payload(SignupRequest, payload)

        if await self.find_by_email(db, signup.email) is not None:
            raise ValidationError(
                message="An account with this email already exists",
                field="email",
            )

        password_hash = await run_in_threadpool(auth_service.hash_password, signup.password)
        account = Account(
            email=signup.email,
            password_hash=password_hash,
            first_name=signup.first_name,
            last_name=signup.last_name,
        )
        db.add(account)
        try:
            await db.flush()
        except IntegrityError:
            # Concurrent signup with the same email won the unique constraint
            await db.rollback()
            raise ValidationError(
                message="An account with this email already exists",
                field="email",
            )
        except SQLAlchemyError as e:
            logger.error("Database error creating account: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_account"})

        logger.info("Account created: %s", account.id)
        return account

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Account:
        """
        Resolve login credentials to an account.

        The same message is used for every failure so callers cannot probe
        which emails are registered.
        """
        try:
            pydantic.TypeAdapter(pydantic.EmailStr).validate_python(normalize_email(email))
        except pydantic.ValidationError:
            raise AuthenticationError("Invalid credentials")

        account = await self.find_by_email(db, email)
        if account is None:
            raise AuthenticationError("Invalid credentials")

        valid = await run_in_threadpool(
            auth_service.verify_password, password, account.password_hash
        )
        if not valid:
            logger.info("Failed login for account %s", account.id)
            raise AuthenticationError("Invalid credentials")
        return account

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[Account]:
        try:
            result = await db.execute(
                select(Account).where(Account.email == normalize_email(email))
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up account by email: %s", str(e))
            raise DatabaseError(context={"operation": "find_by_email"})

    async def find_by_id(self, db: AsyncSession, account_id: uuid.UUID) -> Optional[Account]:
        try:
            return await db.get(Account, account_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching account %s: %s", account_id, str(e))
            raise DatabaseError(context={"account_id": str(account_id)})

    async def get_by_id(self, db: AsyncSession, account_id: uuid.UUID) -> Account:
        account = await self.find_by_id(db, account_id)
        if account is None:
            raise NotFoundError(resource="account", resource_id=str(account_id))
        return account

    async def update(
        self,
        db: AsyncSession,
        account_id: uuid.UUID,
        fields: Dict[str, Any],
    ) -> Account:
        """
        Apply an allow-listed partial profile update.

        Allowed keys: photo_url, about, gender, age, skills.

        Raises:
            ValidationError: empty payload, disallowed key, more than 10 skills,
                             or an invalid value
            NotFoundError: account does not exist
        """
        if not fields:
            raise ValidationError(message="Invalid payload in edit request")

        disallowed = sorted(set(fields) - EDITABLE_PROFILE_FIELDS)
        if disallowed:
            raise ValidationError(
                message=f"Update not allowed for: {', '.join(disallowed)}",
                context={"disallowed_fields": disallowed},
            )

        skills = fields.get("skills")
        if isinstance(skills, list) and len(skills) > MAX_SKILLS:
            raise ValidationError(
                message=f"Skills can't be more than {MAX_SKILLS}",
                field="skills",
            )

        values = parse_payload(ProfileUpdate, fields).model_dump(exclude_unset=True)
        for field in NON_NULLABLE_PROFILE_FIELDS:
            if field in values and values[field] is None:
                raise ValidationError(message=f"{field} cannot be null", field=field)

        account = await self.get_by_id(db, account_id)
        for field, value in values.items():
            setattr(account, field, value)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating account %s: %s", account_id, str(e))
            raise DatabaseError(context={"account_id": str(account_id)})

        logger.info("Account %s updated fields: %s", account_id, sorted(fields))
        return account

    async def change_password(
        self,
        db: AsyncSession,
        account_id: uuid.UUID,
        new_password: str,
    ) -> Account:
        """
        Replace the stored hash.

        Raises:
            ValidationError: new password matches the current one, or is weak
        """
        account = await self.get_by_id(db, account_id)

        same = await run_in_threadpool(
            auth_service.verify_password, new_password, account.password_hash
        )
        if same:
            raise ValidationError(
                message="New password should not be the same as old password",
                field="password",
            )
        if not is_strong_password(new_password):
            raise ValidationError(message="Please enter a strong password", field="password")

        account.password_hash = await run_in_threadpool(auth_service.hash_password, new_password)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error changing password for %s: %s", account_id, str(e))
            raise DatabaseError(context={"account_id": str(account_id)})

        logger.info("Password changed for account %s", account_id)
        return account

    async def delete(self, db: AsyncSession, account_id: uuid.UUID) -> None:
        """Remove the account. Connection requests naming it are kept."""
        account = await self.get_by_id(db, account_id)
        try:
            await db.delete(account)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting account %s: %s", account_id, str(e))
            raise DatabaseError(context={"account_id": str(account_id)})
        logger.info("Account deleted: %s", account_id)


# ── Singleton Instance ────────────────────────────────────────────────────
account_service = AccountService()
