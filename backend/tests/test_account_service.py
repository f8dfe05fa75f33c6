"""
DevConnect Backend — Account Service Tests
============================================

What:  Tests for signup, login, profile edit, password change and deletion.
How:   Real AccountService against an in-memory SQLite database; the
       mock session is used only where the store must fail.

What we test:
    ✅ Signup rules: name length, email shape, password strength, duplicates
    ✅ Emails are stored lower-cased; lookups are case-insensitive
    ✅ Login failures all look the same
    ✅ Profile edit allow-list, skills cap, value validation
    ✅ Password change refuses the current password and weak passwords
    ✅ SQLAlchemy errors surface as DatabaseError
"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import (
    AuthenticationError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from app.schemas.account import is_strong_password
from app.services.account_service import AccountService
from conftest import STRONG_PASSWORD


def _signup(**overrides):
    payload = {
        "first_name": "Alice",
        "last_name": "Liddell",
        "email": "alice@example.com",
        "password": STRONG_PASSWORD,
    }
    payload.update(overrides)
    return payload


class TestPasswordStrength:

    @pytest.mark.parametrize("password", ["Str0ng!Pass", "aB3$efgh", "Pässw0rd-x"])
    def test_strong(self, password):
        assert is_strong_password(password)

    @pytest.mark.parametrize(
        "password",
        ["alllowercase1!", "ALLUPPER1!", "NoDigits!!", "NoSymbol123", "aB3$efg"],
    )
    def test_weak(self, password):
        assert not is_strong_password(password)


class TestCreate:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_create_success(self, db_session):
        account = await self.service.create(db_session, _signup(email="  Alice@Example.COM "))

        assert account.id is not None
        assert account.email == "alice@example.com"
        assert account.password_hash != STRONG_PASSWORD
        assert account.password_hash.startswith("$2")
        assert account.skills == []
        assert account.about

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"first_name": "Al"}, "first_name"),
            ({"first_name": "A" * 16}, "first_name"),
            ({"last_name": ""}, "last_name"),
            ({"email": "not-an-email"}, "email"),
            ({"password": "password"}, "password"),
        ],
    )
    async def test_create_invalid(self, db_session, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(db_session, _signup(**overrides))
        assert exc_info.value.field == field

    @pytest.mark.asyncio
    async def test_create_missing_field(self, db_session):
        payload = _signup()
        del payload["last_name"]
        with pytest.raises(ValidationError):
            await self.service.create(db_session, payload)

    @pytest.mark.asyncio
    async def test_weak_password_message(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(db_session, _signup(password="weakpass"))
        assert exc_info.value.message == "Please enter a strong password"

    @pytest.mark.asyncio
    async def test_duplicate_email_any_case(self, db_session):
        await self.service.create(db_session, _signup())
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create(db_session, _signup(email="ALICE@example.com"))
        assert exc_info.value.field == "email"


class TestAuthenticate:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_valid_credentials(self, db_session):
        created = await self.service.create(db_session, _signup())
        account = await self.service.authenticate(db_session, "Alice@Example.com", STRONG_PASSWORD)
        assert account.id == created.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email, password",
        [
            ("alice@example.com", "Wr0ng!Pass"),
            ("nobody@example.com", STRONG_PASSWORD),
            ("not-an-email", STRONG_PASSWORD),
        ],
    )
    async def test_invalid_credentials(self, db_session, email, password):
        await self.service.create(db_session, _signup())
        with pytest.raises(AuthenticationError) as exc_info:
            await self.service.authenticate(db_session, email, password)
        assert exc_info.value.message == "Invalid credentials"


class TestUpdate:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_update_allowed_fields(self, db_session, make_account):
        account = await make_account()
        updated = await self.service.update(
            db_session,
            account.id,
            {
                "about": "Backend developer",
                "age": 30,
                "gender": "female",
                "skills": ["python", " sql ", ""],
                "photo_url": "https://example.com/me.png",
            },
        )
        assert updated.about == "Backend developer"
        assert updated.age == 30
        assert updated.gender == "female"
        assert updated.skills == ["python", "sql"]
        assert updated.photo_url == "https://example.com/me.png"

    @pytest.mark.asyncio
    async def test_partial_update_leaves_other_fields(self, db_session, make_account):
        account = await make_account()
        original_photo = account.photo_url
        updated = await self.service.update(db_session, account.id, {"age": 25})
        assert updated.age == 25
        assert updated.photo_url == original_photo

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["email", "password", "first_name", "password_hash", "id"])
    async def test_disallowed_field(self, db_session, make_account, field):
        account = await make_account()
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update(db_session, account.id, {field: "x", "age": 20})
        assert exc_info.value.message.startswith("Update not allowed for:")
        assert field in exc_info.value.message

    @pytest.mark.asyncio
    async def test_too_many_skills(self, db_session, make_account):
        account = await make_account()
        with pytest.raises(ValidationError) as exc_info:
            await self.service.update(
                db_session, account.id, {"skills": [f"s{i}" for i in range(11)]}
            )
        assert exc_info.value.message == "Skills can't be more than 10"

    @pytest.mark.asyncio
    async def test_ten_skills_allowed(self, db_session, make_account):
        account = await make_account()
        updated = await self.service.update(
            db_session, account.id, {"skills": [f"s{i}" for i in range(10)]}
        )
        assert len(updated.skills) == 10

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "fields",
        [
            {"age": 12},
            {"gender": "robot"},
            {"photo_url": "ftp://example.com/a.png"},
            {"about": None},
        ],
    )
    async def test_invalid_values(self, db_session, make_account, fields):
        account = await make_account()
        with pytest.raises(ValidationError):
            await self.service.update(db_session, account.id, fields)

    @pytest.mark.asyncio
    async def test_empty_payload(self, db_session, make_account):
        account = await make_account()
        with pytest.raises(ValidationError):
            await self.service.update(db_session, account.id, {})

    @pytest.mark.asyncio
    async def test_unknown_account(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update(db_session, uuid.uuid4(), {"age": 20})


class TestChangePassword:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_change_password(self, db_session, make_account):
        account = await make_account(email="pw@example.com")
        await self.service.change_password(db_session, account.id, "N3w!Password")

        again = await self.service.authenticate(db_session, "pw@example.com", "N3w!Password")
        assert again.id == account.id
        with pytest.raises(AuthenticationError):
            await self.service.authenticate(db_session, "pw@example.com", STRONG_PASSWORD)

    @pytest.mark.asyncio
    async def test_same_password_rejected(self, db_session, make_account):
        account = await make_account()
        with pytest.raises(ValidationError) as exc_info:
            await self.service.change_password(db_session, account.id, STRONG_PASSWORD)
        assert exc_info.value.message == "New password should not be the same as old password"

    @pytest.mark.asyncio
    async def test_weak_password_rejected(self, db_session, make_account):
        account = await make_account()
        with pytest.raises(ValidationError) as exc_info:
            await self.service.change_password(db_session, account.id, "weak")
        assert exc_info.value.message == "Please enter a strong password"


class TestDelete:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_delete(self, db_session, make_account):
        account = await make_account()
        await self.service.delete(db_session, account.id)
        assert await self.service.find_by_id(db_session, account.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete(db_session, uuid.uuid4())


class TestDatabaseErrors:

    def setup_method(self):
        self.service = AccountService()

    @pytest.mark.asyncio
    async def test_find_by_email_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with pytest.raises(DatabaseError):
            await self.service.find_by_email(mock_db_session, "a@example.com")

    @pytest.mark.asyncio
    async def test_find_by_id_wraps_sqlalchemy_error(self, mock_db_session):
        mock_db_session.get.side_effect = OperationalError("SELECT", {}, Exception("down"))
        with pytest.raises(DatabaseError):
            await self.service.find_by_id(mock_db_session, uuid.uuid4())
