"""
DevConnect Backend — Account Request/Response Schemas
=======================================================

What:  Pydantic models for signup, login, profile edits and account output.
How:   Request models carry the business rules (email shape, password
       strength, allow-listed profile fields); AccountService validates raw
       payloads against them and turns failures into ValidationError (400).
       Output models are built from ORM objects (from_attributes).

Two output projections exist:
    AccountPublic   — safe projection shown to other accounts (feed, requests)
    AccountPrivate  — owner view (adds email and timestamps)
Neither ever includes password_hash.
"""

import re
import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

MAX_SKILLS = 10

# Keys accepted by PATCH /profile/edit; anything else is rejected outright
EDITABLE_PROFILE_FIELDS = frozenset({"photo_url", "about", "gender", "age", "skills"})

Gender = Literal["male", "female", "others"]

_SYMBOL = re.compile(r"[^A-Za-z0-9]")


def is_strong_password(value: str) -> bool:
    """
    At least 8 characters with one lowercase letter, one uppercase letter,
    one digit and one symbol.
    """
    return (
        len(value) >= 8
        and any(c.islower() for c in value)
        and any(c.isupper() for c in value)
        and any(c.isdigit() for c in value)
        and _SYMBOL.search(value) is not None
    )


def normalize_email(value: str) -> str:
    return value.strip().lower()


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SignupRequest(BaseModel):
    first_name: str = Field(min_length=4, max_length=15)
    last_name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def fold_email(cls, v):
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def check_strength(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError("Please enter a strong password")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    """Allow-listed profile edit. Every field is optional; unset fields are untouched."""

    photo_url: Optional[str] = Field(default=None, max_length=1024)
    about: Optional[str] = Field(default=None, max_length=1000)
    gender: Optional[Gender] = None
    age: Optional[int] = Field(default=None, ge=18, le=120)
    skills: Optional[List[str]] = Field(default=None, max_length=MAX_SKILLS)

    model_config = {"extra": "forbid"}

    @field_validator("photo_url")
    @classmethod
    def check_photo_url(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith(("http://", "https://")):
            raise ValueError("photo_url must be an http(s) URL")
        return v

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return [skill.strip() for skill in v if skill.strip()]


class PasswordChange(BaseModel):
    password: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AccountPublic(BaseModel):
    """Safe projection of an account, shown to other users."""

    id: uuid.UUID
    first_name: str
    last_name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    photo_url: Optional[str] = None
    about: Optional[str] = None
    skills: List[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class AccountPrivate(AccountPublic):
    """Owner view of an account."""

    email: str
    created_at: datetime
    updated_at: datetime


class AccountEnvelope(BaseModel):
    message: str
    data: AccountPrivate


class PublicAccountEnvelope(BaseModel):
    message: str
    data: AccountPublic
