"""
DevConnect Backend — Connection Request Schemas
=================================================

What:  Response models for the connection lifecycle endpoints.
How:   Built from ConnectionRequest / Account ORM objects (from_attributes).
Who:   Returned by routes/requests.py and routes/user.py.

Every body follows the same envelope: {"message": str, "data": ...}.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from app.models.connection_request import ConnectionStatus
from app.schemas.account import AccountPublic


class ConnectionRequestOut(BaseModel):
    id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    status: ConnectionStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReceivedRequestOut(BaseModel):
    """A pending request addressed to the caller, with the sender's public profile."""

    id: uuid.UUID
    status: ConnectionStatus
    created_at: datetime
    sender: AccountPublic

    model_config = {"from_attributes": True}


class ConnectionRequestEnvelope(BaseModel):
    message: str
    data: ConnectionRequestOut


class ReceivedRequestsResponse(BaseModel):
    message: str = "Connection requests fetched successfully"
    data: List[ReceivedRequestOut]


class ConnectionsResponse(BaseModel):
    message: str = "Connections fetched successfully"
    data: List[AccountPublic]


class FeedResponse(BaseModel):
    """One page of candidate accounts."""

    message: str = "Feed fetched successfully"
    data: List[AccountPublic]
    page: int = Field(ge=1, description="1-based page number that was served")
    limit: int = Field(ge=1, description="Page size after clamping to the configured maximum")
