"""
DevConnect Backend — Connection Lifecycle Service
===================================================

What:  State machine for connection requests between two accounts, plus the
       feed, received-request and connection queries built on it.
How:   Every operation reads/writes through the request's AsyncSession; each
       mutating call writes exactly one connection_requests row.
Who:   Called by routes/requests.py and routes/user.py.

State machine (per unordered pair {A, B}):
    none ──send(interested)──▶ interested ──review──▶ accepted | rejected
    none ──send(ignored)─────▶ ignored
    ignored, accepted and rejected are terminal; only the receiver reviews.

Duplicate pairs:
    send() checks both directions before inserting, and the unique
    pair_key constraint rejects whichever of two concurrent sends commits
    second. Both paths surface as ConflictError.

Feed order:
    accounts.created_at ascending, ties broken by accounts.id, so the same
    page is returned for the same database state.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import List, Literal, NamedTuple, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    SelfReferenceError,
    ValidationError,
)
from app.models.account import Account
from app.models.connection_request import (
    REVIEWABLE_STATUSES,
    SENDABLE_STATUSES,
    ConnectionRequest,
    ConnectionStatus,
    make_pair_key,
)
from app.services.account_service import account_service

logger = logging.getLogger(__name__)


class OtherParty(NamedTuple):
    """The counterpart of a request as seen from one of its two accounts."""

    role: Literal["sender", "receiver"]
    account_id: uuid.UUID


def other_party(request: ConnectionRequest, self_id: uuid.UUID) -> OtherParty:
    """
    Return the account on the other end of `request` from `self_id`.

    If self is the sender the other party is the receiver, and vice versa.
    """
    if request.sender_id == self_id:
        return OtherParty(role="receiver", account_id=request.receiver_id)
    return OtherParty(role="sender", account_id=request.sender_id)


def normalize_pagination(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    """Clamp page to >= 1 and limit to [1, feed_max_limit]; fill defaults."""
    page = max(1, page or 1)
    if limit is None:
        limit = settings.feed_default_limit
    limit = max(1, min(limit, settings.feed_max_limit))
    return page, limit


def _parse_status(status: str, allowed: frozenset) -> ConnectionStatus:
    try:
        parsed = ConnectionStatus(status)
    except ValueError:
        parsed = None
    if parsed not in allowed:
        raise ValidationError(
            message=f"Invalid status: {status}",
            field="status",
            context={"allowed": sorted(s.value for s in allowed)},
        )
    return parsed


class SentRequest(NamedTuple):
    request: ConnectionRequest
    receiver: Account


@dataclass
class FeedPage:
    accounts: List[Account]
    page: int
    limit: int


class ConnectionService:
    """
    Business logic for connection requests.

    Responsibilities:
        - send(): create a request from the caller to another account
        - review(): receiver accepts or rejects an "interested" request
        - feed(): candidate accounts the caller has no request with
        - list_received(): pending "interested" requests addressed to the caller
        - list_connections(): accounts with an accepted request with the caller
    """

    async def send(
        self,
        db: AsyncSession,
        sender: Account,
        receiver_id: uuid.UUID,
        status: str,
    ) -> SentRequest:
        """
        Transition none → interested | ignored.

        Raises:
            ValidationError: status is not "interested" or "ignored"
            SelfReferenceError: sender and receiver are the same account
            NotFoundError: receiver account does not exist
            ConflictError: a request already exists for the pair, in any
                           direction and any status
        """
        parsed = _parse_status(status, SENDABLE_STATUSES)

        if sender.id == receiver_id:
            raise SelfReferenceError()

        receiver = await account_service.find_by_id(db, receiver_id)
        if receiver is None:
            raise NotFoundError(
                resource="account",
                resource_id=str(receiver_id),
                message="User doesn't exist",
            )

        try:
            result = await db.execute(
                select(ConnectionRequest.id).where(
                    or_(
                        and_(
                            ConnectionRequest.sender_id == sender.id,
                            ConnectionRequest.receiver_id == receiver_id,
                        ),
                        and_(
                            ConnectionRequest.sender_id == receiver_id,
                            ConnectionRequest.receiver_id == sender.id,
                        ),
                    )
                ).limit(1)
            )
            existing = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error checking existing request: %s", str(e))
            raise DatabaseError(context={"operation": "send_request"})

        if existing is not None:
            logger.info(
                "Duplicate connection request %s -> %s (existing %s)",
                sender.id, receiver_id, existing,
            )
            raise ConflictError(context={"existing_request_id": str(existing)})

        request = ConnectionRequest(
            sender_id=sender.id,
            receiver_id=receiver_id,
            pair_key=make_pair_key(sender.id, receiver_id),
            status=parsed,
        )
        db.add(request)
        try:
            await db.flush()
        except IntegrityError:
            # Lost the race against a concurrent send for the same pair
            await db.rollback()
            raise ConflictError()
        except SQLAlchemyError as e:
            logger.error("Database error creating connection request: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "send_request"})

        logger.info(
            "Connection request %s: %s -> %s (%s)",
            request.id, sender.id, receiver_id, parsed.value,
        )
        return SentRequest(request=request, receiver=receiver)

    async def review(
        self,
        db: AsyncSession,
        receiver: Account,
        request_id: uuid.UUID,
        status: str,
    ) -> ConnectionRequest:
        """
        Transition interested → accepted | rejected.

        Only a request addressed to `receiver` and still "interested" can be
        reviewed. Anything else (unknown id, someone else's request, already
        reviewed, "ignored") is reported as not found.

        Raises:
            ValidationError: status is not "accepted" or "rejected"
            NotFoundError: no reviewable request matches
        """
        parsed = _parse_status(status, REVIEWABLE_STATUSES)

        try:
            result = await db.execute(
                select(ConnectionRequest)
                .where(
                    ConnectionRequest.id == request_id,
                    ConnectionRequest.receiver_id == receiver.id,
                    ConnectionRequest.status == ConnectionStatus.INTERESTED,
                )
                .with_for_update()
            )
            request = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading request %s: %s", request_id, str(e))
            raise DatabaseError(context={"request_id": str(request_id)})

        if request is None:
            raise NotFoundError(
                resource="connection request",
                resource_id=str(request_id),
                message="Connection request doesn't exist",
            )

        request.status = parsed
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error reviewing request %s: %s", request_id, str(e))
            raise DatabaseError(context={"request_id": str(request_id)})

        logger.info("Connection request %s %s by %s", request.id, parsed.value, receiver.id)
        return request

    async def feed(
        self,
        db: AsyncSession,
        caller: Account,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> FeedPage:
        """
        One page of accounts the caller has no connection request with.

        Query plan:
            1. SELECT sender_id, receiver_id FROM connection_requests
               WHERE sender_id = :me OR receiver_id = :me
            2. SELECT * FROM accounts WHERE id NOT IN (:hidden)
               ORDER BY created_at, id OFFSET (page-1)*limit LIMIT limit
        """
        page, limit = normalize_pagination(page, limit)

        try:
            rows = await db.execute(
                select(ConnectionRequest.sender_id, ConnectionRequest.receiver_id).where(
                    or_(
                        ConnectionRequest.sender_id == caller.id,
                        ConnectionRequest.receiver_id == caller.id,
                    )
                )
            )
            hidden = {caller.id}
            for sender_id, receiver_id in rows:
                hidden.add(sender_id)
                hidden.add(receiver_id)

            result = await db.execute(
                select(Account)
                .where(Account.id.not_in(hidden))
                .order_by(Account.created_at, Account.id)
                .offset((page - 1) * limit)
                .limit(limit)
            )
            accounts = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error building feed for %s: %s", caller.id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "feed"})

        logger.debug(
            "Feed for %s: page=%d limit=%d excluded=%d returned=%d",
            caller.id, page, limit, len(hidden), len(accounts),
        )
        return FeedPage(accounts=accounts, page=page, limit=limit)

    async def list_received(self, db: AsyncSession, caller: Account) -> List[ConnectionRequest]:
        """Pending "interested" requests addressed to the caller, with senders loaded."""
        try:
            result = await db.execute(
                select(ConnectionRequest)
                .where(
                    ConnectionRequest.receiver_id == caller.id,
                    ConnectionRequest.status == ConnectionStatus.INTERESTED,
                )
                .options(selectinload(ConnectionRequest.sender))
                .order_by(ConnectionRequest.created_at, ConnectionRequest.id)
            )
            requests = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing received requests: %s", str(e))
            raise DatabaseError(context={"operation": "list_received"})

        # Requests from deleted accounts have nothing to show
        return [r for r in requests if r.sender is not None]

    async def list_connections(self, db: AsyncSession, caller: Account) -> List[Account]:
        """
        Accounts joined to the caller by an accepted request, each listed once.
        """
        try:
            result = await db.execute(
                select(ConnectionRequest)
                .where(
                    or_(
                        ConnectionRequest.sender_id == caller.id,
                        ConnectionRequest.receiver_id == caller.id,
                    ),
                    ConnectionRequest.status == ConnectionStatus.ACCEPTED,
                )
                .options(
                    selectinload(ConnectionRequest.sender),
                    selectinload(ConnectionRequest.receiver),
                )
                .order_by(ConnectionRequest.updated_at, ConnectionRequest.id)
            )
            requests = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing connections: %s", str(e))
            raise DatabaseError(context={"operation": "list_connections"})

        connections: List[Account] = []
        seen = set()
        for request in requests:
            party = other_party(request, caller.id)
            account = request.receiver if party.role == "receiver" else request.sender
            if account is None or party.account_id in seen:
                continue
            seen.add(party.account_id)
            connections.append(account)
        return connections


# ── Singleton Instance ────────────────────────────────────────────────────
connection_service = ConnectionService()
