"""Create accounts and connection_requests tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: accounts plus the connection_requests edge table.
How:   Column definitions mirror app/models/account.py and
       app/models/connection_request.py.

connection_requests carries no foreign keys: sender_id / receiver_id are
weak references and deleting an account leaves its requests in place.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CONNECTION_STATUSES = ("interested", "ignored", "accepted", "rejected")


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "email",
            sa.String(255),
            nullable=False,
            comment="Login identifier, lower-cased and trimmed",
        ),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash of the account password",
        ),
        sa.Column("first_name", sa.String(15), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column(
            "gender",
            sa.String(10),
            nullable=True,
            comment="One of: male, female, others",
        ),
        sa.Column("about", sa.Text(), nullable=False),
        sa.Column(
            "skills",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("photo_url", sa.String(1024), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "connection_requests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("sender_id", sa.Uuid(), nullable=False),
        sa.Column("receiver_id", sa.Uuid(), nullable=False),
        sa.Column(
            "pair_key",
            sa.String(80),
            nullable=False,
            comment="Unordered pair key: '<smaller id>:<larger id>'",
        ),
        sa.Column(
            "status",
            sa.Enum(
                *CONNECTION_STATUSES,
                name="connection_status",
                native_enum=False,
                length=20,
            ),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("sender_id <> receiver_id", name="ck_connection_requests_not_self"),
        sa.UniqueConstraint("pair_key", name="uq_connection_requests_pair_key"),
    )

    # Existence check and feed exclusion both filter on (sender_id, receiver_id)
    op.create_index(
        "idx_connection_requests_sender_receiver",
        "connection_requests",
        ["sender_id", "receiver_id"],
    )
    op.create_index(
        "ix_connection_requests_receiver_id",
        "connection_requests",
        ["receiver_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_connection_requests_receiver_id", table_name="connection_requests")
    op.drop_index("idx_connection_requests_sender_receiver", table_name="connection_requests")
    op.drop_table("connection_requests")
    op.drop_table("accounts")
