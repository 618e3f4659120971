"""
RefreshToken Entity

Stores hashes of issued refresh tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - server-side record of an issued refresh token.

    Business Rules:
    - Token stored as SHA-256 hex of the signed JWT
    - Several active tokens per identity (one per device)
    - Rotation deactivates the presented token; revoke-all deactivates every one
    - user_id references users or admins depending on is_admin
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(nullable=False, index=True)
    is_admin: bool = Field(default=False)

    token_hash: str = Field(max_length=64, index=True)  # SHA-256 output
    is_active: bool = Field(default=True)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_refresh_token_owner_active", "user_id", "is_admin", "is_active"),
        Index("idx_refresh_token_expires_at", "expires_at"),
    )
