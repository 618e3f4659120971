"""
RegistrationKey Entity

Out-of-band onboarding secret that mints users into one tenant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import AccountType


class RegistrationKey(SQLModel, table=True):
    """
    RegistrationKey entity - tenant-scoped onboarding key.

    Business Rules:
    - Only the bcrypt hash of the key is stored; plaintext is returned once
    - uses_left never increases and never drops below zero
    - A key bound to tenant T can only mint users in T
    - Revoked or expired keys never validate
    """

    __tablename__ = "registration_keys"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key_hash: str = Field(max_length=60)

    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    account_type: AccountType = Field(nullable=False)

    uses_allowed: int = Field(default=1)
    uses_left: int = Field(default=1)
    single_use: bool = Field(default=True)
    revoked: bool = Field(default=False)

    key_metadata: dict = Field(default_factory=dict, sa_column=Column(JSON))
    created_by: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_registration_key_revoked", "revoked"),)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at
