"""
RegistrationKeyUsage Entity

Append-only log of registration key consumptions.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class RegistrationKeyUsage(SQLModel, table=True):
    """
    RegistrationKeyUsage entity - one row per successful key consumption.

    Business Rules:
    - Immutable (never updated or deleted)
    - user_id/email are set when the consumption created a user
    """

    __tablename__ = "registration_key_usages"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    key_id: UUID = Field(foreign_key="registration_keys.id", nullable=False, index=True)
    tenant_id: UUID = Field(nullable=False)

    user_id: Optional[UUID] = Field(default=None)
    email: Optional[str] = Field(default=None, max_length=255)
    source: str = Field(default="system", max_length=100)  # client IP or "system"

    used_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
