"""
Tenant Entity

Represents an isolated law-firm workspace.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class Tenant(SQLModel, table=True):
    """
    Tenant entity - root aggregate of data partitioning.

    Business Rules:
    - Owns zero or more users
    - Registration keys are always bound to exactly one tenant
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_tenant_is_active", "is_active"),)
