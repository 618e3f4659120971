"""
User Entity

Represents a person working inside exactly one tenant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import AccountType


class User(SQLModel, table=True):
    """
    User entity - a tenant member with an account tier.

    Business Rules:
    - Email must be unique across all users
    - tenant_id always references an existing tenant
    - Password stored as bcrypt hash (cost factor 12)
    - Never physically deleted; is_active=False deactivates the account
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    account_type: AccountType = Field(nullable=False)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    is_active: bool = Field(default=True)
    must_change_password: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_user_tenant_account_type", "tenant_id", "account_type"),)
