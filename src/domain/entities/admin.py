"""
Admin Entity

Platform operators, authenticated separately from tenant users.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow

from .enums import AdminRole


class Admin(SQLModel, table=True):
    """
    Admin entity - platform operator identity, disjoint from User.

    Business Rules:
    - Tokens carry `role` instead of tenant_id/account_type
    - Manages registration keys for every tenant
    """

    __tablename__ = "admins"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=255)
    password_hash: str = Field(max_length=60)

    role: AdminRole = Field(default=AdminRole.admin)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
