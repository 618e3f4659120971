"""
Registration Key Use Case DTOs (Data Transfer Objects)

Commands and responses for the registration key store. None of them carries
the key hash; the plaintext appears only in GeneratedKey.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.domain.entities import AccountType, RegistrationKey, RegistrationKeyUsage


class GenerateKeyCommand(BaseModel):
    """Generate key command - tenant and tier the key will grant"""

    tenant_id: str
    account_type: AccountType
    uses_allowed: Optional[int] = None
    expires_at: Optional[datetime] = None
    single_use: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class GeneratedKey(BaseModel):
    """Freshly generated key; `key` is never retrievable again"""

    id: str
    key: str
    tenant_id: str
    account_type: AccountType
    uses_allowed: int
    single_use: bool
    expires_at: Optional[datetime] = None


class KeySummary(BaseModel):
    id: str
    tenant_id: str
    account_type: AccountType
    uses_allowed: int
    uses_left: int
    single_use: bool
    revoked: bool
    expires_at: Optional[datetime] = None
    created_at: datetime
    created_by: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, key: RegistrationKey) -> "KeySummary":
        return cls(
            id=str(key.id),
            tenant_id=str(key.tenant_id),
            account_type=key.account_type,
            uses_allowed=key.uses_allowed,
            uses_left=key.uses_left,
            single_use=key.single_use,
            revoked=key.revoked,
            expires_at=key.expires_at,
            created_at=key.created_at,
            created_by=key.created_by,
            metadata=key.key_metadata or {},
        )


class KeyUsageEntry(BaseModel):
    used_at: datetime
    tenant_id: str
    user_id: Optional[str] = None
    email: Optional[str] = None
    source: str

    @classmethod
    def from_entity(cls, usage: RegistrationKeyUsage) -> "KeyUsageEntry":
        return cls(
            used_at=usage.used_at,
            tenant_id=str(usage.tenant_id),
            user_id=str(usage.user_id) if usage.user_id else None,
            email=usage.email,
            source=usage.source,
        )


class KeyUsage(BaseModel):
    """Usage summary of one key"""

    id: str
    tenant_id: str
    account_type: AccountType
    uses_allowed: int
    uses_left: int
    used_logs: List[KeyUsageEntry]
    revoked: bool
    expires_at: Optional[datetime] = None
    created_at: datetime


class ConsumedKey(BaseModel):
    """What a consumed key grants"""

    account_type: AccountType
    tenant_id: str
