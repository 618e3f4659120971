"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Identities are exposed without their password hash.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel

from src.app.services.token_issuer import SideEffect, TokenIssuance, TokenPair
from src.domain.entities import AccountType, Admin, User


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(BaseModel):
    """Register command - onboarding through a registration key"""

    email: str
    password: str
    name: str
    registration_key: str
    source: str = "system"


class ChangePasswordCommand(BaseModel):
    current_password: str
    new_password: str


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    """Tenant user as returned to clients"""

    id: str
    email: str
    name: str
    account_type: AccountType
    tenant_id: str
    is_active: bool
    must_change_password: bool
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserInfo":
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            account_type=user.account_type,
            tenant_id=str(user.tenant_id),
            is_active=user.is_active,
            must_change_password=user.must_change_password,
            last_login_at=user.last_login_at,
        )


class AdminInfo(BaseModel):
    """Platform admin as returned to clients"""

    id: str
    email: str
    name: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, admin: Admin) -> "AdminInfo":
        return cls(
            id=str(admin.id),
            email=admin.email,
            name=admin.name,
            role=getattr(admin.role, "value", admin.role),
            is_active=admin.is_active,
            last_login_at=admin.last_login_at,
        )


class SideEffectInfo(BaseModel):
    name: str
    succeeded: bool

    @classmethod
    def from_effect(cls, effect: SideEffect) -> "SideEffectInfo":
        return cls(name=effect.name, succeeded=effect.succeeded)

    @classmethod
    def from_issuance(cls, issuance: TokenIssuance) -> List["SideEffectInfo"]:
        return [cls.from_effect(effect) for effect in issuance.side_effects]


class LoginResponse(BaseModel):
    """Response for user login use case"""

    user: UserInfo
    tokens: TokenPair
    side_effects: List[SideEffectInfo] = []


class AdminLoginResponse(BaseModel):
    """Response for admin login use case"""

    admin: AdminInfo
    tokens: TokenPair
    side_effects: List[SideEffectInfo] = []


class RegisterResponse(BaseModel):
    """Response for register use case"""

    user: UserInfo
    tokens: TokenPair
    is_new_tenant: bool = False
    side_effects: List[SideEffectInfo] = []


class RefreshResponse(BaseModel):
    """Response for refresh tokens use case"""

    user: Union[UserInfo, AdminInfo]
    tokens: TokenPair
    side_effects: List[SideEffectInfo] = []


class RevokeAllResponse(BaseModel):
    """Response for revoke-all tokens use case"""

    revoked_count: int
    side_effects: List[SideEffectInfo]


class LogoutResponse(BaseModel):
    revoked: bool


class ChangePasswordResponse(BaseModel):
    status: str
    message: str
    revoked_sessions: int
