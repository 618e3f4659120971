"""
Access Policy

Single source of truth for what each account tier may reach. Both the
request guards and the dashboard capability flags read MODULE_TIERS.

Tiers (ordered):
- SIMPLES: no detailed financial data, no cash flow
- COMPOSTA: everything except settings
- GERENCIAL: everything
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional

from pydantic import BaseModel

from src.domain.entities import AccountType

TIER_RANK: Dict[AccountType, int] = {
    AccountType.SIMPLES: 1,
    AccountType.COMPOSTA: 2,
    AccountType.GERENCIAL: 3,
}


def tiers_at_least(minimum: AccountType) -> FrozenSet[AccountType]:
    return frozenset(t for t, rank in TIER_RANK.items() if rank >= TIER_RANK[minimum])


class Module(str, Enum):
    financial_charts = "financial_charts"
    cash_flow = "cash_flow"
    settings = "settings"
    all_modules = "all_modules"


MODULE_TIERS: Dict[Module, FrozenSet[AccountType]] = {
    Module.financial_charts: tiers_at_least(AccountType.COMPOSTA),
    Module.cash_flow: tiers_at_least(AccountType.COMPOSTA),
    Module.settings: frozenset({AccountType.GERENCIAL}),
    Module.all_modules: frozenset({AccountType.GERENCIAL}),
}


@dataclass(frozen=True)
class Principal:
    """Caller identity resolved from a verified access token"""

    user_id: str
    email: str
    name: str
    tenant_id: Optional[str] = None
    account_type: Optional[AccountType] = None
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is not None

    @classmethod
    def from_claims(cls, claims: dict) -> "Principal":
        account_type = claims.get("account_type")
        return cls(
            user_id=claims["user_id"],
            email=claims.get("email", ""),
            name=claims.get("name", ""),
            tenant_id=claims.get("tenant_id"),
            account_type=AccountType(account_type) if account_type else None,
            role=claims.get("role"),
        )


@dataclass(frozen=True)
class AccessDecision:
    """Pass-through or structured denial; guards never raise"""

    allowed: bool
    code: Optional[str] = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def authentication_required(cls, message: str) -> "AccessDecision":
        return cls(allowed=False, code="AUTHENTICATION_REQUIRED", message=message)

    @classmethod
    def deny(cls, message: str, **details) -> "AccessDecision":
        return cls(allowed=False, code="PERMISSION_DENIED", message=message, details=details)


def _ordered(types: Iterable[AccountType]) -> list:
    return [t.value for t in sorted(set(types), key=TIER_RANK.get)]


def _missing_tier(principal: Optional[Principal]) -> Optional[AccessDecision]:
    if principal is None or principal.account_type is None:
        return AccessDecision.authentication_required(
            "User not authenticated or account type not identified"
        )
    return None


def check_account_types(
    principal: Optional[Principal], allowed: Iterable[AccountType]
) -> AccessDecision:
    allowed = frozenset(allowed)
    missing = _missing_tier(principal)
    if missing:
        return missing
    if principal.account_type not in allowed:
        return AccessDecision.deny(
            "Access denied for this account type",
            required=_ordered(allowed),
            current=principal.account_type.value,
        )
    return AccessDecision.allow()


def check_forbidden_account_types(
    principal: Optional[Principal], forbidden: Iterable[AccountType]
) -> AccessDecision:
    forbidden = frozenset(forbidden)
    missing = _missing_tier(principal)
    if missing:
        return missing
    if principal.account_type in forbidden:
        return AccessDecision.deny(
            "Access denied for this account type",
            forbidden=_ordered(forbidden),
            current=principal.account_type.value,
        )
    return AccessDecision.allow()


def check_module_access(principal: Optional[Principal], module: Module) -> AccessDecision:
    return check_account_types(principal, MODULE_TIERS[module])


def check_tenant_access(
    principal: Optional[Principal], requested_tenant_id: Optional[str]
) -> AccessDecision:
    """
    Tenant isolation: a tenant id in the request path must be the caller's own.

    Requests without a tenant id in the path pass once the caller has a tenant.
    """
    if principal is None or not principal.tenant_id:
        return AccessDecision.authentication_required(
            "User not authenticated or tenant not identified"
        )
    if requested_tenant_id and str(requested_tenant_id) != str(principal.tenant_id):
        return AccessDecision.deny(
            "Access denied: tenant not authorized",
            user_tenant=principal.tenant_id,
            requested_tenant=str(requested_tenant_id),
        )
    return AccessDecision.allow()


class DashboardPermissions(BaseModel):
    can_view_financial_charts: bool
    can_view_cash_flow: bool
    can_view_settings: bool
    can_view_all_modules: bool


def get_dashboard_permissions(account_type: AccountType) -> DashboardPermissions:
    return DashboardPermissions(
        can_view_financial_charts=account_type in MODULE_TIERS[Module.financial_charts],
        can_view_cash_flow=account_type in MODULE_TIERS[Module.cash_flow],
        can_view_settings=account_type in MODULE_TIERS[Module.settings],
        can_view_all_modules=account_type in MODULE_TIERS[Module.all_modules],
    )
