"""
Request guards for account tiers, modules, tenants and admins.

Each guard evaluates a pure decision from src.app.services.access_policy and
turns a denial into a ClientError carrying the decision details:
- AUTHENTICATION_REQUIRED -> 401
- PERMISSION_DENIED -> 403
"""

import logging
from typing import Iterable, Optional

from fastapi import Depends, Request, status
from libs.result import Error
from src.api.error import ClientError
from src.app.services.access_policy import (
    AccessDecision,
    Module,
    Principal,
    check_account_types,
    check_forbidden_account_types,
    check_module_access,
    check_tenant_access,
)
from src.depends import get_current_principal, get_optional_principal
from src.domain.entities import AccountType

logger = logging.getLogger(__name__)


def enforce(decision: AccessDecision, request: Request, principal: Optional[Principal]) -> None:
    if decision.allowed:
        return

    logger.warning(
        f"Access denied ({decision.code}): user_id="
        f"{principal.user_id if principal else None} endpoint={request.url.path} "
        f"details={decision.details}"
    )
    status_code = (
        status.HTTP_401_UNAUTHORIZED
        if decision.code == "AUTHENTICATION_REQUIRED"
        else status.HTTP_403_FORBIDDEN
    )
    raise ClientError(
        Error(decision.code, decision.message, dict(decision.details)),
        status_code=status_code,
    )


def require_account_types(allowed: Iterable[AccountType]):
    """Dependency factory: only the listed tiers pass"""
    allowed = frozenset(allowed)

    async def guard(
        request: Request, principal: Optional[Principal] = Depends(get_optional_principal)
    ) -> Principal:
        enforce(check_account_types(principal, allowed), request, principal)
        return principal

    return guard


def forbid_account_types(forbidden: Iterable[AccountType]):
    """Dependency factory: every tier except the listed ones passes"""
    forbidden = frozenset(forbidden)

    async def guard(
        request: Request, principal: Optional[Principal] = Depends(get_optional_principal)
    ) -> Principal:
        enforce(check_forbidden_account_types(principal, forbidden), request, principal)
        return principal

    return guard


def require_module(module: Module):
    async def guard(
        request: Request, principal: Optional[Principal] = Depends(get_optional_principal)
    ) -> Principal:
        enforce(check_module_access(principal, module), request, principal)
        return principal

    return guard


require_cash_flow_access = require_module(Module.cash_flow)
require_settings_access = require_module(Module.settings)


async def validate_tenant_access(
    request: Request, principal: Optional[Principal] = Depends(get_optional_principal)
) -> Principal:
    """Tenant isolation for routes carrying {tenant_id} in their path"""
    requested = request.path_params.get("tenant_id")
    enforce(check_tenant_access(principal, requested), request, principal)
    return principal


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise ClientError(
            Error("PERMISSION_DENIED", "Admin privileges required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return principal
