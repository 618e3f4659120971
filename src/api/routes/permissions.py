from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from src.api.utils.rbac import require_account_types, validate_tenant_access
from src.app.services.access_policy import (
    DashboardPermissions,
    Principal,
    get_dashboard_permissions,
)
from src.domain.entities import AccountType

router = APIRouter(tags=["Permissions"])


class PermissionsResponse(BaseModel):
    tenant_id: str
    account_type: AccountType
    permissions: DashboardPermissions


def _permissions_of(principal: Principal) -> PermissionsResponse:
    return PermissionsResponse(
        tenant_id=principal.tenant_id,
        account_type=principal.account_type,
        permissions=get_dashboard_permissions(principal.account_type),
    )


@router.get("/permissions", status_code=status.HTTP_200_OK, response_model=PermissionsResponse)
async def my_permissions(principal: Principal = Depends(require_account_types(AccountType))):
    """Dashboard capability flags of the caller's account tier"""
    return _permissions_of(principal)


@router.get(
    "/tenants/{tenant_id}/permissions",
    status_code=status.HTTP_200_OK,
    response_model=PermissionsResponse,
)
async def tenant_permissions(
    tenant_id: str,
    principal: Principal = Depends(validate_tenant_access),
    _tier: Principal = Depends(require_account_types(AccountType)),
):
    """
    Tenant-scoped Capability Flags

    Raises:
        - 401 Unauthorized: No identity or no tenant on the token
        - 403 Forbidden: tenant_id is not the caller's tenant
    """
    return _permissions_of(principal)
