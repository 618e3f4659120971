from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.rbac import require_admin
from src.api.utils.timeouts import with_storage_timeout
from src.app.services.access_policy import Principal
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.registration_keys import (
    ConsumedKey,
    GeneratedKey,
    GenerateKeyCommand,
    GenerateKeyUseCase,
    GetKeyUsageUseCase,
    KeySummary,
    KeyUsage,
    ListKeysUseCase,
    RevokeKeyUseCase,
    ValidateAndConsumeKeyUseCase,
)
from src.depends import get_unit_of_work
from src.domain.entities import AccountType

router = APIRouter(
    prefix="/admin/registration-keys",
    tags=["Registration Keys"],
    dependencies=[Depends(require_admin)],
)


class GenerateKeyRequest(BaseModel):
    """
    Generate registration key payload

    uses_allowed defaults to 1; single_use defaults to uses_allowed == 1.
    """

    tenant_id: str = Field(..., description="Tenant the key onboards users into")
    account_type: AccountType = Field(..., description="Tier granted to registrants")
    uses_allowed: Optional[int] = Field(None, description="Number of registrations allowed")
    expires_at: Optional[datetime] = Field(None, description="Expiry instant (UTC)")
    single_use: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


@router.post("", status_code=status.HTTP_201_CREATED, response_model=GeneratedKey)
async def generate_key(
    body: GenerateKeyRequest,
    request: Request,
    admin: Principal = Depends(require_admin),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Generate Registration Key

    The plaintext key is returned once and never stored.

    Raises:
        - 400 Bad Request: Invalid tenant id, uses or expiry
        - 404 Not Found: Tenant does not exist
    """
    command = GenerateKeyCommand(**body.model_dump())
    use_case = GenerateKeyUseCase(uow)
    result = await with_storage_timeout(
        use_case.execute(command, created_by=admin.user_id), request
    )

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=List[KeySummary])
async def list_keys(
    request: Request,
    tenant_id: Optional[str] = Query(None, description="Only keys of this tenant"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """List registration keys without their hashes"""
    use_case = ListKeysUseCase(uow)
    result = await with_storage_timeout(use_case.execute(tenant_id), request)

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


@router.post("/{key_id}/revoke", status_code=status.HTTP_200_OK, response_model=KeySummary)
async def revoke_key(
    key_id: UUID, request: Request, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Revoke Registration Key

    Idempotent: revoking a revoked key succeeds.

    Raises:
        - 404 Not Found: Key does not exist
    """
    use_case = RevokeKeyUseCase(uow)
    result = await with_storage_timeout(use_case.execute(key_id), request)

    if result.is_err():
        error = result.error
        if error.code == "KEY_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get("/{key_id}/usage", status_code=status.HTTP_200_OK, response_model=KeyUsage)
async def get_key_usage(
    key_id: UUID, request: Request, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """Remaining uses and the append-only usage log of one key"""
    use_case = GetKeyUsageUseCase(uow)
    result = await with_storage_timeout(use_case.execute(key_id), request)

    if result.is_err():
        error = result.error
        if error.code == "KEY_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class ConsumeKeyRequest(BaseModel):
    key: str = Field(..., min_length=1, description="Plaintext registration key")
    tenant_id: str = Field(..., min_length=1, description="Tenant the key must belong to")


@router.post("/consume", status_code=status.HTTP_200_OK, response_model=ConsumedKey)
async def consume_key(
    body: ConsumeKeyRequest, request: Request, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Validate and Consume a Key

    Consumes one use outside the registration flow, e.g. for provisioning
    done by an operator.

    Raises:
        - 400 Bad Request: Malformed tenant id, or a key that is invalid, revoked,
          expired, exhausted or of another tenant
    """
    use_case = ValidateAndConsumeKeyUseCase(uow)
    result = await with_storage_timeout(
        use_case.execute(body.key, body.tenant_id, source="admin"), request
    )

    if result.is_err():
        error = result.error
        if error.code.startswith("KEY_") or error.code in ("INVALID_KEY", "VALIDATION_ERROR"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value
