from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from libs.result import Error
from src.api.error import ClientError, ServerError
from src.api.utils.timeouts import with_storage_timeout
from src.app.services.access_policy import (
    DashboardPermissions,
    Principal,
    get_dashboard_permissions,
)
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AdminLoginResponse,
    ChangePasswordCommand,
    ChangePasswordResponse,
    ChangePasswordUseCase,
    LoginAdminUseCase,
    LoginResponse,
    LoginUserUseCase,
    LogoutResponse,
    LogoutUseCase,
    RefreshResponse,
    RefreshTokensUseCase,
    RegisterCommand,
    RegisterResponse,
    RegisterUserUseCase,
    RevokeAllResponse,
    RevokeAllTokensUseCase,
)
from src.depends import get_current_principal, get_token_service, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])

KEY_ERROR_CODES = (
    "INVALID_KEY",
    "KEY_REVOKED",
    "KEY_EXPIRED",
    "KEY_EXHAUSTED",
    "KEY_TENANT_MISMATCH",
)


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Shared by tenant users and platform admins.
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=1, description="Account password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Tenant User Login

    Unknown email and wrong password produce the same 401 response.

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account deactivated
        - 500 Internal Server Error: Server error
    """
    use_case = LoginUserUseCase(uow, token_service)
    result = await with_storage_timeout(use_case.execute(body.email, body.password), request)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_DEACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


@router.post(
    "/admin/login", status_code=status.HTTP_200_OK, response_model=AdminLoginResponse
)
async def admin_login(
    body: LoginRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Platform Admin Login

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: Account deactivated
    """
    use_case = LoginAdminUseCase(uow, token_service)
    result = await with_storage_timeout(use_case.execute(body.email, body.password), request)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_DEACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    The registration key decides the tenant and the account tier.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    registration_key: str = Field(..., min_length=1, description="Plaintext registration key")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    body: RegisterRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Register With a Registration Key

    Consumes one use of the matching key, creates the user in the key's
    tenant with the key's account type and returns a token pair.

    Raises:
        - 400 Bad Request: Key invalid, revoked, expired or exhausted
        - 404 Not Found: Tenant of the key no longer exists
        - 409 Conflict: Email already registered
        - 500 Internal Server Error: Server error
    """
    command = RegisterCommand(
        email=body.email,
        password=body.password,
        name=body.name,
        registration_key=body.registration_key,
        source=request.client.host if request.client else "system",
    )

    use_case = RegisterUserUseCase(uow, token_service)
    result = await with_storage_timeout(use_case.execute(command), request)

    if result.is_err():
        error = result.error
        if error.code in KEY_ERROR_CODES or error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "USER_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        elif error.code == "TENANT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=RefreshResponse)
async def refresh(
    body: RefreshRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """
    Rotate Refresh Token

    The presented refresh token is revoked and a new pair is issued.

    Raises:
        - 401 Unauthorized: Token invalid, expired or already rotated
        - 403 Forbidden: Account deactivated
    """
    use_case = RefreshTokensUseCase(uow, token_service)
    result = await with_storage_timeout(use_case.execute(body.refresh_token), request)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_TOKEN":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_DEACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    body: RefreshRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_service: TokenService = Depends(get_token_service),
):
    """Revoke one refresh token; unknown or already revoked tokens report revoked=false"""
    use_case = LogoutUseCase(uow, token_service)
    result = await with_storage_timeout(use_case.execute(body.refresh_token), request)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.post(
    "/logout-all", status_code=status.HTTP_200_OK, response_model=RevokeAllResponse
)
async def logout_all(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Every Refresh Token of the Caller

    Revocation is best-effort: a storage failure is reported in
    side_effects instead of failing the request.
    """
    use_case = RevokeAllTokensUseCase(uow)
    result = await with_storage_timeout(
        use_case.execute(UUID(principal.user_id), is_admin=principal.is_admin), request
    )

    if result.is_err():
        raise ServerError(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 chars)")


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ChangePasswordResponse,
)
async def change_password(
    body: ChangePasswordRequest,
    request: Request,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change Password

    Revokes all refresh tokens of the user once the new password is stored.

    Raises:
        - 400 Bad Request: New password equals the current one
        - 401 Unauthorized: Current password is wrong
        - 403 Forbidden: Admin caller or account deactivated
        - 404 Not Found: User no longer exists
    """
    if principal.is_admin:
        raise ClientError(
            Error("PERMISSION_DENIED", "Password change is available to tenant users only"),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    command = ChangePasswordCommand(
        current_password=body.current_password, new_password=body.new_password
    )
    use_case = ChangePasswordUseCase(uow)
    result = await with_storage_timeout(
        use_case.execute(UUID(principal.user_id), command), request
    )

    if result.is_err():
        error = result.error
        if error.code == "VALIDATION_ERROR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        elif error.code == "ACCOUNT_DEACTIVATED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "USER_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class MeResponse(BaseModel):
    """Identity carried by the caller's access token"""

    user_id: str
    email: str
    name: str
    tenant_id: Optional[str] = None
    account_type: Optional[str] = None
    role: Optional[str] = None
    permissions: Optional[DashboardPermissions] = None


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MeResponse)
async def me(principal: Principal = Depends(get_current_principal)):
    """Claims of the current access token, with dashboard flags for tenant users"""
    return MeResponse(
        user_id=principal.user_id,
        email=principal.email,
        name=principal.name,
        tenant_id=principal.tenant_id,
        account_type=principal.account_type.value if principal.account_type else None,
        role=principal.role,
        permissions=(
            get_dashboard_permissions(principal.account_type)
            if principal.account_type
            else None
        ),
    )
