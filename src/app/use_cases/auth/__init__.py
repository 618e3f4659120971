"""
Authentication Use Cases

All authentication-related business logic.
"""

from .login_user_use_case import LoginUserUseCase
from .login_admin_use_case import LoginAdminUseCase
from .register_user_use_case import RegisterUserUseCase
from .refresh_tokens_use_case import RefreshTokensUseCase
from .revoke_all_tokens_use_case import RevokeAllTokensUseCase
from .logout_use_case import LogoutUseCase
from .change_password_use_case import ChangePasswordUseCase
from .dtos import (
    AdminInfo,
    AdminLoginResponse,
    ChangePasswordCommand,
    ChangePasswordResponse,
    LoginResponse,
    LogoutResponse,
    RefreshResponse,
    RegisterCommand,
    RegisterResponse,
    RevokeAllResponse,
    SideEffectInfo,
    UserInfo,
)

__all__ = [
    # Use Cases
    "LoginUserUseCase",
    "LoginAdminUseCase",
    "RegisterUserUseCase",
    "RefreshTokensUseCase",
    "RevokeAllTokensUseCase",
    "LogoutUseCase",
    "ChangePasswordUseCase",
    # DTOs - Commands
    "RegisterCommand",
    "ChangePasswordCommand",
    # DTOs - Responses
    "LoginResponse",
    "AdminLoginResponse",
    "RegisterResponse",
    "RefreshResponse",
    "RevokeAllResponse",
    "LogoutResponse",
    "ChangePasswordResponse",
    # DTOs - Nested Models
    "UserInfo",
    "AdminInfo",
    "SideEffectInfo",
]
