"""
Use Cases

Organized into domain folders:
- auth/: Login, registration, token rotation and revocation
- registration_keys/: Onboarding key lifecycle

Import from subdirectories for better organization.
"""

from .auth import (
    LoginUserUseCase,
    LoginAdminUseCase,
    RegisterUserUseCase,
    RefreshTokensUseCase,
    RevokeAllTokensUseCase,
    LogoutUseCase,
    ChangePasswordUseCase,
)
from .registration_keys import (
    GenerateKeyUseCase,
    ListKeysUseCase,
    RevokeKeyUseCase,
    GetKeyUsageUseCase,
    ValidateAndConsumeKeyUseCase,
)

__all__ = [
    # Auth
    "LoginUserUseCase",
    "LoginAdminUseCase",
    "RegisterUserUseCase",
    "RefreshTokensUseCase",
    "RevokeAllTokensUseCase",
    "LogoutUseCase",
    "ChangePasswordUseCase",
    # Registration keys
    "GenerateKeyUseCase",
    "ListKeysUseCase",
    "RevokeKeyUseCase",
    "GetKeyUsageUseCase",
    "ValidateAndConsumeKeyUseCase",
]
