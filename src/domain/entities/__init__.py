"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AccountType, AdminRole

# Export all entities
from .tenant import Tenant
from .user import User
from .admin import Admin
from .registration_key import RegistrationKey
from .registration_key_usage import RegistrationKeyUsage
from .refresh_token import RefreshToken

__all__ = [
    # Enums
    "AccountType",
    "AdminRole",
    # Entities
    "Tenant",
    "User",
    "Admin",
    "RegistrationKey",
    "RegistrationKeyUsage",
    "RefreshToken",
]
