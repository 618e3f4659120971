"""
Registration Key Use Cases

Lifecycle of tenant-scoped onboarding keys.
"""

from .generate_key_use_case import GenerateKeyUseCase
from .list_keys_use_case import ListKeysUseCase
from .revoke_key_use_case import RevokeKeyUseCase
from .get_key_usage_use_case import GetKeyUsageUseCase
from .validate_and_consume_key_use_case import ValidateAndConsumeKeyUseCase
from .dtos import (
    ConsumedKey,
    GeneratedKey,
    GenerateKeyCommand,
    KeySummary,
    KeyUsage,
    KeyUsageEntry,
)

__all__ = [
    # Use Cases
    "GenerateKeyUseCase",
    "ListKeysUseCase",
    "RevokeKeyUseCase",
    "GetKeyUsageUseCase",
    "ValidateAndConsumeKeyUseCase",
    # DTOs - Commands
    "GenerateKeyCommand",
    # DTOs - Responses
    "GeneratedKey",
    "KeySummary",
    "KeyUsage",
    "KeyUsageEntry",
    "ConsumedKey",
]
