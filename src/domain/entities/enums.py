"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class AccountType(str, Enum):
    """Account tier of a tenant user, ordered SIMPLES < COMPOSTA < GERENCIAL"""

    SIMPLES = "SIMPLES"
    COMPOSTA = "COMPOSTA"
    GERENCIAL = "GERENCIAL"


class AdminRole(str, Enum):
    """Platform operator role"""

    superadmin = "superadmin"
    admin = "admin"
