from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.auth_settings import AuthSettings
from src.app.services.token_service import TokenService


@asynccontextmanager
async def _savepoint():
    yield


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.savepoint = MagicMock(side_effect=lambda: _savepoint())

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.admins = MagicMock()
    uow.admins.get_by_email = AsyncMock(return_value=None)
    uow.admins.get_by_id = AsyncMock(return_value=None)
    uow.admins.update = AsyncMock(side_effect=lambda admin: admin)

    uow.tenants = MagicMock()
    uow.tenants.get_by_id = AsyncMock(return_value=None)

    uow.registration_keys = MagicMock()
    uow.registration_keys.create = AsyncMock(side_effect=lambda key: key)
    uow.registration_keys.get_by_id = AsyncMock(return_value=None)
    uow.registration_keys.list_all = AsyncMock(return_value=[])
    uow.registration_keys.revoke = AsyncMock(return_value=True)
    uow.registration_keys.consume_use = AsyncMock(return_value=True)
    uow.registration_keys.add_usage = AsyncMock(side_effect=lambda usage: usage)
    uow.registration_keys.get_usages = AsyncMock(return_value=[])

    uow.refresh_tokens = MagicMock()
    uow.refresh_tokens.create = AsyncMock(side_effect=lambda token: token)
    uow.refresh_tokens.get_by_hash = AsyncMock(return_value=None)
    uow.refresh_tokens.get_active_by_user = AsyncMock(return_value=[])
    uow.refresh_tokens.revoke_by_id = AsyncMock(return_value=True)
    uow.refresh_tokens.revoke_all_by_user = AsyncMock(return_value=0)

    return uow


@pytest.fixture
def auth_settings():
    return AuthSettings(
        access_secret="unit-access-secret",
        refresh_secret="unit-refresh-secret",
    )


@pytest.fixture
def token_service(auth_settings):
    return TokenService(auth_settings)
