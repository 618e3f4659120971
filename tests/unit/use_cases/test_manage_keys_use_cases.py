from uuid import uuid4

import pytest

from src.app.use_cases.registration_keys import (
    GetKeyUsageUseCase,
    ListKeysUseCase,
    RevokeKeyUseCase,
)
from src.domain.entities import RegistrationKeyUsage
from tests.utils.factories import make_key


@pytest.mark.asyncio
async def test_list_keys_never_exposes_hash(mock_uow):
    tenant_id = uuid4()
    mock_uow.registration_keys.list_all.return_value = [make_key(tenant_id)]

    result = await ListKeysUseCase(mock_uow).execute(str(tenant_id))

    assert result.is_ok()
    summary = result.value[0]
    assert "key_hash" not in summary.model_dump()
    mock_uow.registration_keys.list_all.assert_called_once_with(tenant_id)


@pytest.mark.asyncio
async def test_list_keys_rejects_bad_tenant_filter(mock_uow):
    result = await ListKeysUseCase(mock_uow).execute("nope")

    assert result.error.code == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_revoke_key(mock_uow):
    key = make_key(uuid4())
    key.revoked = True
    mock_uow.registration_keys.get_by_id.return_value = key

    result = await RevokeKeyUseCase(mock_uow).execute(key.id)

    assert result.value.revoked is True
    mock_uow.registration_keys.revoke.assert_called_once_with(key.id)
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_revoke_unknown_key(mock_uow):
    mock_uow.registration_keys.revoke.return_value = False

    result = await RevokeKeyUseCase(mock_uow).execute(uuid4())

    assert result.error.code == "KEY_NOT_FOUND"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_key_usage_lists_log(mock_uow):
    key = make_key(uuid4(), uses_left=1, uses_allowed=3)
    mock_uow.registration_keys.get_by_id.return_value = key
    mock_uow.registration_keys.get_usages.return_value = [
        RegistrationKeyUsage(
            key_id=key.id, tenant_id=key.tenant_id, user_id=uuid4(), email="a@b.com", source="10.0.0.1"
        ),
        RegistrationKeyUsage(key_id=key.id, tenant_id=key.tenant_id, source="system"),
    ]

    result = await GetKeyUsageUseCase(mock_uow).execute(key.id)

    usage = result.value
    assert usage.uses_allowed == 3
    assert usage.uses_left == 1
    assert [entry.source for entry in usage.used_logs] == ["10.0.0.1", "system"]


@pytest.mark.asyncio
async def test_key_usage_unknown_key(mock_uow):
    result = await GetKeyUsageUseCase(mock_uow).execute(uuid4())

    assert result.error.code == "KEY_NOT_FOUND"
