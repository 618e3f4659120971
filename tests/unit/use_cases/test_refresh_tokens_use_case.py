from uuid import uuid4

import pytest

from src.app.services.unit_of_work import StorageError
from src.app.use_cases.auth import RefreshTokensUseCase
from src.domain.base import utcnow
from src.domain.entities import RefreshToken
from tests.utils.factories import make_admin, make_user


def _stored(token_service, token, owner_id, is_admin=False, is_active=True):
    return RefreshToken(
        id=uuid4(),
        user_id=owner_id,
        is_admin=is_admin,
        token_hash=token_service.hash_refresh_token(token),
        is_active=is_active,
        expires_at=token_service.refresh_expires_at(),
        created_at=utcnow(),
    )


@pytest.mark.asyncio
async def test_refresh_rotates_token(mock_uow, token_service):
    user = make_user(uuid4())
    presented = token_service.create_refresh_token(user)
    stored = _stored(token_service, presented, user.id)
    mock_uow.refresh_tokens.get_active_by_user.return_value = [stored]
    mock_uow.users.get_by_id.return_value = user

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(presented)

    assert result.is_ok()
    assert result.value.tokens.refresh_token != presented
    assert result.value.user.id == str(user.id)
    assert result.value.side_effects[0].succeeded is True
    mock_uow.refresh_tokens.revoke_by_id.assert_called_once_with(stored.id)
    new_record = mock_uow.refresh_tokens.create.call_args[0][0]
    assert new_record.token_hash == token_service.hash_refresh_token(
        result.value.tokens.refresh_token
    )
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_refresh_for_admin(mock_uow, token_service):
    admin = make_admin()
    presented = token_service.create_refresh_token(admin)
    mock_uow.refresh_tokens.get_active_by_user.return_value = [
        _stored(token_service, presented, admin.id, is_admin=True)
    ]
    mock_uow.admins.get_by_id.return_value = admin

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(presented)

    assert result.value.user.role == "admin"
    args = mock_uow.refresh_tokens.get_active_by_user.call_args[0]
    assert args[0] == admin.id and args[1] is True


@pytest.mark.asyncio
async def test_rotated_token_is_rejected(mock_uow, token_service):
    user = make_user(uuid4())
    presented = token_service.create_refresh_token(user)
    mock_uow.refresh_tokens.get_active_by_user.return_value = []
    mock_uow.refresh_tokens.get_by_hash.return_value = _stored(
        token_service, presented, user.id, is_active=False
    )

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(presented)

    assert result.error.code == "INVALID_TOKEN"
    assert result.error.message == "Invalid or expired refresh token"
    mock_uow.refresh_tokens.revoke_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_access_token_is_not_a_refresh_token(mock_uow, token_service):
    access = token_service.create_access_token(make_user(uuid4()))

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(access)

    assert result.error.code == "INVALID_TOKEN"
    mock_uow.refresh_tokens.get_active_by_user.assert_not_called()


@pytest.mark.asyncio
async def test_deactivated_user_cannot_refresh(mock_uow, token_service):
    user = make_user(uuid4(), is_active=False)
    presented = token_service.create_refresh_token(user)
    mock_uow.refresh_tokens.get_active_by_user.return_value = [
        _stored(token_service, presented, user.id)
    ]
    mock_uow.users.get_by_id.return_value = user

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(presented)

    assert result.error.code == "ACCOUNT_DEACTIVATED"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_rotation_loser_is_rejected(mock_uow, token_service):
    """The active record was already deactivated when this rotation tried to"""
    user = make_user(uuid4())
    presented = token_service.create_refresh_token(user)
    mock_uow.refresh_tokens.get_active_by_user.return_value = [
        _stored(token_service, presented, user.id)
    ]
    mock_uow.users.get_by_id.return_value = user
    mock_uow.refresh_tokens.revoke_by_id.return_value = False

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(presented)

    assert result.is_err()
    assert result.error.code == "INVALID_TOKEN"
    mock_uow.refresh_tokens.create.assert_not_called()
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_refresh_reports_unrecorded_token(mock_uow, token_service):
    user = make_user(uuid4())
    presented = token_service.create_refresh_token(user)
    mock_uow.refresh_tokens.get_active_by_user.return_value = [
        _stored(token_service, presented, user.id)
    ]
    mock_uow.users.get_by_id.return_value = user
    mock_uow.refresh_tokens.create.side_effect = StorageError("database is locked")

    result = await RefreshTokensUseCase(mock_uow, token_service).execute(presented)

    assert result.is_ok()
    assert [e.model_dump() for e in result.value.side_effects] == [
        {"name": "store_refresh_token", "succeeded": False}
    ]
    mock_uow.commit.assert_called_once()
