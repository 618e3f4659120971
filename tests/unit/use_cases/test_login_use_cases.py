from uuid import uuid4

import pytest

from src.app.services.unit_of_work import StorageError
from src.app.use_cases.auth import LoginAdminUseCase, LoginUserUseCase
from src.domain.entities import AccountType
from tests.utils.factories import make_admin, make_user


@pytest.mark.asyncio
async def test_successful_login(mock_uow, token_service):
    user = make_user(uuid4(), account_type=AccountType.GERENCIAL)
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUserUseCase(mock_uow, token_service).execute(user.email, "SecurePass123!")

    assert result.is_ok()
    response = result.value
    assert response.user.id == str(user.id)
    assert response.user.account_type == AccountType.GERENCIAL
    assert "password_hash" not in response.user.model_dump()
    claims = token_service.verify_access_token(response.tokens.access_token)
    assert claims["tenant_id"] == str(user.tenant_id)
    assert claims["account_type"] == "GERENCIAL"
    assert user.last_login_at is not None
    mock_uow.users.update.assert_called_once()
    mock_uow.refresh_tokens.create.assert_called_once()
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_unknown_email_and_wrong_password_are_indistinguishable(mock_uow, token_service):
    use_case = LoginUserUseCase(mock_uow, token_service)

    unknown = await use_case.execute("nobody@silva.adv.br", "SecurePass123!")

    mock_uow.users.get_by_email.return_value = make_user(uuid4())
    wrong = await use_case.execute("ana@silva.adv.br", "WrongPass999!")

    assert unknown.error == wrong.error
    assert unknown.error.code == "INVALID_CREDENTIALS"
    assert unknown.error.message == "Invalid email or password"
    mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
async def test_deactivated_user_after_correct_password(mock_uow, token_service):
    mock_uow.users.get_by_email.return_value = make_user(uuid4(), is_active=False)

    result = await LoginUserUseCase(mock_uow, token_service).execute(
        "ana@silva.adv.br", "SecurePass123!"
    )

    assert result.error.code == "ACCOUNT_DEACTIVATED"


@pytest.mark.asyncio
async def test_deactivated_user_with_wrong_password_gets_generic_error(mock_uow, token_service):
    mock_uow.users.get_by_email.return_value = make_user(uuid4(), is_active=False)

    result = await LoginUserUseCase(mock_uow, token_service).execute(
        "ana@silva.adv.br", "WrongPass999!"
    )

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_admin_login_issues_role_token(mock_uow, token_service):
    admin = make_admin()
    mock_uow.admins.get_by_email.return_value = admin

    result = await LoginAdminUseCase(mock_uow, token_service).execute(admin.email, "AdminPass123!")

    assert result.value.admin.role == "admin"
    claims = token_service.verify_access_token(result.value.tokens.access_token)
    assert claims["role"] == "admin"
    record = mock_uow.refresh_tokens.create.call_args[0][0]
    assert record.is_admin is True


@pytest.mark.asyncio
async def test_admin_login_with_wrong_password(mock_uow, token_service):
    mock_uow.admins.get_by_email.return_value = make_admin()

    result = await LoginAdminUseCase(mock_uow, token_service).execute(
        "ops@legalsaas.com", "nope"
    )

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_survives_refresh_token_storage_failure(mock_uow, token_service):
    mock_uow.users.get_by_email.return_value = make_user(uuid4())
    mock_uow.refresh_tokens.create.side_effect = StorageError("locked")

    result = await LoginUserUseCase(mock_uow, token_service).execute(
        "ana@silva.adv.br", "SecurePass123!"
    )

    assert result.is_ok()
    effect = result.value.side_effects[0]
    assert effect.name == "store_refresh_token"
    assert effect.succeeded is False
    mock_uow.commit.assert_called_once()
