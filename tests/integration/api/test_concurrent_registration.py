import asyncio
from uuid import UUID

import pytest
from httpx import AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.auth import RegisterCommand, RegisterUserUseCase
from src.app.use_cases.registration_keys import ValidateAndConsumeKeyUseCase
from src.domain.entities import RegistrationKey, User


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def register_concurrently(app, session_factory):
    """Run RegisterUserUseCase on separate sessions at the same time"""
    token_service = app.state.token_service

    async def _attempt(key, email):
        async with session_factory() as session:
            use_case = RegisterUserUseCase(SqlAlchemyUnitOfWork(session), token_service)
            return await use_case.execute(
                RegisterCommand(
                    email=email,
                    password="SecurePass123!",
                    name="Concurrent User",
                    registration_key=key,
                )
            )

    async def _run(key, emails):
        return await asyncio.gather(*(_attempt(key, email) for email in emails))

    return _run


async def _uses_left(session_factory, key_id):
    async with session_factory() as session:
        stored = await session.get(RegistrationKey, UUID(key_id))
        return stored.uses_left


@pytest.mark.asyncio
async def test_key_never_exceeds_uses_allowed(
    client: AsyncClient, tenant, generate_key, register_concurrently, session_factory
):
    key = await generate_key(tenant.id, uses_allowed=2)

    results = await register_concurrently(
        key["key"], [f"user{i}@silva.adv.br" for i in range(3)]
    )

    succeeded = [r for r in results if r.is_ok()]
    failed = [r for r in results if r.is_err()]
    assert len(succeeded) == 2
    assert {r.error.code for r in failed} == {"KEY_EXHAUSTED"}
    assert await _uses_left(session_factory, key["id"]) == 0


@pytest.mark.asyncio
async def test_single_use_key_registers_exactly_once(
    client: AsyncClient, tenant, generate_key, register_concurrently, session_factory
):
    key = await generate_key(tenant.id)
    assert key["single_use"] is True

    results = await register_concurrently(
        key["key"], [f"solo{i}@silva.adv.br" for i in range(3)]
    )

    assert len([r for r in results if r.is_ok()]) == 1
    assert {r.error.code for r in results if r.is_err()} == {"KEY_EXHAUSTED"}
    assert await _uses_left(session_factory, key["id"]) == 0

    async with session_factory() as session:
        users = (await session.exec(select(User))).all()
    assert len(users) == 1


@pytest.mark.asyncio
async def test_single_use_key_consumed_exactly_once(
    client: AsyncClient, tenant, generate_key, session_factory
):
    key = await generate_key(tenant.id)
    tenant_id = str(tenant.id)

    async def _consume():
        async with session_factory() as session:
            use_case = ValidateAndConsumeKeyUseCase(SqlAlchemyUnitOfWork(session))
            return await use_case.execute(key["key"], tenant_id)

    results = await asyncio.gather(*(_consume() for _ in range(3)))

    succeeded = [r for r in results if r.is_ok()]
    assert len(succeeded) == 1
    assert succeeded[0].value.tenant_id == tenant_id
    assert {r.error.code for r in results if r.is_err()} == {"KEY_EXHAUSTED"}
    assert await _uses_left(session_factory, key["id"]) == 0


@pytest.mark.asyncio
async def test_same_email_race_reports_user_exists(
    client: AsyncClient, tenant, generate_key, register_concurrently, session_factory
):
    key = await generate_key(tenant.id, uses_allowed=2)

    results = await register_concurrently(key["key"], ["dup@silva.adv.br", "DUP@silva.adv.br"])

    assert len([r for r in results if r.is_ok()]) == 1
    assert [r.error.code for r in results if r.is_err()] == ["USER_EXISTS"]
    # the loser never took a use
    assert await _uses_left(session_factory, key["id"]) == 1
