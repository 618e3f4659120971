from typing import Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.access_policy import Principal
from src.app.services.token_service import TokenService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

# auto_error=False: guards decide between "no identity" and "bad identity"
security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_token_service(request: Request) -> TokenService:
    """Token service built once from AuthSettings in create_app"""
    return request.app.state.token_service


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> Optional[Principal]:
    """
    Dependency resolving the caller from the Authorization header.

    Returns:
        Principal built from verified access token claims, or None when no
        bearer token was sent

    Raises:
        ClientError: 401 INVALID_TOKEN if a token was sent but does not verify
    """
    if credentials is None:
        return None

    claims = token_service.verify_access_token(credentials.credentials)
    try:
        if claims is None:
            raise ValueError("unverifiable token")
        return Principal.from_claims(claims)
    except (KeyError, ValueError):
        raise ClientError(
            Error("INVALID_TOKEN", "Invalid or expired access token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


async def get_current_principal(
    principal: Optional[Principal] = Depends(get_optional_principal),
) -> Principal:
    if principal is None:
        raise ClientError(
            Error("AUTHENTICATION_REQUIRED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return principal
