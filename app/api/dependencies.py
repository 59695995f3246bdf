"""FastAPI dependency injection setup."""

from functools import lru_cache
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth.entities import User
from app.core.auth.services import AuthenticationService, PasswordService, TokenService
from app.infrastructure.database.repositories.user_repository import SqlUserRepository
from app.infrastructure.database.session import get_session
from app.settings import get_settings

security = HTTPBearer(auto_error=False)


@lru_cache()
def get_password_service() -> PasswordService:
    """Process-wide password service owning the hashing thread pool."""
    settings = get_settings()
    return PasswordService(
        rounds=settings.bcrypt_rounds,
        max_workers=settings.password_hash_workers,
    )


@lru_cache()
def get_token_service() -> TokenService:
    """Process-wide token engine built from read-only signing settings."""
    return TokenService(get_settings().token_settings())


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide database session for dependency injection.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_session():
        yield session


async def get_user_repository(
        session: AsyncSession = Depends(get_database_session),
) -> SqlUserRepository:
    """
    Provide user repository bound to the request session.

    Args:
        session: Database session

    Returns:
        SqlUserRepository: User repository instance
    """
    return SqlUserRepository(session)


async def get_auth_service(
        user_repository: SqlUserRepository = Depends(get_user_repository),
        password_service: PasswordService = Depends(get_password_service),
        token_service: TokenService = Depends(get_token_service),
) -> AuthenticationService:
    """
    Provide authentication service for dependency injection.

    A new service is built per request so it never outlives its session.

    Args:
        user_repository: User repository for the current request
        password_service: Shared password service
        token_service: Shared token service

    Returns:
        AuthenticationService: Authentication service instance
    """
    settings = get_settings()
    return AuthenticationService(
        user_repository,
        password_service,
        token_service,
        remember_me_refresh_days=settings.remember_me_refresh_token_days,
        rotated_refresh_days=settings.rotated_refresh_token_days,
    )


async def get_bearer_token(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        HTTPException: If the header is missing or not a bearer header
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


async def get_current_user(
        token: str = Depends(get_bearer_token),
        auth_service: AuthenticationService = Depends(get_auth_service),
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        token: Bearer token
        auth_service: Authentication service

    Returns:
        User: Current active user

    Raises:
        HTTPException: If token is invalid or user is missing or inactive
    """
    result = await auth_service.validate_token(token)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.user


async def require_admin(
        token: str = Depends(get_bearer_token),
        auth_service: AuthenticationService = Depends(get_auth_service),
) -> str:
    """
    Gate an endpoint on the admin role carried by the bearer token.

    Returns:
        str: The verified admin token

    Raises:
        HTTPException: If the token does not grant admin access
    """
    if not auth_service.is_admin(token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return token
