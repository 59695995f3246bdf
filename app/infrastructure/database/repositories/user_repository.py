"""User repository implementation."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import case, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth.entities import User
from app.core.auth.exceptions import UserAlreadyExistsException, UserNotFoundException
from app.core.auth.interfaces import UserRepositoryInterface
from app.core.domain.enums import UserType
from app.core.services.auth.models import UserModel


class SqlUserRepository(UserRepositoryInterface):
    """SQLAlchemy implementation of user repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize user repository.

        Args:
            session: Database session
        """
        self._session = session

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity if found, None otherwise
        """
        return await self._get_one(UserModel.id == user_id)

    async def get_user_by_username_or_email(self, identifier: str) -> Optional[User]:
        """
        Get user by exact username or email match.

        A username may equal another account's email; the email match wins
        so every account can always sign in with its own address.

        Args:
            identifier: Username or email address

        Returns:
            User entity if found, None otherwise
        """
        result = await self._session.execute(
            select(UserModel)
            .where(or_(UserModel.username == identifier, UserModel.email == identifier))
            .order_by(case((UserModel.email == identifier, 0), else_=1), UserModel.id)
            .limit(1)
        )
        user_model = result.scalars().first()

        if user_model:
            return self._model_to_entity(user_model)
        return None

    async def get_user_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        """
        Get user holding a refresh token.

        Args:
            refresh_token: Refresh token string

        Returns:
            User entity if found, None otherwise
        """
        return await self._get_one(UserModel.refresh_token == refresh_token)

    async def exists_by_username(self, username: str) -> bool:
        result = await self._session.execute(
            select(UserModel.id).where(UserModel.username == username).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def exists_by_email(self, email: str) -> bool:
        result = await self._session.execute(
            select(UserModel.id).where(UserModel.email == email).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def create_user(self, user: User) -> User:
        """
        Create new user.

        Args:
            user: User entity to create

        Returns:
            Created user entity with ID

        Raises:
            UserAlreadyExistsException: If username or email already exists
        """
        user_model = UserModel(
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            user_type=user.user_type.value,
            is_active=user.is_active,
            refresh_token=user.refresh_token,
            refresh_token_expiry=user.refresh_token_expiry,
        )
        if user.created_at is not None:
            user_model.created_at = user.created_at
        if user.updated_at is not None:
            user_model.updated_at = user.updated_at

        try:
            self._session.add(user_model)
            await self._session.flush()
            await self._session.refresh(user_model)
            return self._model_to_entity(user_model)
        except IntegrityError:
            await self._session.rollback()
            raise UserAlreadyExistsException(user.username)

    async def update_user(self, user: User) -> User:
        """
        Overwrite existing user by ID.

        Args:
            user: User entity to update

        Returns:
            Updated user entity

        Raises:
            UserNotFoundException: If no user has this ID
        """
        result = await self._session.execute(
            select(UserModel).where(UserModel.id == user.id)
        )
        user_model = result.scalar_one_or_none()

        if user_model is None:
            raise UserNotFoundException(str(user.id))

        self._update_model_from_entity(user_model, user)
        await self._session.flush()
        return self._model_to_entity(user_model)

    async def list_users(self) -> List[User]:
        result = await self._session.execute(select(UserModel).order_by(UserModel.id))
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def _get_one(self, criterion) -> Optional[User]:
        result = await self._session.execute(select(UserModel).where(criterion))
        user_model = result.scalar_one_or_none()

        if user_model:
            return self._model_to_entity(user_model)
        return None

    def _model_to_entity(self, model: UserModel) -> User:
        """
        Convert database model to domain entity.

        Args:
            model: User database model

        Returns:
            User domain entity
        """
        return User(
            id=model.id,
            username=model.username,
            email=model.email,
            password_hash=model.password_hash,
            user_type=UserType(model.user_type),
            is_active=model.is_active,
            refresh_token=model.refresh_token,
            refresh_token_expiry=_as_utc(model.refresh_token_expiry),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )

    def _update_model_from_entity(self, model: UserModel, entity: User) -> None:
        """
        Update database model from domain entity.

        Args:
            model: User database model
            entity: User domain entity
        """
        model.username = entity.username
        model.email = entity.email
        model.password_hash = entity.password_hash
        model.user_type = entity.user_type.value
        model.is_active = entity.is_active
        model.refresh_token = entity.refresh_token
        model.refresh_token_expiry = entity.refresh_token_expiry
        if entity.updated_at is not None:
            model.updated_at = entity.updated_at


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo on the way back; stored values are always UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
