"""Database initialization utilities."""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select, text

from app.core.auth.entities import User, utc_now
from app.core.auth.interfaces import PasswordServiceInterface
from app.core.domain.enums import UserType
from app.core.services.auth.models import UserModel
from app.infrastructure.database.connection import Base
from app.infrastructure.database.repositories.user_repository import SqlUserRepository
from app.infrastructure.database.session import get_engine, get_session_maker
from app.settings import get_settings

logger = logging.getLogger(__name__)


def get_alembic_config() -> Config:
    """Get Alembic configuration for the project root."""
    project_root = Path(__file__).parent.parent.parent.parent
    alembic_ini_path = project_root / "alembic.ini"

    alembic_cfg = Config(str(alembic_ini_path))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    return alembic_cfg


def run_alembic_migrations() -> None:
    """Run all pending Alembic migrations."""
    command.upgrade(get_alembic_config(), "head")


async def create_tables() -> None:
    """Create missing tables straight from the model metadata."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(password_service: PasswordServiceInterface) -> None:
    """Run migrations and seed the configured accounts."""
    try:
        logger.info("Running database migrations...")
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, run_alembic_migrations)
        logger.info("Database migrations completed successfully")

        await seed_accounts(password_service)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def seed_accounts(password_service: PasswordServiceInterface) -> List[User]:
    """
    Create the configured admin and end user accounts.

    Returns:
        Users created by this call
    """
    created = []
    for seed in (seed_admin, seed_end_user):
        user = await seed(password_service)
        if user is not None:
            created.append(user)
    return created


async def seed_admin(password_service: PasswordServiceInterface) -> Optional[User]:
    """
    Create the configured admin account when it does not exist yet.

    Nothing is seeded unless ``SEED_ADMIN_PASSWORD`` is set.

    Returns:
        Created admin user, None if nothing was created
    """
    settings = get_settings()
    if not settings.seed_admin_password:
        return None

    return await ensure_user(
        password_service,
        username=settings.seed_admin_username,
        email=settings.seed_admin_email,
        password=settings.seed_admin_password,
        user_type=UserType.ADMIN,
    )


async def seed_end_user(password_service: PasswordServiceInterface) -> Optional[User]:
    """Create the configured end user when ``SEED_USER_PASSWORD`` is set."""
    settings = get_settings()
    if not settings.seed_user_password:
        return None

    return await ensure_user(
        password_service,
        username=settings.seed_user_username,
        email=settings.seed_user_email,
        password=settings.seed_user_password,
    )


async def ensure_user(
    password_service: PasswordServiceInterface,
    username: str,
    email: str,
    password: str,
    user_type: UserType = UserType.END_USER,
) -> Optional[User]:
    """
    Create a user unless the username or email is already taken.

    Returns:
        Created user, None if an account already exists
    """
    session_maker = get_session_maker()

    async with session_maker() as session:
        repository = SqlUserRepository(session)
        try:
            if await repository.exists_by_username(username) or await repository.exists_by_email(email):
                logger.info(f"User '{username}' already exists, skipping")
                return None

            now = utc_now()
            user = await repository.create_user(
                User(
                    id=None,
                    username=username,
                    email=email,
                    password_hash=await password_service.hash_password(password),
                    user_type=user_type,
                    created_at=now,
                    updated_at=now,
                )
            )
            await session.commit()
            logger.info(f"Created {user_type.value} user id={user.id}")
            return user
        except Exception:
            await session.rollback()
            raise


async def check_database_health() -> bool:
    """Check that the database answers a trivial query."""
    try:
        async with get_session_maker()() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def get_database_info() -> Dict[str, Dict[str, int]]:
    """Count users per role."""
    async with get_session_maker()() as session:
        result = await session.execute(
            select(UserModel.user_type, func.count(UserModel.id)).group_by(UserModel.user_type)
        )
        return {"users": {user_type: count for user_type, count in result.all()}}
