"""Authentication service database models."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain.enums import UserType
from app.infrastructure.database.connection import Base


class UserModel(Base):
    """
    Database model for user accounts.

    Holds credentials, role and the single active refresh token of a user.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Unique user identifier"
    )

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique username"
    )

    email: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        doc="Unique email address"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Bcrypt hashed password"
    )

    user_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserType.END_USER.value,
        doc="Account role (EndUser, Admin or Partner)"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        doc="Whether user account is active"
    )

    refresh_token: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        doc="Current opaque refresh token"
    )

    refresh_token_expiry: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Refresh token expiration timestamp"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        doc="Account creation timestamp"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        doc="Last account update timestamp"
    )

    def __repr__(self) -> str:
        """String representation of user model."""
        return f"<UserModel(id={self.id}, username='{self.username}', user_type='{self.user_type}')>"
