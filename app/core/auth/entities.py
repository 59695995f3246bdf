"""Authentication domain entities."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.core.domain.enums import UserType
from app.core.exceptions import ConfigurationException

MIN_SECRET_KEY_BYTES = 32


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """
    User entity for authentication.

    Attributes:
        id: Unique user identifier, None until persisted
        username: Unique username
        email: Unique email address
        password_hash: Salted one-way password hash
        user_type: Account role
        is_active: Whether user account is active
        refresh_token: Current opaque refresh token, if any
        refresh_token_expiry: Expiry of the current refresh token
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: Optional[int]
    username: str
    email: str
    password_hash: str = field(repr=False)
    user_type: UserType = UserType.END_USER
    is_active: bool = True
    refresh_token: Optional[str] = field(default=None, repr=False)
    refresh_token_expiry: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if not self.username:
            raise ValueError("Username cannot be empty")
        if not self.email:
            raise ValueError("Email cannot be empty")
        if not self.password_hash:
            raise ValueError("Password hash cannot be empty")
        if "@" not in self.email:
            raise ValueError("Invalid email format")
        if (self.refresh_token is None) != (self.refresh_token_expiry is None):
            raise ValueError("Refresh token and expiry must be set together")
        if (
            self.created_at is not None
            and self.updated_at is not None
            and self.updated_at < self.created_at
        ):
            raise ValueError("Updated timestamp cannot precede creation")

    @property
    def is_admin(self) -> bool:
        """Check if user holds the admin role."""
        return self.user_type is UserType.ADMIN

    def with_refresh_token(
        self, token: str, expires_at: datetime, now: datetime
    ) -> "User":
        """
        Return a copy carrying a new refresh token.

        The previous refresh token, if any, is superseded.

        Args:
            token: New opaque refresh token
            expires_at: Expiry of the new token
            now: Timestamp recorded as the update time

        Returns:
            Updated user entity
        """
        return replace(
            self,
            refresh_token=token,
            refresh_token_expiry=expires_at,
            updated_at=now,
        )

    def refresh_token_expired(self, now: datetime) -> bool:
        """Check whether the refresh token is missing or past its expiry."""
        return self.refresh_token_expiry is None or self.refresh_token_expiry < now


@dataclass(frozen=True)
class TokenSettings:
    """
    Immutable signing configuration for access tokens.

    Attributes:
        secret_key: Shared HMAC secret, at least 32 bytes
        issuer: Expected ``iss`` claim
        audience: Expected ``aud`` claim
        algorithm: JWS algorithm
        access_token_expire_minutes: Access token lifetime
    """

    secret_key: str = field(repr=False)
    issuer: str
    audience: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    def __post_init__(self) -> None:
        if len(self.secret_key.encode("utf-8")) < MIN_SECRET_KEY_BYTES:
            raise ConfigurationException(
                "jwt", f"secret key must be at least {MIN_SECRET_KEY_BYTES} bytes"
            )
        if not self.issuer or not self.audience:
            raise ConfigurationException("jwt", "issuer and audience are required")
        if self.access_token_expire_minutes <= 0:
            raise ConfigurationException("jwt", "access token lifetime must be positive")

    @property
    def access_token_lifetime(self) -> timedelta:
        return timedelta(minutes=self.access_token_expire_minutes)


@dataclass(frozen=True)
class TokenClaims:
    """
    Validated access token claims.

    Attributes:
        subject: Subject claim (user ID as string)
        username: Username claim
        email: Email claim
        role: Role claim, None when it names no known role
        issued_at: Issued-at timestamp (epoch seconds)
        expires_at: Expiration timestamp (epoch seconds)
    """

    subject: Optional[str]
    username: Optional[str]
    email: Optional[str]
    role: Optional[UserType]
    issued_at: int
    expires_at: int


@dataclass(frozen=True)
class AuthResult:
    """
    Outcome of an authentication core operation.

    Failures carry only a message; tokens, expiry and user are attached
    exclusively to successful results.
    """

    success: bool
    message: str
    token: Optional[str] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    expires_at: Optional[datetime] = None
    user: Optional[User] = None

    def __post_init__(self) -> None:
        if not self.message:
            raise ValueError("Message cannot be empty")
        if not self.success and any(
            value is not None
            for value in (self.token, self.refresh_token, self.expires_at, self.user)
        ):
            raise ValueError("Failed results cannot carry tokens or a user")

    @classmethod
    def failed(cls, message: str) -> "AuthResult":
        """Build a failed result."""
        return cls(success=False, message=message)

    @classmethod
    def succeeded(
        cls,
        message: str,
        user: User,
        token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> "AuthResult":
        """Build a successful result."""
        return cls(
            success=True,
            message=message,
            token=token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            user=user,
        )
