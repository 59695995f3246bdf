"""Authentication service interfaces."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from app.core.domain.enums import UserType
from .entities import AuthResult, TokenClaims, User


class PasswordServiceInterface(ABC):
    """Interface for password hashing and verification."""

    @abstractmethod
    async def hash_password(self, password: str) -> str:
        """
        Hash a password securely.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        pass

    @abstractmethod
    async def verify_password(self, password: str, password_hash: str) -> bool:
        """
        Verify password against hash.

        Args:
            password: Plain text password
            password_hash: Stored password hash

        Returns:
            True if password matches, False otherwise
        """
        pass


class TokenServiceInterface(ABC):
    """Interface for access and refresh token operations."""

    @abstractmethod
    def issue_access_token(self, user: User) -> Tuple[str, datetime]:
        """
        Create signed access token for user along with its expiry.

        Args:
            user: User entity

        Returns:
            Encoded access token and the UTC instant of its ``exp`` claim
        """
        pass

    @abstractmethod
    def create_access_token(self, user: User) -> str:
        """
        Create signed access token for user.

        Args:
            user: User entity

        Returns:
            Encoded access token
        """
        pass

    @abstractmethod
    def generate_refresh_token(self) -> str:
        """
        Generate an opaque refresh token.

        Returns:
            Random refresh token string
        """
        pass

    @abstractmethod
    def decode_token(self, token: str) -> Optional[TokenClaims]:
        """
        Decode and validate access token.

        Args:
            token: Encoded access token

        Returns:
            Token claims if the token is valid, None otherwise
        """
        pass

    @abstractmethod
    def validate_token(self, token: str) -> bool:
        """
        Check signature, issuer, audience and expiry of a token.

        Args:
            token: Encoded access token

        Returns:
            True if token is valid, False otherwise
        """
        pass

    @abstractmethod
    def get_user_id(self, token: str) -> Optional[str]:
        """
        Get subject claim from a valid token.

        Args:
            token: Encoded access token

        Returns:
            Subject claim, None if token is invalid
        """
        pass

    @abstractmethod
    def get_user_type(self, token: str) -> Optional[UserType]:
        """
        Get role claim from a valid token.

        Args:
            token: Encoded access token

        Returns:
            Role claim, None if token is invalid
        """
        pass


class UserRepositoryInterface(ABC):
    """Interface for user data access operations."""

    @abstractmethod
    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User identifier

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_user_by_username_or_email(self, identifier: str) -> Optional[User]:
        """
        Get user whose username or email equals the identifier.

        Args:
            identifier: Username or email address

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_user_by_refresh_token(self, refresh_token: str) -> Optional[User]:
        """
        Get user holding the given refresh token.

        Args:
            refresh_token: Refresh token string

        Returns:
            User entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """
        Check if username is taken.

        Args:
            username: Username

        Returns:
            True if a user with this username exists
        """
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """
        Check if email is taken.

        Args:
            email: Email address

        Returns:
            True if a user with this email exists
        """
        pass

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """
        Create new user.

        Args:
            user: User entity to create

        Returns:
            Created user entity with ID
        """
        pass

    @abstractmethod
    async def update_user(self, user: User) -> User:
        """
        Overwrite existing user by ID.

        Args:
            user: User entity to update

        Returns:
            Updated user entity
        """
        pass

    @abstractmethod
    async def list_users(self) -> List[User]:
        """
        List all users ordered by ID.

        Returns:
            List of user entities
        """
        pass


class AuthServiceInterface(ABC):
    """Interface for the authentication core."""

    @abstractmethod
    async def login(
        self, username_or_email: str, password: str, remember_me: bool = False
    ) -> AuthResult:
        """Authenticate credentials and issue tokens."""
        pass

    @abstractmethod
    async def register(
        self,
        username: str,
        email: str,
        password: str,
        user_type: UserType = UserType.END_USER,
    ) -> AuthResult:
        """Create an account and issue an access token."""
        pass

    @abstractmethod
    async def validate_token(self, token: str) -> AuthResult:
        """Resolve an access token to an active user."""
        pass

    @abstractmethod
    async def refresh_token(self, refresh_token: str) -> AuthResult:
        """Exchange a refresh token for rotated credentials."""
        pass

    @abstractmethod
    async def logout(self, token: str) -> bool:
        """End a client session."""
        pass

    @abstractmethod
    def is_admin(self, token: str) -> bool:
        """Check whether a token grants admin access."""
        pass
