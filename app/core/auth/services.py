"""Authentication service implementations."""

import asyncio
import logging
import secrets
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.domain.enums import UserType
from .entities import AuthResult, TokenClaims, TokenSettings, User, utc_now
from .interfaces import (
    AuthServiceInterface,
    PasswordServiceInterface,
    TokenServiceInterface,
    UserRepositoryInterface,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid username/email or password"
ACCOUNT_DEACTIVATED_MESSAGE = "Account is deactivated"
INVALID_TOKEN_MESSAGE = "Invalid token"

REFRESH_TOKEN_BYTES = 64


class PasswordService(PasswordServiceInterface):
    """
    BCrypt-based password hashing service.

    Hashing is deliberately slow, so every hash and verify call runs on a
    dedicated thread pool instead of the event loop or its default executor.
    Concurrent logins then queue on the pool without stalling unrelated
    requests.
    """

    def __init__(self, rounds: int = 12, max_workers: int = 4) -> None:
        """
        Initialize password context with bcrypt.

        Args:
            rounds: BCrypt cost factor
            max_workers: Size of the hashing thread pool
        """
        self._pwd_context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="password-hash"
        )

    async def hash_password(self, password: str) -> str:
        """
        Hash a password securely using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._pwd_context.hash, password)

    async def verify_password(self, password: str, password_hash: str) -> bool:
        """
        Verify password against bcrypt hash in constant time.

        Args:
            password: Plain text password
            password_hash: Stored password hash

        Returns:
            True if password matches, False otherwise
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, self._pwd_context.verify, password, password_hash
        )

    def shutdown(self) -> None:
        """Stop the hashing thread pool."""
        self._executor.shutdown(wait=True)


class TokenService(TokenServiceInterface):
    """
    JWT-based access token engine.

    Access tokens are HS256-signed and self-contained, so validating one never
    touches the user store. Refresh tokens are opaque random strings and only
    mean something once persisted on a user record.
    """

    def __init__(
        self,
        settings: TokenSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize token service.

        Args:
            settings: Immutable signing configuration
            clock: Source of the current UTC time
        """
        self._settings = settings
        self._clock = clock

    def issue_access_token(self, user: User) -> Tuple[str, datetime]:
        """
        Create JWT access token for user.

        Args:
            user: User entity

        Returns:
            JWT access token string and the expiry it carries
        """
        now = self._clock()
        expires = int((now + self._settings.access_token_lifetime).timestamp())

        payload = {
            "sub": str(user.id),
            "name": user.username,
            "email": user.email,
            "role": user.user_type.value,
            "iat": int(now.timestamp()),
            "exp": expires,
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
        }

        token = jwt.encode(
            payload, self._settings.secret_key, algorithm=self._settings.algorithm
        )
        return token, datetime.fromtimestamp(expires, timezone.utc)

    def create_access_token(self, user: User) -> str:
        token, _ = self.issue_access_token(user)
        return token

    def generate_refresh_token(self) -> str:
        """
        Create secure refresh token string.

        Returns:
            URL-safe random token carrying 512 bits of entropy
        """
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

    def decode_token(self, token: str) -> Optional[TokenClaims]:
        """
        Decode and validate JWT token.

        Malformed input of any kind is reported as an invalid token.

        Args:
            token: JWT token string

        Returns:
            Token claims if valid, None otherwise
        """
        if not token or not isinstance(token, str):
            return None

        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                options={"leeway": 0, "require_exp": True, "require_iat": True},
            )
        except (JWTError, ValueError) as e:
            logger.debug(f"Token rejected: {e}")
            return None

        return TokenClaims(
            subject=payload.get("sub"),
            username=payload.get("name"),
            email=payload.get("email"),
            role=UserType.parse(payload.get("role")),
            issued_at=payload["iat"],
            expires_at=payload["exp"],
        )

    def validate_token(self, token: str) -> bool:
        return self.decode_token(token) is not None

    def get_user_id(self, token: str) -> Optional[str]:
        claims = self.decode_token(token)
        return claims.subject if claims else None

    def get_user_type(self, token: str) -> Optional[UserType]:
        claims = self.decode_token(token)
        return claims.role if claims else None


class AuthenticationService(AuthServiceInterface):
    """
    High-level authentication service orchestrating auth operations.

    Every operation is independent and keeps no state between calls. Expected
    failures are reported in-band through ``AuthResult``; unexpected errors
    from the store are logged and folded into a failed result as well.
    """

    def __init__(
        self,
        user_repository: UserRepositoryInterface,
        password_service: PasswordServiceInterface,
        token_service: TokenServiceInterface,
        remember_me_refresh_days: int = 30,
        rotated_refresh_days: int = 7,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize authentication service.

        Args:
            user_repository: User data access interface
            password_service: Password hashing service
            token_service: Token management service
            remember_me_refresh_days: Refresh token lifetime granted at login
            rotated_refresh_days: Refresh token lifetime after rotation
            clock: Source of the current UTC time
        """
        self._user_repository = user_repository
        self._password_service = password_service
        self._token_service = token_service
        self._remember_me_lifetime = timedelta(days=remember_me_refresh_days)
        self._rotated_lifetime = timedelta(days=rotated_refresh_days)
        self._clock = clock

    async def login(
        self, username_or_email: str, password: str, remember_me: bool = False
    ) -> AuthResult:
        """
        Authenticate user and issue tokens.

        Unknown accounts and wrong passwords produce the same message.

        Args:
            username_or_email: Username or email
            password: Plain text password
            remember_me: Whether to also grant a refresh token

        Returns:
            Login result
        """
        try:
            user = await self._user_repository.get_user_by_username_or_email(
                username_or_email
            )
            if user is None:
                return AuthResult.failed(INVALID_CREDENTIALS_MESSAGE)

            if not user.is_active:
                return AuthResult.failed(ACCOUNT_DEACTIVATED_MESSAGE)

            if not await self._password_service.verify_password(
                password, user.password_hash
            ):
                logger.info(f"Failed login for user id={user.id}")
                return AuthResult.failed(INVALID_CREDENTIALS_MESSAGE)

            token, expires_at = self._token_service.issue_access_token(user)

            refresh_token = None
            if remember_me:
                now = self._clock()
                refresh_token = self._token_service.generate_refresh_token()
                user = await self._user_repository.update_user(
                    user.with_refresh_token(
                        refresh_token, now + self._remember_me_lifetime, now
                    )
                )

            logger.info(f"User id={user.id} logged in (remember_me={remember_me})")
            return AuthResult.succeeded(
                "Login successful",
                user=user,
                token=token,
                refresh_token=refresh_token,
                expires_at=expires_at,
            )
        except Exception as e:
            logger.exception("Login failed")
            return AuthResult.failed(f"Login failed: {e}")

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        user_type: UserType = UserType.END_USER,
    ) -> AuthResult:
        """
        Register new user account.

        Username availability is checked before email, and a taken username
        ends the call without looking at the email. Registration never grants
        a refresh token.

        Args:
            username: Unique username
            email: User email address
            password: Plain text password
            user_type: Account role

        Returns:
            Registration result
        """
        try:
            if await self._user_repository.exists_by_username(username):
                return AuthResult.failed("Username already exists")

            if await self._user_repository.exists_by_email(email):
                return AuthResult.failed("Email already exists")

            password_hash = await self._password_service.hash_password(password)
            now = self._clock()

            user = await self._user_repository.create_user(
                User(
                    id=None,
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    user_type=user_type,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
            )

            token, expires_at = self._token_service.issue_access_token(user)

            logger.info(f"Registered user id={user.id} as {user.user_type.value}")
            return AuthResult.succeeded(
                "Registration successful",
                user=user,
                token=token,
                expires_at=expires_at,
            )
        except Exception as e:
            logger.exception("Registration failed")
            return AuthResult.failed(f"Registration failed: {e}")

    async def validate_token(self, token: str) -> AuthResult:
        """
        Resolve access token to an active user.

        Args:
            token: JWT access token

        Returns:
            Validation result carrying the user on success
        """
        try:
            if not self._token_service.validate_token(token):
                return AuthResult.failed(INVALID_TOKEN_MESSAGE)

            user_id = _parse_user_id(self._token_service.get_user_id(token))
            if user_id is None:
                return AuthResult.failed(INVALID_TOKEN_MESSAGE)

            user = await self._user_repository.get_user_by_id(user_id)
            if user is None or not user.is_active:
                return AuthResult.failed("User not found or inactive")

            return AuthResult.succeeded("Token is valid", user=user)
        except Exception as e:
            logger.exception("Token validation failed")
            return AuthResult.failed(f"Token validation failed: {e}")

    async def refresh_token(self, refresh_token: str) -> AuthResult:
        """
        Rotate credentials using a refresh token.

        The presented token is replaced by a new one with a shorter lifetime.

        Args:
            refresh_token: Refresh token previously issued to the user

        Returns:
            Refresh result with new access and refresh tokens
        """
        try:
            user = await self._user_repository.get_user_by_refresh_token(refresh_token)
            if user is None:
                return AuthResult.failed("Invalid refresh token")

            if not user.is_active:
                return AuthResult.failed(ACCOUNT_DEACTIVATED_MESSAGE)

            now = self._clock()
            if user.refresh_token_expired(now):
                return AuthResult.failed("Refresh token has expired")

            token, expires_at = self._token_service.issue_access_token(user)
            new_refresh_token = self._token_service.generate_refresh_token()

            user = await self._user_repository.update_user(
                user.with_refresh_token(new_refresh_token, now + self._rotated_lifetime, now)
            )

            logger.info(f"Rotated refresh token for user id={user.id}")
            return AuthResult.succeeded(
                "Token refreshed successfully",
                user=user,
                token=token,
                refresh_token=new_refresh_token,
                expires_at=expires_at,
            )
        except Exception as e:
            logger.exception("Token refresh failed")
            return AuthResult.failed(f"Token refresh failed: {e}")

    async def logout(self, token: str) -> bool:
        """
        End a client session.

        Access tokens are stateless and stay valid until they expire; the
        client is responsible for discarding them. Any input, including an
        empty string, is accepted.

        Args:
            token: Access token the client is discarding

        Returns:
            Always True
        """
        return True

    def is_admin(self, token: str) -> bool:
        """
        Check whether a token grants admin access.

        Args:
            token: JWT access token

        Returns:
            True if token is valid and carries the admin role
        """
        try:
            if not self._token_service.validate_token(token):
                return False
            return self._token_service.get_user_type(token) is UserType.ADMIN
        except Exception:
            logger.exception("Admin check failed")
            return False


def _parse_user_id(subject: Optional[str]) -> Optional[int]:
    """Parse numeric subject claim."""
    if not subject:
        return None
    try:
        return int(subject)
    except ValueError:
        return None
