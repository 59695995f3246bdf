"""Authentication exceptions."""

from app.core.exceptions import DomainException


class AuthenticationException(DomainException):
    """Base exception for authentication errors."""
    pass


class UserNotFoundException(AuthenticationException):
    """Raised when user is not found."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"User not found: {identifier}")
        self.identifier = identifier


class UserAlreadyExistsException(AuthenticationException):
    """Raised when trying to create user that already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"User already exists: {username}")
        self.username = username
