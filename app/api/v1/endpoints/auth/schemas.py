"""Authentication API schemas."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from app.core.auth.entities import AuthResult
from app.core.domain.enums import UserType


class CamelModel(BaseModel):
    """Base schema speaking camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RegisterRequest(CamelModel):
    """User registration request schema."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Username (3-50 characters)",
        examples=["john_doe"],
    )
    email: EmailStr = Field(
        ...,
        max_length=100,
        description="User email address",
        examples=["john.doe@example.com"],
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="Password (6-100 characters)",
        examples=["Secure123!"],
    )
    confirm_password: str = Field(
        ...,
        description="Must repeat the password",
        examples=["Secure123!"],
    )
    user_type: UserType = Field(
        ...,
        description="Account role",
        examples=["EndUser"],
    )
    accept_terms: bool = Field(
        ...,
        description="Terms and conditions must be accepted",
        examples=[True],
    )

    @model_validator(mode="after")
    def check_confirmation(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Password and confirmation password do not match")
        if not self.accept_terms:
            raise ValueError("You must accept the terms and conditions")
        return self


class LoginRequest(CamelModel):
    """User login request schema."""

    username_or_email: str = Field(
        ...,
        min_length=1,
        description="Username or email",
        examples=["admin@example.com"],
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Password",
        examples=["Admin123!"],
    )
    remember_me: bool = Field(
        default=False,
        description="Also issue a refresh token",
    )


class TokenRequest(CamelModel):
    """Access token validation request schema."""

    token: str = Field(
        ...,
        min_length=1,
        description="JWT access token",
    )


class RefreshTokenRequest(CamelModel):
    """Refresh token request schema."""

    refresh_token: str = Field(
        ...,
        min_length=1,
        description="Refresh token",
    )


class LogoutRequest(CamelModel):
    """Logout request schema. Any token value is accepted."""

    token: str = Field(
        default="",
        description="Access token the client is discarding",
    )


class UserResponse(CamelModel):
    """User response schema. Never carries credentials."""

    id: int = Field(
        ...,
        description="User unique identifier",
        examples=[1],
    )
    username: str = Field(
        ...,
        description="Username",
        examples=["john_doe"],
    )
    email: str = Field(
        ...,
        description="User email address",
        examples=["john.doe@example.com"],
    )
    user_type: UserType = Field(
        ...,
        description="Account role",
        examples=["EndUser"],
    )
    is_active: bool = Field(
        ...,
        description="Whether user account is active",
        examples=[True],
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Account creation timestamp",
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Last account update timestamp",
    )


class AuthResponse(CamelModel):
    """Authentication result schema."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")
    token: Optional[str] = Field(None, description="JWT access token")
    refresh_token: Optional[str] = Field(None, description="Refresh token")
    expires_at: Optional[datetime] = Field(None, description="Access token expiry")
    user: Optional[UserResponse] = Field(None, description="Authenticated user")

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        """Build response from a core result."""
        return cls(
            success=result.success,
            message=result.message,
            token=result.token,
            refresh_token=result.refresh_token,
            expires_at=result.expires_at,
            user=UserResponse.model_validate(result.user) if result.user else None,
        )


class MessageResponse(CamelModel):
    """Plain success/message response schema."""

    success: bool
    message: str


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(
        ...,
        description="Error message",
        examples=["Access denied"],
    )
    type: str = Field(
        ...,
        description="Error type",
        examples=["HTTPException"],
    )
