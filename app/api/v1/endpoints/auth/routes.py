"""Authentication API routes."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_auth_service, get_current_user
from .schemas import (
    RegisterRequest,
    LoginRequest,
    TokenRequest,
    RefreshTokenRequest,
    LogoutRequest,
    AuthResponse,
    MessageResponse,
    UserResponse,
    ErrorResponse,
)
from app.core.auth.entities import AuthResult, User
from app.core.auth.services import AuthenticationService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _respond(result: AuthResult, failure_status: int) -> JSONResponse:
    """Render a core result with the status code for its outcome."""
    body = AuthResponse.from_result(result).model_dump(mode="json", by_alias=True)
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else failure_status,
        content=body,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate by username or email and return an access token.",
    responses={
        200: {"description": "Login successful"},
        400: {"model": AuthResponse, "description": "Invalid input data"},
        401: {"model": AuthResponse, "description": "Invalid credentials or inactive account"},
    },
)
async def login(
    credentials: LoginRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Authenticate user and return JWT access token.

    With ``rememberMe`` a refresh token is issued as well.
    """
    result = await auth_service.login(
        username_or_email=credentials.username_or_email,
        password=credentials.password,
        remember_me=credentials.remember_me,
    )
    return _respond(result, status.HTTP_401_UNAUTHORIZED)


@router.post(
    "/register",
    response_model=AuthResponse,
    summary="Register new user",
    description="Create a new account and return an access token.",
    responses={
        200: {"description": "Registration successful"},
        400: {"model": AuthResponse, "description": "Invalid input or username/email taken"},
    },
)
async def register(
    registration: RegisterRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Register a new user account.

    Username and email must be unique. No refresh token is issued; the user
    logs in separately to obtain one.
    """
    result = await auth_service.register(
        username=registration.username,
        email=registration.email,
        password=registration.password,
        user_type=registration.user_type,
    )
    return _respond(result, status.HTTP_400_BAD_REQUEST)


@router.post(
    "/validate",
    response_model=AuthResponse,
    summary="Validate access token",
    responses={
        200: {"description": "Token is valid"},
        400: {"model": AuthResponse, "description": "Token is required"},
        401: {"model": AuthResponse, "description": "Invalid token or inactive user"},
    },
)
async def validate_token(
    request: TokenRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> JSONResponse:
    """Resolve an access token to its active user."""
    result = await auth_service.validate_token(request.token)
    return _respond(result, status.HTTP_401_UNAUTHORIZED)


@router.post(
    "/refresh",
    response_model=AuthResponse,
    summary="Refresh access token",
    description="Exchange a refresh token for a new access and refresh token.",
    responses={
        200: {"description": "Token refreshed successfully"},
        400: {"model": AuthResponse, "description": "Refresh token is required"},
        401: {"model": AuthResponse, "description": "Invalid or expired refresh token"},
    },
)
async def refresh_token(
    request: RefreshTokenRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> JSONResponse:
    """
    Refresh access token using refresh token.

    The presented refresh token is rotated and stops working.
    """
    result = await auth_service.refresh_token(request.refresh_token)
    return _respond(result, status.HTTP_401_UNAUTHORIZED)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Logout",
    description="Acknowledge logout. Access tokens stay valid until they expire.",
)
async def logout(
    request: LogoutRequest,
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> MessageResponse:
    """
    Log out the client.

    Tokens are not invalidated server-side; the client discards them.
    """
    await auth_service.logout(request.token)
    return MessageResponse(success=True, message="Logout successful")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Get information about currently authenticated user.",
    responses={
        200: {"description": "User information retrieved"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
    },
)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Return the user behind the bearer token."""
    return UserResponse.model_validate(current_user)
