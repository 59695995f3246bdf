"""Admin-only user data routes."""

import logging

from fastapi import APIRouter, Depends

from app.api.dependencies import get_user_repository, require_admin
from app.api.v1.endpoints.auth.schemas import ErrorResponse, UserResponse
from app.infrastructure.database.repositories.user_repository import SqlUserRepository
from .schemas import UserListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List all user accounts. Requires an admin bearer token.",
    responses={
        200: {"description": "Users retrieved"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        403: {"model": ErrorResponse, "description": "Access denied"},
    },
)
async def list_users(
    _: str = Depends(require_admin),
    user_repository: SqlUserRepository = Depends(get_user_repository),
) -> UserListResponse:
    """Return every account without credentials."""
    users = await user_repository.list_users()
    logger.info(f"Admin listed {len(users)} users")
    return UserListResponse(data=[UserResponse.model_validate(user) for user in users])
