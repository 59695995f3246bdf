"""User listing API schemas."""

from typing import List

from pydantic import Field

from app.api.v1.endpoints.auth.schemas import CamelModel, UserResponse


class UserListResponse(CamelModel):
    """Admin user listing response schema."""

    success: bool = Field(
        default=True,
        description="Whether the listing succeeded",
    )
    data: List[UserResponse] = Field(
        ...,
        description="All registered users, ordered by ID",
    )
