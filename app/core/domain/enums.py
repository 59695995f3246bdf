"""Domain enums for the authentication service."""

from enum import Enum
from typing import Optional


class UserType(str, Enum):
    """Account role enumeration."""

    END_USER = "EndUser"
    ADMIN = "Admin"
    PARTNER = "Partner"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["UserType"]:
        """Return the matching role, or None for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return None
