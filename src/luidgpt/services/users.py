"""
User profile service.
"""

from typing import Any, Dict

from ..models import User, UserResponse
from .base import BaseService


class UserService(BaseService):
    async def get_profile(self) -> User:
        response = await self.client.get("/auth/profile", response_model=UserResponse)
        return response.user

    async def update_profile(self, updates: Dict[str, Any]) -> User:
        """Send profile changes (camelCase keys, e.g. ``firstName``) and return the updated user."""
        response = await self.client.put("/users/profile", updates, response_model=UserResponse)
        return response.user
