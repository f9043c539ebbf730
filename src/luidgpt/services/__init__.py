"""
Services for LuidGPT.

Each service wraps one area of the REST API on top of an APIClient.
"""

from .auth import AuthService
from .users import UserService
from .models import ModelsService
from .generations import GenerationsService
from .workspaces import WorkspacesService
from .credits import CreditService
from .base import path_segment

__all__ = [
    "AuthService",
    "UserService",
    "ModelsService",
    "GenerationsService",
    "WorkspacesService",
    "CreditService",
    "path_segment",
]
