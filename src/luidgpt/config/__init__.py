"""
Configuration package for LuidGPT.

This package contains settings management and .env file discovery.
"""

from .settings import LuidSettings, get_settings
from .env_loader import EnvFileLoader, load_env_with_hierarchy

__all__ = [
    "LuidSettings",
    "get_settings",
    "EnvFileLoader",
    "load_env_with_hierarchy",
]
