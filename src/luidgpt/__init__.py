"""
LuidGPT - Python client for the LuidGPT AI generation marketplace.

This package provides an async HTTP client, secure credential storage and
typed data models for the LuidGPT REST API, plus a command-line interface
for browsing models, running generations and managing credits and workspaces.
"""

__version__ = "0.1.0"
__author__ = "LuidGPT Team"
__license__ = "Apache-2.0"

from typing import Final

# Package metadata
VERSION: Final[str] = __version__
PACKAGE_NAME: Final[str] = "luidgpt"
USER_AGENT: Final[str] = f"{PACKAGE_NAME}/{VERSION}"

__all__ = [
    "__version__",
    "VERSION",
    "PACKAGE_NAME",
    "USER_AGENT",
]
