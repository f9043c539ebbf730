"""
CLI interface package for LuidGPT.

This package contains the Typer application and its command groups for
authentication, models, generations, workspaces and credits.
"""

__all__ = ["app"]
