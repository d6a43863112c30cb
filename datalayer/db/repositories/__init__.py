"""Database repositories for data access."""

from .base import AsyncRepository, Repository

__all__ = ["AsyncRepository", "Repository"]
