"""Version-control helpers."""

from .repository import RepositoryContext, RepositoryResolver

__all__ = ["RepositoryContext", "RepositoryResolver"]
