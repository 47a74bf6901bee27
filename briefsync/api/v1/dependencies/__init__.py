"""Reusable API dependencies shared across v1 routes."""

from briefsync.api.v1.dependencies.brief_store import BriefStoreDep, get_brief_store

__all__ = ["BriefStoreDep", "get_brief_store"]
