"""Custom exception classes for the application."""

from typing import Any


class BriefSyncError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# Data Errors
class ContentBriefNotFoundError(BriefSyncError):
    """Content brief not found."""

    def __init__(self, brief_id: str) -> None:
        super().__init__(f"Content brief not found: {brief_id}", {"brief_id": brief_id})


# Validation Errors
class ValidationError(BriefSyncError):
    """Data validation failed."""

    pass


class InvalidSectionEditError(ValidationError):
    """A local section edit cannot be applied to the live document."""

    def __init__(
        self, section: str, message: str, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            f"Invalid edit for section '{section}': {message}",
            {"section": section, **(details or {})},
        )
