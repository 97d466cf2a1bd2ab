"""
Domain exceptions.

Every error carries a stable ``code`` that the API layer maps to an HTTP
status (see ``clprompt.api.errors``).
"""

from typing import Optional


class DomainError(Exception):
    """Base class for domain-specific errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class SlideNotFoundError(DomainError):
    """Raised when a slide id is not part of the deck."""

    def __init__(self, slide_id: str):
        super().__init__(f"Slide {slide_id} not found", "SLIDE_NOT_FOUND")


class InvalidProjectNameError(DomainError):
    """Raised when a project name is blank."""

    def __init__(self, name: Optional[str]):
        super().__init__(f"Invalid project name: {name!r}", "INVALID_PROJECT_NAME")


class ExternalServiceError(DomainError):
    """Raised when an LLM service fails or returns an unusable reply."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(reason, "EXTERNAL_SERVICE_ERROR")


class StorageError(DomainError):
    """Raised when durable keyed storage cannot complete an operation."""

    def __init__(self, reason: str, code: str = "STORAGE_ERROR"):
        super().__init__(reason, code)


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the storage quota."""

    def __init__(self, key: str, quota_bytes: int):
        super().__init__(
            f"Storage quota of {quota_bytes} bytes exceeded writing {key}",
            "STORAGE_QUOTA_EXCEEDED",
        )
