"""
Custom exceptions for the console.
"""

from __future__ import annotations


class ValidationError(Exception):
    """Exception for local validation failures."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResourceError(Exception):
    """A remote service answered with a non-success status."""

    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LicenseStatusError(ResourceError):
    """Exception for license status service failures."""
