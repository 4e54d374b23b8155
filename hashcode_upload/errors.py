"""
Exceptions raised while uploading and submitting a solution to the judge.
"""

from typing import Optional


class JudgeUploadError(Exception):
    """Base class for every error this package raises."""


class StartupConfigurationError(JudgeUploadError):
    """Missing credential, data sets or build artifacts. Raised before any request is made."""


class ValidationError(JudgeUploadError):
    def __init__(self, message: str, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"{message}: " + "; ".join(self.errors))


class TransportError(JudgeUploadError):
    """A request to the judge failed or came back with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ResponseFormatError(TransportError):
    """The judge answered, but the body lacks the field we need."""
