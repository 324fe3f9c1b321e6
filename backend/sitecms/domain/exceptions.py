# sitecms/domain/exceptions.py
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .batch import BatchResult


class DomainError(Exception):
    """Base class for every error the core surfaces to its callers."""

    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class NotFound(DomainError):
    """Id does not resolve, or resolves outside the caller's site."""
    status_code = 404


class ValidationError(DomainError):
    status_code = 400


class InvariantViolation(ValidationError):
    pass


class CapExceeded(DomainError):
    status_code = 409

    def __init__(self, message: str = "", *, cap: Optional[int] = None):
        super().__init__(message)
        self.cap = cap


class Conflict(DomainError):
    status_code = 409


class StorageError(DomainError):
    status_code = 502

    def __init__(self, message: str = "", *, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class DecodeError(DomainError):
    status_code = 422


class EncodeError(DomainError):
    status_code = 500


class UploadBatchError(DomainError):
    """A multi-file upload stopped part way; earlier files stay uploaded."""
    status_code = 502

    def __init__(self, message: str, *, result: "BatchResult"):
        super().__init__(message)
        self.result = result


class SessionTerminated(DomainError):
    status_code = 401
