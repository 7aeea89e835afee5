# src/listings_dump/domain/errors.py
from __future__ import annotations

from typing import Any


class DumpError(RuntimeError):
    pass


class ConfigError(DumpError):
    pass


class SchemaInferenceError(DumpError):
    pass


class ProvisioningError(DumpError):
    pass


class DomainAPIError(DumpError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchError(DumpError):
    """
    Raised when a listings search fails. Keeps the request that caused it
    so the log line shows exactly which suburb/filter broke.
    """

    def __init__(self, request: Any, cause: BaseException) -> None:
        super().__init__(f"error searching domain for {request!r}: {cause}")
        self.request = request
        self.cause = cause


class InsertError(DumpError):
    pass
