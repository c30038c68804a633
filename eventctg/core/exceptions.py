"""Custom exception hierarchy for EventCTG."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import status


class ApplicationError(Exception):
    """Base application error with HTTP semantics."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "application_error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        **extra: Any,
    ) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.message = message
        self.extra: Dict[str, Any] = extra

    def to_payload(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, **self.extra}


class ValidationError(ApplicationError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class NotFoundError(ApplicationError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConnectivityError(ApplicationError):
    """Raised when the document store cannot be reached or a command fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "connectivity_error"


class StartupConfigError(Exception):
    """Raised when required configuration is absent; fatal before serving."""
