from __future__ import annotations

from typing import Any, Dict, Optional


class TodoServiceError(Exception):
    """
    Base class for errors converted into HTTP responses at the request boundary.

    Attributes:
        status_code: HTTP status returned to the client.
        message: Human-readable summary placed in the response body.
        error: Optional underlying error text (backend failures only).
    """

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None) -> None:
        super().__init__(message if error is None else f"{message}: {error}")
        self.message = message
        self.error = error

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(TodoServiceError):
    status_code = 400


class NotFoundError(TodoServiceError):
    status_code = 404


class StoreError(TodoServiceError):
    """Backend read/write failure, including store calls that exceed their timeout."""

    status_code = 500


class RenderError(TodoServiceError):
    status_code = 500
