"""Application errors rendered as JSON by the exception handler in main."""

from typing import Any, Optional


class AppError(Exception):
    """An error with a stable code and the HTTP status to answer with.

    Attributes:
        code: Machine-readable error code.
        status_code: HTTP status for the response.
        message: Optional human-readable explanation.
        details: Optional structured payload merged into the response body.
    """

    code = "INTERNAL_ERROR"
    status_code = 500
    message: Optional[str] = None

    def __init__(self, message: Optional[str] = None, details: Optional[dict[str, Any]] = None):
        if message is not None:
            self.message = message
        self.details = details or {}
        super().__init__(self.message or self.code)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code}
        if self.message:
            body["message"] = self.message
        body.update(self.details)
        return body
