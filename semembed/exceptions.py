"""Exception hierarchy for the semembed service.

Every error that reaches a client carries an HTTP status and an
OpenAI-style error ``type``. The API layer renders them as::

    {"error": {"message": "...", "type": "invalid_request_error"}}

Usage:
    from semembed.exceptions import InvalidRequestError

    raise InvalidRequestError("Input cannot be empty")
"""

from typing import Optional


class SemembedError(Exception):
    """Base exception for all semembed errors."""

    status_code = 500
    error_type = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Render the OpenAI-compatible error document."""
        return {"error": {"message": self.message, "type": self.error_type}}


class InvalidRequestError(SemembedError):
    """The request body is malformed or the input batch is empty.

    Never retried; the client has to fix the request.
    """

    status_code = 400
    error_type = "invalid_request_error"


class EngineFailure(SemembedError):
    """The embedding engine rejected the input or failed internally.

    Not retried: engine state after a failure is not assumed consistent.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class InternalError(SemembedError):
    """Infrastructure fault unrelated to the request payload."""


class ModelLoadError(SemembedError):
    """The embedding model could not be loaded at startup. Fatal."""
